"""Bridge to the external ``puppet-lint`` executable."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

_logger = logging.getLogger(__name__)

DEFAULT_LINTER_COMMAND = "puppet-lint"
DEFAULT_LINTER_TIMEOUT = 60.0


@dataclass(frozen=True)
class LinterOutput:
    """Lines reported by the linter, or the reason it could not run."""

    lines: Tuple[str, ...] = ()
    error: Optional[str] = None


class LinterRunner(Protocol):
    """Anything that can lint a single manifest."""

    def run(self, path: Union[str, Path]) -> LinterOutput:
        """Lint ``path`` and return its output lines or a tool error."""


class PuppetLint:
    """Run ``puppet-lint <file>`` as a blocking subprocess with a timeout."""

    def __init__(self, command: str = DEFAULT_LINTER_COMMAND, timeout: Optional[float] = DEFAULT_LINTER_TIMEOUT) -> None:
        self.command = command
        # 0 or None disables the timeout.
        self.timeout = timeout or None

    def run(self, path: Union[str, Path]) -> LinterOutput:
        try:
            completed = subprocess.run(
                [self.command, str(path)],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            _logger.warning("Linter executable %r not found", self.command)
            return LinterOutput(error=f"executable '{self.command}' not found")
        except subprocess.TimeoutExpired:
            _logger.warning("Linter %r timed out on %s after %ss", self.command, path, self.timeout)
            return LinterOutput(error=f"timed out after {self.timeout:g}s")
        except OSError as exc:
            _logger.warning("Linter %r could not start: %s", self.command, exc)
            return LinterOutput(error=str(exc))

        return parse_linter_output(completed.stdout, completed.stderr, completed.returncode)


def parse_linter_output(stdout: str, stderr: str, returncode: int) -> LinterOutput:
    """Map captured process output onto a ``LinterOutput``.

    Any stdout wins, even alongside a non-zero exit status. A failing run
    with empty stdout is a tool error carrying stderr.
    """

    lines = tuple(line for line in (stdout or "").splitlines() if line.strip())
    if lines:
        return LinterOutput(lines=lines)
    if returncode != 0:
        message = (stderr or "").strip() or f"exit status {returncode}"
        return LinterOutput(error=message)
    return LinterOutput()
