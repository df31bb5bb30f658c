"""Walk a tree, run one dialect's rule per file and aggregate the findings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .config import ScanConfig
from .errors import ScanError
from .linter import LinterRunner, PuppetLint
from .result import Finding, ScanResult
from .rules import Rule
from .rules.ansible import AnsibleRule
from .rules.puppet import PuppetRule
from .rules.terraform import TerraformRule
from .severity import Severity
from .utils import iter_files

_logger = logging.getLogger(__name__)

DIALECTS = ("terraform", "ansible", "puppet")


def get_rule(dialect: str, config: Optional[ScanConfig] = None, linter: Optional[LinterRunner] = None) -> Rule:
    """Return the rule for ``dialect``, wiring the linter from ``config`` for puppet."""

    config = config or ScanConfig()
    if dialect == "terraform":
        return TerraformRule()
    if dialect == "ansible":
        return AnsibleRule()
    if dialect == "puppet":
        if linter is None:
            linter = PuppetLint(command=config.linter_command, timeout=config.linter_timeout)
        return PuppetRule(linter=linter)
    raise ValueError(f"Unknown dialect {dialect!r}; choose from {', '.join(DIALECTS)}")


def scan(root: Union[str, Path], rule: Rule) -> ScanResult:
    """Scan every matching file under ``root`` with ``rule``.

    Findings keep walk order, and within a file the rule's check order.
    Per-file failures become ``ERROR`` findings; only a traversal failure
    raises ``ScanError``.
    """

    result = ScanResult()
    files = iter_files(root, rule.extensions)
    while True:
        try:
            path = next(files)
        except StopIteration:
            break
        except OSError as exc:
            raise ScanError(f"Cannot traverse {root}: {exc}") from exc
        _logger.debug("Scanning %s with %s rule", path, rule.name)
        _scan_file(rule, path, result)
    _logger.info("Scanned %s with %s rule: %d findings", root, rule.name, result.summary.total)
    return result


def _scan_file(rule: Rule, path: Path, result: ScanResult) -> None:
    # Findings emitted before a crash are kept; the file's remaining checks are skipped.
    try:
        rule.scan_file(path, result)
    except Exception as exc:  # pylint: disable=broad-except
        _logger.exception("Internal error while scanning %s", path)
        result.add_finding(Finding(str(path), Severity.ERROR, f"Internal error while scanning file: {exc}"))


def scan_terraform(root: Union[str, Path]) -> ScanResult:
    return scan(root, TerraformRule())


def scan_ansible(root: Union[str, Path]) -> ScanResult:
    return scan(root, AnsibleRule())


def scan_puppet(root: Union[str, Path], linter: Optional[LinterRunner] = None) -> ScanResult:
    return scan(root, PuppetRule(linter=linter))
