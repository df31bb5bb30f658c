"""Scanner configuration: defaults, optional JSON file, environment, CLI."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError
from .linter import DEFAULT_LINTER_COMMAND, DEFAULT_LINTER_TIMEOUT
from .severity import Severity

_logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".infra-check.json"
ENV_LINTER_COMMAND = "INFRA_CHECK_LINTER"
ENV_LINTER_TIMEOUT = "INFRA_CHECK_LINTER_TIMEOUT"
REPORT_FORMATS = ("text", "json", "markdown", "gha")


@dataclass(frozen=True)
class ScanConfig:
    """Settings that shape how a scan runs and is reported."""

    report_format: str = "text"
    fail_on: str = "error"
    linter_command: str = DEFAULT_LINTER_COMMAND
    linter_timeout: float = DEFAULT_LINTER_TIMEOUT

    @property
    def threshold(self) -> Severity:
        return Severity.from_threshold(self.fail_on)

    def validate(self) -> "ScanConfig":
        if self.report_format not in REPORT_FORMATS:
            raise ConfigError(f"Unknown report format {self.report_format!r}; choose from {', '.join(REPORT_FORMATS)}")
        try:
            Severity.from_threshold(self.fail_on)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if not self.linter_command:
            raise ConfigError("Linter command must not be empty")
        if self.linter_timeout < 0:
            raise ConfigError("Linter timeout must be zero (disabled) or positive")
        return self


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ScanConfig:
    """Build a ``ScanConfig`` from the config file, environment and overrides.

    ``path`` names an explicit config file, which must exist. Without it the
    default ``.infra-check.json`` in the working directory is read if present.
    ``overrides`` entries set to ``None`` are ignored.
    """

    config = ScanConfig()
    config = replace(config, **_read_config_file(path))
    config = replace(config, **_read_environment(os.environ if environ is None else environ))
    if overrides:
        config = replace(config, **{key: value for key, value in overrides.items() if value is not None})
    return config.validate()


def _read_config_file(path: Optional[str]) -> Dict[str, Any]:
    explicit = path is not None
    config_path = Path(path) if explicit else Path(CONFIG_FILENAME)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        if explicit:
            raise ConfigError(f"Failed to read config file {config_path}: {exc}") from exc
        _logger.warning("Ignoring unreadable config file %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    values: Dict[str, Any] = {}
    if "format" in data:
        values["report_format"] = str(data["format"])
    if "fail_on" in data:
        values["fail_on"] = str(data["fail_on"])
    linter = data.get("linter") or {}
    if not isinstance(linter, dict):
        raise ConfigError(f"Config file {config_path}: 'linter' must be an object")
    if "command" in linter:
        values["linter_command"] = str(linter["command"])
    if "timeout" in linter:
        values["linter_timeout"] = _parse_timeout(linter["timeout"], f"{config_path}: linter.timeout")
    return values


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    command = environ.get(ENV_LINTER_COMMAND, "")
    if command:
        values["linter_command"] = command
    timeout = environ.get(ENV_LINTER_TIMEOUT, "")
    if timeout:
        values["linter_timeout"] = _parse_timeout(timeout, ENV_LINTER_TIMEOUT)
    return values


def _parse_timeout(value: Any, source: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{source} must be a number of seconds, got {value!r}") from None
