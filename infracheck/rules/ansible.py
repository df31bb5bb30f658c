"""Checks for Ansible playbooks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Set

from infracheck.catalog import (
    ANSIBLE_DEPRECATED_MODULES,
    ANSIBLE_RESERVED_TASK_KEYS,
    REQUIRED_TASK_FIELDS,
)
from infracheck.errors import ParseError
from infracheck.result import Finding, ScanResult
from infracheck.severity import Severity
from infracheck.units.ansible import Play, Task, parse_playbook
from infracheck.utils import read_text_file

from . import secret_string_attributes

_logger = logging.getLogger(__name__)

TEMPLATE_OPEN = "{{"
TEMPLATE_CLOSE = "}}"

# ----------------------------------------------------------------------
# Play checks
# ----------------------------------------------------------------------
def check_play_hosts(path: str, play: Play) -> List[Finding]:
    if play.hosts is None:
        return [Finding(path, Severity.WARN, "Play missing required field 'hosts'")]
    return []


# ----------------------------------------------------------------------
# Task checks
# ----------------------------------------------------------------------
def check_become(path: str, task: Task) -> List[Finding]:
    if not task.has("become"):
        return [
            Finding(path, Severity.WARN, "Task missing 'become' field (no privilege escalation specified)")
        ]
    if task.get("become") is False:
        return [Finding(path, Severity.WARN, "'become' is false in task (possible privilege issue)")]
    return []


def check_required_fields(path: str, task: Task) -> List[Finding]:
    return [
        Finding(path, Severity.WARN, f"Task missing required field '{field}'")
        for field in REQUIRED_TASK_FIELDS
        if not task.has(field)
    ]


def check_deprecated_modules(path: str, task: Task) -> List[Finding]:
    findings: List[Finding] = []
    for key in task.attribute_names():
        if key in ANSIBLE_RESERVED_TASK_KEYS:
            continue
        rationale = ANSIBLE_DEPRECATED_MODULES.get(key)
        if rationale is not None:
            findings.append(Finding(path, Severity.WARN, f"Use of deprecated module '{key}': {rationale}"))
    return findings


def check_secret_attributes(path: str, task: Task) -> List[Finding]:
    return [
        Finding(path, Severity.ERROR, f"Possible hardcoded secret in attribute '{key}'")
        for key, value in secret_string_attributes(task)
        if value.strip() != ""
    ]


TASK_CHECKS = (
    check_become,
    check_required_fields,
    check_deprecated_modules,
    check_secret_attributes,
)


# ----------------------------------------------------------------------
# Variable usage
# ----------------------------------------------------------------------
def referenced_variables(task: Task) -> List[str]:
    """Return names written as ``{{ name }}`` in the task's string values."""

    names: List[str] = []
    for _, value in task.string_values():
        if TEMPLATE_OPEN not in value or TEMPLATE_CLOSE not in value:
            continue
        # Each segment after an opening brace pair names one reference.
        for part in value.split(TEMPLATE_OPEN)[1:]:
            name = part.split(TEMPLATE_CLOSE)[0].strip()
            if name:
                names.append(name)
    return names


def check_unused_variables(path: str, plays: Sequence[Play]) -> List[Finding]:
    """Flag play ``vars`` never referenced anywhere in this file.

    This is lexical: any ``{{ name }}`` occurrence in a top-level task
    string counts as a use, regardless of play or scope.
    """

    defined: Dict[str, None] = {}
    used: Set[str] = set()
    for play in plays:
        for name in play.vars:
            defined.setdefault(name, None)
        for task in play.tasks:
            used.update(referenced_variables(task))
    return [
        Finding(path, Severity.WARN, f"Variable '{name}' defined but not used")
        for name in defined
        if name not in used
    ]


def check_playbook(path: str, plays: Sequence[Play]) -> List[Finding]:
    """Run every playbook check in declared order."""

    findings: List[Finding] = []
    for play in plays:
        findings.extend(check_play_hosts(path, play))
        for task in play.tasks:
            for check in TASK_CHECKS:
                findings.extend(check(path, task))
    findings.extend(check_unused_variables(path, plays))
    return findings


class AnsibleRule:
    """Flag privilege, naming, module and secret issues in playbooks."""

    name = "ansible"
    extensions = (".yml", ".yaml")

    def scan_file(self, path: Path, result: ScanResult) -> None:
        file_name = str(path)
        try:
            text = read_text_file(path)
        except OSError as exc:
            result.add_finding(Finding(file_name, Severity.ERROR, f"Failed to read file: {exc}"))
            return
        try:
            plays = parse_playbook(text)
        except ParseError as exc:
            _logger.info("Skipping unparsable playbook %s: %s", file_name, exc)
            result.add_finding(Finding(file_name, Severity.ERROR, f"YAML parse error: {exc}"))
            return

        result.extend(check_playbook(file_name, plays))
