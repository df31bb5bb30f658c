"""Checks for Puppet manifests, combining puppet-lint with text heuristics."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from infracheck.catalog import PUPPET_DEPRECATED_RESOURCES, PUPPET_DISALLOWED_PARAMETERS
from infracheck.linter import LinterOutput, LinterRunner, PuppetLint
from infracheck.result import Finding, ScanResult
from infracheck.severity import Severity
from infracheck.units.puppet import Manifest, load_manifest

_logger = logging.getLogger(__name__)

CLASS_DECLARATION_PATTERN = re.compile(r"^\s*class\s+[\w:]+", re.MULTILINE)
HARDCODED_PASSWORD_PATTERN = re.compile(r"password\s*=>\s*[\"'].*[\"']", re.IGNORECASE)
TRAILING_WHITESPACE_PATTERN = re.compile(r"[\t\n\f\r ]+$")


def linter_findings(path: str, output: LinterOutput) -> List[Finding]:
    """Turn linter output into findings: one warning per line, else the tool error."""

    if output.lines:
        return [Finding(path, Severity.WARN, line) for line in output.lines]
    if output.error:
        return [Finding(path, Severity.ERROR, f"puppet-lint error: {output.error}")]
    return []


def check_deprecated_resources(path: str, manifest: Manifest) -> List[Finding]:
    return [
        Finding(path, Severity.WARN, f"Deprecated resource type '{resource}' used")
        for resource in PUPPET_DEPRECATED_RESOURCES
        if resource in manifest.text
    ]


def check_class_declaration(path: str, manifest: Manifest) -> List[Finding]:
    if CLASS_DECLARATION_PATTERN.search(manifest.text):
        return []
    return [Finding(path, Severity.WARN, "No class declaration found in manifest")]


def check_hardcoded_password(path: str, manifest: Manifest) -> List[Finding]:
    match = HARDCODED_PASSWORD_PATTERN.search(manifest.text)
    if match is None:
        return []
    line_number = manifest.text.count("\n", 0, match.start()) + 1
    return [Finding(path, Severity.ERROR, f"Possible hardcoded password detected on line {line_number}")]


def check_trailing_whitespace(path: str, manifest: Manifest) -> List[Finding]:
    return [
        Finding(path, Severity.WARN, f"Trailing whitespace on line {number}")
        for number, line in enumerate(manifest.lines, start=1)
        if TRAILING_WHITESPACE_PATTERN.search(line)
    ]


def check_disallowed_parameters(path: str, manifest: Manifest) -> List[Finding]:
    return [
        Finding(path, Severity.WARN, f"Disallowed parameter '{param}' used")
        for param in PUPPET_DISALLOWED_PARAMETERS
        if param in manifest.text
    ]


MANIFEST_CHECKS = (
    check_deprecated_resources,
    check_class_declaration,
    check_hardcoded_password,
    check_trailing_whitespace,
    check_disallowed_parameters,
)


def check_manifest(path: str, manifest: Manifest) -> List[Finding]:
    findings: List[Finding] = []
    for check in MANIFEST_CHECKS:
        findings.extend(check(path, manifest))
    return findings


class PuppetRule:
    """Run puppet-lint and the static manifest checks on each ``.pp`` file."""

    name = "puppet"
    extensions = (".pp",)

    def __init__(self, linter: Optional[LinterRunner] = None) -> None:
        self._linter = linter if linter is not None else PuppetLint()

    def scan_file(self, path: Path, result: ScanResult) -> None:
        file_name = str(path)
        output = self._linter.run(path)
        if output.error and not output.lines:
            _logger.warning("puppet-lint failed for %s: %s", file_name, output.error)
        result.extend(linter_findings(file_name, output))

        try:
            manifest = load_manifest(path)
        except OSError as exc:
            result.add_finding(Finding(file_name, Severity.ERROR, f"Failed to read file: {exc}"))
            return

        result.extend(check_manifest(file_name, manifest))
