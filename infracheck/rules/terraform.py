"""Checks for Terraform resource and variable blocks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Tuple

from infracheck.catalog import (
    PUBLIC_READ_ACL,
    REQUIRED_TAGS,
    STORAGE_BUCKET_TYPE,
    TERRAFORM_DEPRECATED_RESOURCES,
    contains_secret_keyword,
)
from infracheck.errors import ParseError
from infracheck.result import Finding, ScanResult
from infracheck.severity import Severity
from infracheck.units.terraform import Block, parse_terraform
from infracheck.utils import read_text_file

from . import secret_string_attributes

_logger = logging.getLogger(__name__)

BlockCheck = Callable[[str, Block], List[Finding]]


# ----------------------------------------------------------------------
# Resource checks
# ----------------------------------------------------------------------
def check_deprecated_resource(path: str, block: Block) -> List[Finding]:
    rationale = TERRAFORM_DEPRECATED_RESOURCES.get(block.type)
    if rationale is None:
        return []
    return [Finding(path, Severity.WARN, f"Resource type '{block.type}' is deprecated: {rationale}")]


def check_public_bucket(path: str, block: Block) -> List[Finding]:
    if block.type != STORAGE_BUCKET_TYPE:
        return []
    acl = block.get("acl")
    if isinstance(acl, str) and acl == PUBLIC_READ_ACL:
        return [Finding(path, Severity.WARN, "S3 bucket ACL is set to public-read (publicly readable)")]
    return []


def check_required_tags(path: str, block: Block) -> List[Finding]:
    if not block.has("tags"):
        return [Finding(path, Severity.WARN, "Resource missing 'tags' attribute entirely")]
    tags = block.get("tags")
    if not isinstance(tags, dict):
        # Unresolved or not a map: nothing to compare against.
        return []
    return [
        Finding(path, Severity.WARN, f"Resource missing required tag '{tag}'")
        for tag in REQUIRED_TAGS
        if tag not in tags
    ]


def check_secret_attributes(path: str, block: Block) -> List[Finding]:
    return [
        Finding(path, Severity.ERROR, f"Resource attribute '{name}' may contain hardcoded secret")
        for name, value in secret_string_attributes(block)
        if value != ""
    ]


# ----------------------------------------------------------------------
# Variable checks
# ----------------------------------------------------------------------
def check_variable_default(path: str, block: Block) -> List[Finding]:
    if not contains_secret_keyword(block.name):
        return []
    default = block.get("default")
    if isinstance(default, str) and default != "":
        return [Finding(path, Severity.ERROR, f"Variable '{block.name}' has a hardcoded default secret")]
    return []


RESOURCE_CHECKS: Tuple[BlockCheck, ...] = (
    check_deprecated_resource,
    check_public_bucket,
    check_required_tags,
    check_secret_attributes,
)
VARIABLE_CHECKS: Tuple[BlockCheck, ...] = (check_variable_default,)


def check_block(path: str, block: Block) -> List[Finding]:
    """Run every check that applies to ``block`` in declared order."""

    checks = RESOURCE_CHECKS if block.kind == "resource" else VARIABLE_CHECKS
    findings: List[Finding] = []
    for check in checks:
        findings.extend(check(path, block))
    return findings


class TerraformRule:
    """Flag risky, deprecated or untagged Terraform resources."""

    name = "terraform"
    extensions = (".tf",)

    def scan_file(self, path: Path, result: ScanResult) -> None:
        file_name = str(path)
        try:
            blocks = parse_terraform(read_text_file(path))
        except OSError as exc:
            result.add_finding(Finding(file_name, Severity.ERROR, f"Failed to read file: {exc}"))
            return
        except ParseError as exc:
            _logger.info("Skipping unparsable file %s: %s", file_name, exc)
            result.add_finding(Finding(file_name, Severity.ERROR, f"Failed to parse HCL file: {exc}"))
            return

        for block in blocks:
            result.extend(check_block(file_name, block))
