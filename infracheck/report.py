"""Render findings as text, Markdown, JSON or GitHub Actions annotations."""

from __future__ import annotations

import json
from typing import Callable, Dict, List, Sequence

from .result import Finding, ScanResult, format_summary_table
from .severity import Severity

ANNOTATION_ESCAPES = (
    ("%", "%25"),
    ("\r", "%0D"),
    ("\n", "%0A"),
    (":", "%3A"),
    (",", "%2C"),
)


def format_text(findings: Sequence[Finding]) -> str:
    return "\n".join(f"[{f.severity.value}] {f.file}: {f.message}" for f in findings)


def format_markdown(findings: Sequence[Finding]) -> str:
    lines: List[str] = ["# InfraCheck Report", ""]
    if not findings:
        lines.append("No issues found.")
    for f in findings:
        lines.append(f"- **[{f.severity.value}]** `{f.file}`: {f.message}")
    return "\n".join(lines) + "\n"


def format_json(findings: Sequence[Finding]) -> str:
    return json.dumps([finding.to_dict() for finding in findings], indent=2)


def escape_annotation(message: str) -> str:
    """Percent-escape a message for a workflow command, in a fixed order."""

    for old, new in ANNOTATION_ESCAPES:
        message = message.replace(old, new)
    return message


def annotation_level(severity: Severity) -> str:
    if severity is Severity.ERROR:
        return "error"
    if severity is Severity.WARN:
        return "warning"
    return "notice"


def format_gha(findings: Sequence[Finding]) -> str:
    return "".join(
        f"::{annotation_level(f.severity)} file={f.file}::{escape_annotation(f.message)}\n" for f in findings
    )


FORMATTERS: Dict[str, Callable[[Sequence[Finding]], str]] = {
    "text": format_text,
    "markdown": format_markdown,
    "json": format_json,
    "gha": format_gha,
}


def render(result: ScanResult, report_format: str) -> str:
    """Render ``result`` in ``report_format``; text also carries the summary table."""

    try:
        formatter = FORMATTERS[report_format]
    except KeyError:
        raise ValueError(f"Unknown report format {report_format!r}") from None
    output = formatter(result.findings)
    if report_format == "text":
        summary = format_summary_table(result)
        return f"{output}\n\n{summary}" if output else summary
    return output
