"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.ERROR,
    Severity.WARN,
    Severity.INFO,
)


@dataclass(frozen=True)
class Finding:
    """Capture a single check result for one file."""

    file: str
    severity: Severity
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "File": self.file,
            "Severity": self.severity.value,
            "Message": self.message,
        }


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    error: int = 0
    warn: int = 0
    info: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value.lower())) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value.lower()) for severity in SEVERITY_ORDER)

    @property
    def highest(self) -> Optional[Severity]:
        for severity in SEVERITY_ORDER:
            if getattr(self, severity.value.lower()) > 0:
                return severity
        return None


@dataclass
class ScanResult:
    """Ordered findings for one scan invocation plus their summary."""

    summary: Summary = field(default_factory=Summary)
    findings: List[Finding] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.summary.error == 0

    def add_finding(self, finding: Finding) -> None:
        self.summary.increment(finding.severity)
        self.findings.append(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add_finding(finding)

    def exit_code(self, threshold: Severity = Severity.ERROR) -> int:
        """Return 1 when any finding reaches ``threshold``, otherwise 0."""

        highest = self.summary.highest
        if highest is not None and highest >= threshold:
            return 1
        return 0


def format_summary_table(result: ScanResult) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Scan Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if result.passed else "FAIL"
    lines.append(f"Status    : {status}")
    lines.append(f"Findings  : {result.summary.total}")
    return "\n".join(lines)
