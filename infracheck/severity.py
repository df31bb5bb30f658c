"""Severity definitions for scanner findings."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels for findings.

    Members are ordered ``INFO < WARN < ERROR``.
    """

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def rank(self) -> int:
        """Return an integer ranking to drive ordering and exit code decisions."""

        ordering = {
            Severity.INFO: 0,
            Severity.WARN: 1,
            Severity.ERROR: 2,
        }
        return ordering[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def from_threshold(cls, name: str) -> "Severity":
        """Map a threshold name such as ``warn`` to its severity."""

        aliases = {
            "info": cls.INFO,
            "warn": cls.WARN,
            "warning": cls.WARN,
            "error": cls.ERROR,
        }
        try:
            return aliases[str(name).strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown severity threshold: {name!r}") from None


THRESHOLD_CHOICES = ("info", "warn", "error")
