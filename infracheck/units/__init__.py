"""Scannable units produced by the per-dialect normalizers."""

from __future__ import annotations

from typing import Any, List, Protocol


class ScannableUnit(Protocol):
    """Minimal capability every dialect unit exposes to the checks."""

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value stored under ``name`` or ``default``."""

    def attribute_names(self) -> List[str]:
        """Return every attribute name in source order."""
