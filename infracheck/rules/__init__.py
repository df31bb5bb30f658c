"""Rule registry for scanner."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Protocol, Tuple

from infracheck.catalog import contains_secret_keyword
from infracheck.result import ScanResult
from infracheck.units import ScannableUnit


class Rule(Protocol):
    """Protocol implemented by each dialect's rule set."""

    name: str
    extensions: Tuple[str, ...]

    def scan_file(self, path: Path, result: ScanResult) -> None:
        """Analyze one file and append its findings to ``result`` in check order."""


def secret_string_attributes(unit: ScannableUnit) -> Iterator[Tuple[str, str]]:
    """Yield ``(name, value)`` for string attributes whose name looks secret-bearing."""

    for name in unit.attribute_names():
        if not contains_secret_keyword(name):
            continue
        value = unit.get(name)
        if isinstance(value, str):
            yield name, value
