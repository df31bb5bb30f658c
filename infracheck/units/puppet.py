"""Puppet manifests are checked as raw text."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

from infracheck.utils import read_text_file


@dataclass(frozen=True)
class Manifest:
    path: str
    text: str

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")

    def get(self, name: str, default: Any = None) -> Any:
        if name == "text":
            return self.text
        if name == "lines":
            return self.lines
        return default

    def attribute_names(self) -> List[str]:
        return ["text", "lines"]


def load_manifest(path: Path) -> Manifest:
    """Read a manifest from disk. ``OSError`` propagates."""

    return Manifest(path=str(path), text=read_text_file(path))
