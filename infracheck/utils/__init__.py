"""Utility helpers for the scanner."""

from .fileio import load_yaml_text, read_text_file
from .walk import iter_files

__all__ = [
    "load_yaml_text",
    "read_text_file",
    "iter_files",
]
