"""Exception types raised by the scanner."""

from __future__ import annotations


class InfraCheckError(Exception):
    """Base class for scanner errors."""


class ScanError(InfraCheckError):
    """The scan could not run at all, e.g. the root path is missing."""


class ParseError(InfraCheckError):
    """A single file could not be normalized into scannable units."""


class ConfigError(InfraCheckError):
    """Scanner configuration is missing or invalid."""
