"""infra-check: static analysis for Terraform, Ansible and Puppet code."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("infra-check")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
