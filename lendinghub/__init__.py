"""Mortgage calculators for the Lending Resource Hub.

This module also exposes the package version for runtime display."""

from importlib import metadata

__all__ = ["__version__"]

try:
    __version__ = metadata.version("lending-resource-hub-calculators")
except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
    __version__ = "0.1.0"
