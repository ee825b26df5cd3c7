"""
rnpack data resource helpers.

Bundled configuration defaults are accessed through importlib.resources so
they resolve the same way from a source checkout and an installed wheel.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/rnpack/data/config/defaults.yaml')
    """
    pkg = resources.files("rnpack.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
