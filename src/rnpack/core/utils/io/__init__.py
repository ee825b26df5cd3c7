"""I/O utilities for rnpack.

- Core: atomic writes, directory management
- JSON: run record persistence
- YAML: configuration reads
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    remove_file,
)
from .json import read_json, write_json_atomic
from .yaml import dump_yaml_string, parse_yaml_scalar, read_yaml

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "remove_file",
    # json
    "read_json",
    "write_json_atomic",
    # yaml
    "read_yaml",
    "parse_yaml_scalar",
    "dump_yaml_string",
]
