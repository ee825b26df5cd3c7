"""YAML I/O utilities."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any

import yaml


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate parse and read errors. A missing
            file still returns ``default``.

    Examples:
        >>> config = read_yaml(Path("config.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def parse_yaml_scalar(raw: str) -> Any:
    """Parse an environment override value the way YAML would read it.

    ``"8082"`` becomes ``8082``, ``"true"`` becomes ``True``. Values that do
    not parse are returned unchanged.
    """
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def dump_yaml_string(data: Any, sort_keys: bool = True) -> str:
    """Dump data to a YAML string."""
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


__all__ = [
    "read_yaml",
    "parse_yaml_scalar",
    "dump_yaml_string",
]
