"""JSON I/O utilities with atomic writes and advisory locks."""
from __future__ import annotations

import fcntl
import json
from pathlib import Path
from typing import Any, Callable, Dict

from .core import atomic_write

DEFAULT_JSON_CONFIG: Dict[str, Any] = {
    "indent": 2,
    "sort_keys": True,
    "ensure_ascii": False,
    "encoding": "utf-8",
}


def _json_writer(data: Any, cfg: Dict[str, Any]) -> Callable[[Any], None]:
    def _writer(f):
        json.dump(
            data,
            f,
            indent=cfg["indent"],
            sort_keys=cfg["sort_keys"],
            ensure_ascii=cfg["ensure_ascii"],
        )

    return _writer


_MISSING = object()


def read_json(file_path: Path | str, *, default: Any = _MISSING) -> Any:
    """Read JSON with a shared lock.

    Args:
        file_path: Path to JSON file
        default: Value to return if file doesn't exist (optional).
                 If not provided, FileNotFoundError is raised.

    Raises:
        FileNotFoundError: If the file does not exist and no default is provided
    """
    path = Path(file_path)
    if not path.exists():
        if default is not _MISSING:
            return default
        raise FileNotFoundError(f"JSON file not found: {path}")

    with open(path, "r", encoding=DEFAULT_JSON_CONFIG["encoding"]) as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        data = json.load(f)
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    return data


def write_json_atomic(file_path: Path | str, data: Any) -> None:
    """Atomically write JSON to ``file_path``."""
    cfg = DEFAULT_JSON_CONFIG
    atomic_write(Path(file_path), _json_writer(data, cfg), encoding=cfg["encoding"])


__all__ = [
    "DEFAULT_JSON_CONFIG",
    "read_json",
    "write_json_atomic",
]
