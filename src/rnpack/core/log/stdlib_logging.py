from __future__ import annotations

import logging
import sys
from pathlib import Path

from rnpack.core.utils.io import ensure_directory

_CONFIGURED_LOG_PATH: str | None = None
_RNPACK_FILE_HANDLER: logging.Handler | None = None
_RNPACK_STDERR_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(
    *,
    log_path: Path | None,
    level: str = "INFO",
    echo_channels: bool = False,
) -> None:
    """Configure stdlib logging to write to ``log_path``.

    With ``echo_channels`` the ``rnpack.channel`` logger is also echoed to
    stderr so CLI users see channel messages as they happen.

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _RNPACK_FILE_HANDLER, _RNPACK_STDERR_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if echo_channels and _RNPACK_STDERR_HANDLER is None:
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("%(message)s"))
        sh.addFilter(logging.Filter("rnpack.channel"))
        root.addHandler(sh)
        _RNPACK_STDERR_HANDLER = sh

    if log_path is None:
        return

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _RNPACK_FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    # Replace the rnpack-installed file handler when switching paths.
    if _RNPACK_FILE_HANDLER is not None:
        root.removeHandler(_RNPACK_FILE_HANDLER)
        _RNPACK_FILE_HANDLER.close()
        _RNPACK_FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(fh)

    _RNPACK_FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handlers installed by configure_stdlib_logging."""
    global _CONFIGURED_LOG_PATH, _RNPACK_FILE_HANDLER, _RNPACK_STDERR_HANDLER
    root = logging.getLogger()
    for h in (_RNPACK_FILE_HANDLER, _RNPACK_STDERR_HANDLER):
        if h is not None:
            root.removeHandler(h)
            h.close()
    _CONFIGURED_LOG_PATH = None
    _RNPACK_FILE_HANDLER = None
    _RNPACK_STDERR_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
