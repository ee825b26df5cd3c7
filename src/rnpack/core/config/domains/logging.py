"""Logging settings: level and log file location."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level") or "INFO").upper()

    @cached_property
    def log_path(self) -> Path | None:
        raw = self.section.get("file")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        if not path.is_absolute():
            path = self.workspace_root / path
        return path


__all__ = ["LoggingConfig"]
