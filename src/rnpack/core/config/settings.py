"""Convenience lookups over workspace settings."""
from __future__ import annotations

from pathlib import Path

from .domains import PackagerSettings


class SettingsHelper:
    @staticmethod
    def get_packager_port(workspace_root: Path) -> int:
        return PackagerSettings(workspace_root).port

    @staticmethod
    def get_packager_host(workspace_root: Path) -> str:
        return PackagerSettings(workspace_root).host


__all__ = ["SettingsHelper"]
