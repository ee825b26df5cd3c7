"""Packager settings for a workspace.

Reads the ``packager`` section: host/port the packager listens on, the
launch command, per-mode extra arguments, timeouts and the state directory
used for run records and packager logs.
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Optional

from rnpack.core.packager.models import DEFAULT_HOST, PackagerConfig

from ..base import BaseDomainConfig


class PackagerSettings(BaseDomainConfig):
    def _config_section(self) -> str:
        return "packager"

    @cached_property
    def port(self) -> int:
        return self.packager_config().port

    @cached_property
    def host(self) -> str:
        return str(self.section.get("host") or DEFAULT_HOST)

    def packager_config(self, project_root: Optional[Path] = None) -> PackagerConfig:
        return PackagerConfig.from_raw(
            self.section,
            project_root=project_root or self.workspace_root,
            workspace_root=self.workspace_root,
        )


__all__ = ["PackagerSettings"]
