"""Base class for domain-specific configuration accessors.

Each domain config reads one top-level section of the merged workspace
configuration and exposes typed properties over it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .manager import ConfigManager


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("my_setting", "default")
    """

    def __init__(
        self,
        workspace_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._manager = ConfigManager(workspace_root)
        self._config = config if config is not None else self._manager.load_config()

    @property
    def workspace_root(self) -> Path:
        return self._manager.workspace_root

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """This domain's configuration section, or an empty dict."""
        value = self._config.get(self._config_section()) or {}
        return value if isinstance(value, dict) else {}


__all__ = ["BaseDomainConfig"]
