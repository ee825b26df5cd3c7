"""rnpack configuration: layered YAML with RNPACK_* environment overrides."""
from .base import BaseDomainConfig
from .domains import LoggingConfig, PackagerSettings
from .manager import ConfigManager
from .settings import SettingsHelper

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "LoggingConfig",
    "PackagerSettings",
    "SettingsHelper",
]
