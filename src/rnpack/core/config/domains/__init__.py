"""Domain-specific configuration accessors."""
from .logging import LoggingConfig
from .packager import PackagerSettings

__all__ = ["LoggingConfig", "PackagerSettings"]
