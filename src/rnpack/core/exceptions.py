from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping


class RnpackError(Exception):
    """Base exception for rnpack."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ProcessControlError(RnpackError, RuntimeError):
    """Raised when querying, stopping or starting the packager process fails."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RnpackError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class EnvFileReadError(RnpackError, OSError):
    """Raised when an environment file cannot be read."""

    def __init__(
        self,
        message: str = "",
        *,
        path: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path is not None:
            ctx["path"] = str(path)
        RnpackError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)
        self.path = Path(path) if path is not None else None


class ConfigError(RnpackError, ValueError):
    """Raised for invalid configuration or launch options."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RnpackError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "RnpackError",
    "ProcessControlError",
    "EnvFileReadError",
    "ConfigError",
]
