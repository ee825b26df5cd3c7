from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from rnpack.core.exceptions import ConfigError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8081
DEFAULT_COMMAND: tuple[str, ...] = ("npx", "react-native", "start", "--port", "{port}")
STATUS_RUNNING_BODY = "packager-status:running"


class PackagerRunAs(str, Enum):
    """Which tool mode started the packager bound to a port."""

    REACT_NATIVE = "react-native"
    EXPONENT = "exponent"
    NOT_RUNNING = "not-running"


class PackagerStatus(str, Enum):
    STOPPED = "stopped"
    STARTED = "started"


@dataclass(frozen=True)
class PackagerConfig:
    """Where the packager listens, how to launch it, and how long to wait."""

    project_root: Path
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    command: tuple[str, ...] = DEFAULT_COMMAND
    mode_args: dict[str, tuple[str, ...]] = field(default_factory=dict)
    startup_timeout_seconds: float = 60.0
    shutdown_timeout_seconds: float = 10.0
    probe_timeout_seconds: float = 0.75
    poll_interval_seconds: float = 0.25
    state_dir: Path | None = None

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any] | None,
        *,
        project_root: Path,
        workspace_root: Path | None = None,
    ) -> PackagerConfig:
        raw = dict(raw or {})
        project_root = Path(project_root).expanduser().resolve()
        workspace_root = Path(workspace_root).expanduser().resolve() if workspace_root else project_root

        host = str(raw.get("host") or DEFAULT_HOST).strip() or DEFAULT_HOST

        port_raw = raw.get("port", DEFAULT_PORT)
        try:
            port = int(port_raw)
        except (TypeError, ValueError):
            raise ConfigError(f"packager.port must be an integer, got {port_raw!r}") from None
        if not 0 < port < 65536:
            raise ConfigError(f"packager.port out of range: {port}")

        command_raw = raw.get("command")
        if command_raw is None:
            command = DEFAULT_COMMAND
        elif isinstance(command_raw, list) and command_raw:
            command = tuple(str(part) for part in command_raw)
        else:
            raise ConfigError("packager.command must be a non-empty list of arguments")

        mode_args: dict[str, tuple[str, ...]] = {}
        mode_args_raw = raw.get("mode_args")
        if isinstance(mode_args_raw, dict):
            for mode, args in mode_args_raw.items():
                if isinstance(args, list):
                    mode_args[str(mode)] = tuple(str(a) for a in args)

        def _as_float(v: Any, default: float) -> float:
            try:
                if v is None:
                    return float(default)
                return float(v)
            except (TypeError, ValueError):
                return float(default)

        state_dir_raw = raw.get("state_dir")
        state_dir = Path(str(state_dir_raw)).expanduser() if state_dir_raw else Path(".rnpack")
        if not state_dir.is_absolute():
            state_dir = workspace_root / state_dir

        return cls(
            project_root=project_root,
            host=host,
            port=port,
            command=command,
            mode_args=mode_args,
            startup_timeout_seconds=_as_float(raw.get("startup_timeout_seconds"), 60.0),
            shutdown_timeout_seconds=_as_float(raw.get("shutdown_timeout_seconds"), 10.0),
            probe_timeout_seconds=_as_float(raw.get("probe_timeout_seconds"), 0.75),
            poll_interval_seconds=_as_float(raw.get("poll_interval_seconds"), 0.25),
            state_dir=state_dir.resolve(),
        )

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def status_url(self) -> str:
        return f"{self.url}/status"

    @property
    def resolved_state_dir(self) -> Path:
        return self.state_dir or (self.project_root / ".rnpack")

    @property
    def log_path(self) -> Path:
        return self.resolved_state_dir / "logs" / f"packager-{self.port}.log"

    def render_command(self, run_as: PackagerRunAs) -> list[str]:
        fmt = {
            "host": self.host,
            "port": str(self.port),
            "project_root": str(self.project_root),
        }
        argv = [part.format(**fmt) for part in self.command]
        argv.extend(arg.format(**fmt) for arg in self.mode_args.get(run_as.value, ()))
        return argv


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_COMMAND",
    "STATUS_RUNNING_BODY",
    "PackagerRunAs",
    "PackagerStatus",
    "PackagerConfig",
]
