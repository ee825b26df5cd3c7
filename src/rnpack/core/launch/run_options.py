from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from rnpack.core.exceptions import ConfigError

# launch.json spellings accepted alongside the snake_case keys.
_LAUNCH_KEY_ALIASES: dict[str, str] = {
    "projectRoot": "project_root",
    "workspaceRoot": "workspace_root",
    "envFile": "env_file",
}


@dataclass(frozen=True)
class RunOptions:
    """Immutable launch inputs for one platform controller."""

    platform: str
    project_root: Path
    workspace_root: Path
    env_file: Path | None = None
    env: Mapping[str, str] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.env is not None:
            object.__setattr__(
                self, "env", MappingProxyType({str(k): str(v) for k, v in self.env.items()})
            )

    @classmethod
    def from_raw(cls, raw: Any, *, base_dir: Path | None = None) -> RunOptions:
        """Build run options from a launch configuration mapping.

        Relative ``project_root`` resolves against ``base_dir`` (default: cwd);
        relative ``workspace_root`` too; relative ``env_file`` resolves against
        the workspace root.
        """
        if not isinstance(raw, Mapping):
            raise ConfigError("launch configuration must be a mapping")

        data: dict[str, Any] = {}
        for key, value in raw.items():
            data[_LAUNCH_KEY_ALIASES.get(str(key), str(key))] = value

        base = Path(base_dir or Path.cwd()).expanduser().resolve()

        platform = str(data.get("platform") or "").strip()
        if not platform:
            raise ConfigError("launch configuration is missing 'platform'")

        project_raw = data.get("project_root")
        if project_raw is None or not str(project_raw).strip():
            raise ConfigError("launch configuration is missing 'project_root'")
        project_root = _resolve(base, project_raw)

        workspace_raw = data.get("workspace_root")
        workspace_root = (
            _resolve(base, workspace_raw)
            if workspace_raw is not None and str(workspace_raw).strip()
            else project_root
        )

        env_file_raw = data.get("env_file")
        env_file = (
            _resolve(workspace_root, env_file_raw)
            if env_file_raw is not None and str(env_file_raw).strip()
            else None
        )

        env_raw = data.get("env")
        if env_raw is not None and not isinstance(env_raw, Mapping):
            raise ConfigError("launch configuration 'env' must be a mapping")

        return cls(
            platform=platform,
            project_root=project_root,
            workspace_root=workspace_root,
            env_file=env_file,
            env=env_raw,
        )


def _resolve(base: Path, raw: Any) -> Path:
    path = Path(str(raw).strip()).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


__all__ = ["RunOptions"]
