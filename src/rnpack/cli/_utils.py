"""Shared CLI utilities."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Any, Coroutine, Dict, Optional, TypeVar

import yaml

from rnpack.core.config import LoggingConfig, PackagerSettings
from rnpack.core.exceptions import ConfigError
from rnpack.core.launch import RunOptions
from rnpack.core.log import configure_stdlib_logging
from rnpack.core.packager import Packager
from rnpack.core.utils.io import read_yaml

T = TypeVar("T")


def get_workspace_root(args: argparse.Namespace) -> Path:
    raw = getattr(args, "workspace_root", None)
    return Path(raw).expanduser().resolve() if raw else Path.cwd().resolve()


def setup_logging(workspace_root: Path, *, json_mode: bool = False) -> None:
    """Send stdlib logging to the configured log file; echo channels unless --json."""
    cfg = LoggingConfig(workspace_root)
    configure_stdlib_logging(log_path=cfg.log_path, level=cfg.level, echo_channels=not json_mode)


def _parse_env_pairs(pairs: list[str]) -> Dict[str, str]:
    env: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ConfigError(f"--env expects KEY=VALUE, got {pair!r}")
        env[key.strip()] = value
    return env


def _abspath(raw: Optional[str]) -> Optional[str]:
    # Flags are relative to the current directory, not to the launch config.
    return str(Path(raw).expanduser().resolve()) if raw else None


def build_run_options(args: argparse.Namespace) -> RunOptions:
    """Merge ``--launch-config`` with explicit flags (flags win) into RunOptions."""
    raw: Dict[str, Any] = {}
    base_dir = Path.cwd()
    launch_config = getattr(args, "launch_config", None)
    if launch_config:
        path = Path(launch_config).expanduser().resolve()
        if not path.exists():
            raise ConfigError(f"Launch configuration not found: {path}")
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid launch configuration {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Launch configuration {path} must contain a mapping")
        raw.update(data)
        base_dir = path.parent

    workspace_root = get_workspace_root(args) if getattr(args, "workspace_root", None) else None
    overrides = {
        "platform": getattr(args, "platform", None),
        "project_root": _abspath(getattr(args, "project_root", None)),
        "workspace_root": str(workspace_root) if workspace_root else None,
        "env_file": _abspath(getattr(args, "env_file", None)),
    }
    for key, value in overrides.items():
        if value is not None:
            raw[key] = value

    explicit_env = _parse_env_pairs(getattr(args, "env", []))
    if explicit_env:
        env = dict(raw.get("env") or {})
        env.update(explicit_env)
        raw["env"] = env

    raw.setdefault("platform", "generic")
    if "project_root" not in raw and "projectRoot" not in raw:
        raw["project_root"] = str(workspace_root or Path.cwd())
    return RunOptions.from_raw(raw, base_dir=base_dir)


def build_packager(workspace_root: Path) -> Packager:
    settings = PackagerSettings(workspace_root)
    return Packager(settings.packager_config())


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


__all__ = [
    "get_workspace_root",
    "setup_logging",
    "build_run_options",
    "build_packager",
    "run_async",
]
