"""
rnpack configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from rnpack.core.exceptions import ConfigError
from rnpack.core.utils.io import parse_yaml_scalar, read_yaml
from rnpack.core.utils.merge import deep_merge
from rnpack.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "RNPACK_"
PROJECT_CONFIG_DIRNAME = ".rnpack"


class ConfigManager:
    """Load and merge rnpack configuration for a workspace.

    Configuration sources (highest to lowest priority):
    1. Environment variables: RNPACK_<SECTION>__<KEY>
    2. Workspace-local config: <workspace>/.rnpack/config.local.yaml (uncommitted)
    3. Workspace config: <workspace>/.rnpack/config.yaml
    4. Bundled defaults: rnpack.data/config/defaults.yaml
    """

    def __init__(self, workspace_root: Optional[Path] = None) -> None:
        self.workspace_root = Path(workspace_root or Path.cwd()).expanduser().resolve()
        self.defaults_path = get_data_path("config", "defaults.yaml")
        self.project_config_dir = self.workspace_root / PROJECT_CONFIG_DIRNAME
        self.project_config_path = self.project_config_dir / "config.yaml"
        self.project_local_config_path = self.project_config_dir / "config.local.yaml"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Invalid YAML is an error; a missing file is an empty layer.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid config file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping", context={"path": str(path)})
        return data

    def layer_paths(self) -> List[Path]:
        return [self.defaults_path, self.project_config_path, self.project_local_config_path]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if "__" not in raw:
                continue
            path = [seg.lower() for seg in raw.split("__")]
            if any(not seg for seg in path):
                logger.warning("Ignoring malformed config override %s", key)
                continue
            yield path, parse_yaml_scalar(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            cur = cfg
            for part in path[:-1]:
                nxt = cur.get(part)
                if not isinstance(nxt, dict):
                    nxt = {}
                    cur[part] = nxt
                cur = nxt
            cur[path[-1]] = value

    def validate_schema(self, config: Dict[str, Any], schema_name: str = "config.schema") -> None:
        from rnpack.core.schemas import validate_payload

        validate_payload(config, schema_name)

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration; every call re-reads the layers."""
        cfg: Dict[str, Any] = {}
        for path in self.layer_paths():
            if path.exists():
                logger.debug("Loading config layer %s", path)
            cfg = deep_merge(cfg, self.load_yaml(path))
        self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg


__all__ = ["ConfigManager", "ENV_PREFIX", "PROJECT_CONFIG_DIRNAME"]
