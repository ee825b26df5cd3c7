"""Launch inputs: run options and the environment handed to the packager."""
from .env import parse_env_file, read_env_file, resolve_environment
from .run_options import RunOptions

__all__ = ["RunOptions", "parse_env_file", "read_env_file", "resolve_environment"]
