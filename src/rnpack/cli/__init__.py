"""
rnpack CLI package.

Commands are auto-discovered from domain subfolders (packager/, env/,
config/); each command module exports SUMMARY, register_args and main.
"""
from ._args import add_json_flag, add_run_options_args, add_workspace_root_flag
from ._output import OutputFormatter
from ._utils import (
    build_packager,
    build_run_options,
    get_workspace_root,
    run_async,
    setup_logging,
)

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_run_options_args",
    "add_workspace_root_flag",
    "build_packager",
    "build_run_options",
    "get_workspace_root",
    "run_async",
    "setup_logging",
]
