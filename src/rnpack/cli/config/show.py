"""
rnpack config show command.

SUMMARY: Show the merged workspace configuration

Merges bundled defaults, .rnpack/config.yaml, .rnpack/config.local.yaml
and RNPACK_<SECTION>__<KEY> environment overrides.
"""

from __future__ import annotations

import argparse

from rnpack.cli import OutputFormatter, add_json_flag, add_workspace_root_flag, get_workspace_root
from rnpack.core.config import ConfigManager
from rnpack.core.exceptions import RnpackError
from rnpack.core.utils.io import dump_yaml_string

SUMMARY = "Show the merged workspace configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "section",
        nargs="?",
        help="Only show this top-level section (e.g. 'packager')",
    )
    add_workspace_root_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config = ConfigManager(get_workspace_root(args)).load_config()
    except RnpackError as exc:
        formatter.error(exc, error_code="config_error")
        return 1

    if args.section:
        if args.section not in config:
            formatter.error(KeyError(args.section), f"Unknown config section: {args.section}")
            return 1
        config = {args.section: config[args.section]}

    if formatter.json_mode:
        formatter.json_output(config)
    else:
        formatter.text(dump_yaml_string(config).rstrip())
    return 0
