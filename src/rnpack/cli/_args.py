"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_workspace_root_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workspace-root",
        type=str,
        help="Workspace root holding .rnpack/ configuration (default: current directory)",
    )


def add_run_options_args(parser: argparse.ArgumentParser) -> None:
    """Add the launch options shared by commands that build RunOptions."""
    parser.add_argument(
        "--launch-config",
        type=str,
        help="JSON or YAML file holding a launch configuration mapping",
    )
    parser.add_argument(
        "--platform",
        type=str,
        help="Target platform (e.g. android, ios)",
    )
    parser.add_argument(
        "--project-root",
        type=str,
        help="React Native project root",
    )
    add_workspace_root_flag(parser)
    parser.add_argument(
        "--env-file",
        type=str,
        help="Environment file with KEY=VALUE lines",
    )
    parser.add_argument(
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Explicit environment variable (repeatable); overrides the env file",
    )


__all__ = ["add_json_flag", "add_workspace_root_flag", "add_run_options_args"]
