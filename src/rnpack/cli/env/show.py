"""
rnpack env show command.

SUMMARY: Show the environment the packager would be launched with

Prints only the variables contributed by the env file and the launch
configuration; the inherited process environment is not listed.
"""

from __future__ import annotations

import argparse

from rnpack.cli import OutputFormatter, add_json_flag, add_run_options_args, build_run_options
from rnpack.core.exceptions import RnpackError
from rnpack.core.launch import resolve_environment

SUMMARY = "Show the environment the packager would be launched with"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_run_options_args(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        env = resolve_environment(build_run_options(args))
    except RnpackError as exc:
        formatter.error(exc, error_code="env_resolve_failed")
        return 1

    if formatter.json_mode:
        formatter.json_output(env)
        return 0

    for key in sorted(env):
        formatter.text(f"{key}={env[key]}".replace("\n", "\\n"))
    return 0
