"""
rnpack packager start command.

SUMMARY: Start the React Native packager, or reattach to one already running

A packager running in another mode (or started by another tool) on the
configured port is stopped and replaced.
"""

from __future__ import annotations

import argparse

from rnpack.cli import (
    OutputFormatter,
    add_json_flag,
    add_run_options_args,
    build_run_options,
    run_async,
    setup_logging,
)
from rnpack.core.exceptions import RnpackError
from rnpack.core.platform import GeneralMobilePlatform

SUMMARY = "Start the React Native packager, or reattach to one already running"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_run_options_args(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        run_options = build_run_options(args)
        setup_logging(run_options.workspace_root, json_mode=formatter.json_mode)
        platform = GeneralMobilePlatform(run_options)
        run_async(platform.start_packager())
    except RnpackError as exc:
        formatter.error(exc, error_code="packager_start_failed")
        return 1

    packager = platform.packager
    formatter.success(
        {
            "packager": platform.status.value,
            "url": packager.config.url,
            "pid": packager.process_pid,
            "run_as": packager.get_running_as().value,
        },
        f"Packager {platform.status.value} at {packager.config.url}",
    )
    return 0
