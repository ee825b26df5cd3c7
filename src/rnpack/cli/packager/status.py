"""
rnpack packager status command.

SUMMARY: Show whether a packager is running and which mode started it
"""

from __future__ import annotations

import argparse

from rnpack.cli import (
    OutputFormatter,
    add_json_flag,
    add_workspace_root_flag,
    build_packager,
    get_workspace_root,
    run_async,
)
from rnpack.core.exceptions import RnpackError

SUMMARY = "Show whether a packager is running and which mode started it"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_workspace_root_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        packager = build_packager(get_workspace_root(args))
        running = run_async(packager.is_running())
    except RnpackError as exc:
        formatter.error(exc, error_code="packager_status_failed")
        return 1

    run_as = packager.get_running_as() if running else None
    data = {
        "running": running,
        "run_as": run_as.value if run_as else None,
        "host": packager.host,
        "port": packager.port,
        "url": packager.config.url,
    }
    if formatter.json_mode:
        formatter.json_output(data)
        return 0

    if running:
        owner = run_as.value if run_as else "unknown"
        formatter.text(f"Packager running at {packager.config.url} (started as: {owner})")
    else:
        formatter.text(f"Packager not running on port {packager.port}")
    return 0
