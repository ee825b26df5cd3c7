"""
rnpack packager stop command.

SUMMARY: Stop the packager bound to the configured port
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
    setup_logging,
)
from rnpack.core.exceptions import RnpackError
from rnpack.core.packager import PackagerStatus

SUMMARY = "Stop the packager bound to the configured port"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_workspace_root_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        workspace_root = get_workspace_root(args)
        setup_logging(workspace_root, json_mode=formatter.json_mode)
        packager = build_packager(workspace_root)
        run_async(packager.stop())
    except RnpackError as exc:
        formatter.error(exc, error_code="packager_stop_failed")
        return 1

    packager.status_indicator.publish(PackagerStatus.STOPPED)
    formatter.success(
        {"packager": PackagerStatus.STOPPED.value, "port": packager.port},
        f"Packager stopped on port {packager.port}",
    )
    return 0
