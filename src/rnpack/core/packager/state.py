"""Run records for packagers started by rnpack.

When rnpack launches a packager it writes ``packager-<port>.json`` into the
state directory, naming the launcher pid, its creation time and the run
mode. Another rnpack instance reads the record to learn whether the process
bound to the port was started by rnpack and in which mode. A record only
counts while its pid is the same process (matching creation time) and that
process, or one of its children, listens on the recorded port. Records that
fail the check are removed on read.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import psutil

from rnpack.core.exceptions import ProcessControlError
from rnpack.core.utils.io import read_json, remove_file, write_json_atomic

from .models import PackagerRunAs

logger = logging.getLogger(__name__)

# psutil derives creation times from boot time and clock ticks.
_CREATE_TIME_TOLERANCE_SECONDS = 1.0


@dataclass(frozen=True)
class PackagerRunRecord:
    pid: int
    host: str
    port: int
    run_as: str
    started_at: str
    project_root: str
    create_time: Optional[float] = None

    @property
    def mode(self) -> PackagerRunAs:
        try:
            return PackagerRunAs(self.run_as)
        except ValueError:
            return PackagerRunAs.NOT_RUNNING

    @classmethod
    def from_raw(cls, raw: Any) -> Optional[PackagerRunRecord]:
        if not isinstance(raw, dict):
            return None
        try:
            create_time = raw.get("create_time")
            return cls(
                pid=int(raw["pid"]),
                host=str(raw.get("host") or ""),
                port=int(raw["port"]),
                run_as=str(raw.get("run_as") or PackagerRunAs.NOT_RUNNING.value),
                started_at=str(raw.get("started_at") or ""),
                project_root=str(raw.get("project_root") or ""),
                create_time=float(create_time) if create_time is not None else None,
            )
        except (KeyError, TypeError, ValueError):
            return None


def _listens_on(proc: psutil.Process, port: int) -> bool:
    """True when ``proc`` or a descendant has a listening socket on ``port``."""
    try:
        family = [proc, *proc.children(recursive=True)]
    except psutil.NoSuchProcess:
        return False
    for member in family:
        try:
            connections = member.net_connections(kind="inet")
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            continue
        for conn in connections:
            if conn.status == psutil.CONN_LISTEN and conn.laddr and conn.laddr.port == port:
                return True
    return False


def is_record_owner(record: PackagerRunRecord) -> bool:
    """True when the process named by ``record`` is still the packager it launched.

    The pid must belong to the process created at ``record.create_time``
    (pids are reused), and that process tree must listen on ``record.port``.
    """
    if record.pid <= 0 or record.create_time is None:
        return False
    try:
        proc = psutil.Process(record.pid)
        if proc.status() == psutil.STATUS_ZOMBIE:
            return False
        if abs(proc.create_time() - record.create_time) > _CREATE_TIME_TOLERANCE_SECONDS:
            return False
        return _listens_on(proc, record.port)
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        logger.debug("Cannot inspect pid %s; not trusting its packager record", record.pid)
        return False


class PackagerStateStore:
    def __init__(self, state_dir: Path) -> None:
        self.state_dir = Path(state_dir)

    def record_path(self, port: int) -> Path:
        return self.state_dir / f"packager-{int(port)}.json"

    def write(
        self,
        *,
        pid: int,
        host: str,
        port: int,
        run_as: PackagerRunAs,
        project_root: Path,
    ) -> PackagerRunRecord:
        try:
            create_time = psutil.Process(int(pid)).create_time()
        except psutil.Error as exc:
            raise ProcessControlError(
                f"Cannot record packager process {pid}: {exc}",
                context={"pid": pid, "port": port},
            ) from exc
        record = PackagerRunRecord(
            pid=int(pid),
            host=host,
            port=int(port),
            run_as=run_as.value,
            started_at=datetime.now(timezone.utc).isoformat(),
            project_root=str(project_root),
            create_time=create_time,
        )
        write_json_atomic(self.record_path(port), asdict(record))
        return record

    def read(self, port: int) -> Optional[PackagerRunRecord]:
        """Return the verified record for ``port``; anything else is dropped."""
        path = self.record_path(port)
        try:
            raw = read_json(path, default=None)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Discarding unreadable packager record %s: %s", path, exc)
            remove_file(path)
            return None
        if raw is None:
            return None

        record = PackagerRunRecord.from_raw(raw)
        if record is None or record.port != int(port) or not is_record_owner(record):
            logger.debug("Removing stale packager record %s", path)
            remove_file(path)
            return None
        return record

    def clear(self, port: int) -> None:
        remove_file(self.record_path(port))


__all__ = ["PackagerRunRecord", "PackagerStateStore", "is_record_owner"]
