"""Packager process supervision.

The packager is observed, not owned: ``is_running`` always asks the port,
and ``get_running_as`` only reports a run mode for a process that this
instance launched or that a live run record names. Anything else bound to
the port is of unknown owner.
"""
from __future__ import annotations

import asyncio
import http.client
import logging
import os
import signal
import subprocess
from pathlib import Path
from typing import Any, Callable, Mapping, Optional
from urllib.error import URLError
from urllib.request import ProxyHandler, Request, build_opener

import psutil

from rnpack.core.exceptions import ProcessControlError
from rnpack.core.log import OutputChannelLogger
from rnpack.core.utils.io import ensure_parent_dir

from .models import STATUS_RUNNING_BODY, PackagerConfig, PackagerRunAs
from .state import PackagerStateStore
from .status import PackagerStatusIndicator

logger = logging.getLogger(__name__)

# Probes target localhost; never route them through an http_proxy.
_OPENER = build_opener(ProxyHandler({}))


def _probe_status(url: str, *, timeout_seconds: float) -> bool:
    req = Request(url, method="GET")
    try:
        with _OPENER.open(req, timeout=timeout_seconds) as resp:
            body = resp.read(256).decode("utf-8", errors="replace")
    except (URLError, OSError, ValueError, http.client.HTTPException):
        return False
    return body.strip() == STATUS_RUNNING_BODY


def _popen_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def _send_signal(pid: int, sig: int, *, group: bool) -> None:
    try:
        if group and os.name == "posix":
            try:
                os.killpg(pid, sig)
                return
            except ProcessLookupError:
                pass
        os.kill(pid, sig)
    except ProcessLookupError:
        return
    except PermissionError as exc:
        raise ProcessControlError(
            f"Not permitted to signal packager process {pid}",
            context={"pid": pid},
        ) from exc


def _find_listening_pid(port: int) -> Optional[int]:
    try:
        connections = psutil.net_connections(kind="inet")
    except psutil.AccessDenied as exc:
        raise ProcessControlError(
            f"Not permitted to inspect which process listens on port {port}",
            context={"port": port},
        ) from exc
    for conn in connections:
        if conn.status == psutil.CONN_LISTEN and conn.laddr and conn.laddr.port == port and conn.pid:
            return int(conn.pid)
    return None


async def _wait_for_exit(wait: Callable[[float], Any], timeout_seconds: float) -> bool:
    try:
        await asyncio.to_thread(wait, max(0.1, float(timeout_seconds)))
    except (psutil.TimeoutExpired, subprocess.TimeoutExpired):
        return False
    return True


async def _terminate(
    pid: int,
    *,
    group: bool,
    timeout_seconds: float,
    popen: Optional[subprocess.Popen] = None,
) -> None:
    """SIGTERM ``pid`` and wait for it to exit, escalating to SIGKILL."""
    if popen is not None:
        if popen.poll() is not None:
            return
        wait = popen.wait
    else:
        try:
            wait = psutil.Process(pid).wait
        except psutil.NoSuchProcess:
            return

    _send_signal(pid, signal.SIGTERM, group=group)
    if await _wait_for_exit(wait, timeout_seconds):
        return

    logger.warning("Packager process %s ignored SIGTERM; sending SIGKILL", pid)
    _send_signal(pid, signal.SIGKILL, group=group)
    if not await _wait_for_exit(wait, 5.0):
        raise ProcessControlError(
            f"Packager process {pid} did not exit after SIGKILL",
            context={"pid": pid},
        )


class Packager:
    """Query, start and stop the packager bound to ``config.host:config.port``."""

    def __init__(
        self,
        config: PackagerConfig,
        *,
        status_indicator: Optional[PackagerStatusIndicator] = None,
        logger: Optional[OutputChannelLogger] = None,
        state_store: Optional[PackagerStateStore] = None,
    ) -> None:
        self.config = config
        self.status_indicator = status_indicator or PackagerStatusIndicator()
        self.logger = logger or OutputChannelLogger.get_channel("React Native Packager")
        self._state = state_store or PackagerStateStore(config.resolved_state_dir)
        self._process: Optional[subprocess.Popen] = None
        self._running_as = PackagerRunAs.NOT_RUNNING

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def process_pid(self) -> Optional[int]:
        if self._process is not None and self._process.poll() is None:
            return self._process.pid
        return None

    async def is_running(self) -> bool:
        return await asyncio.to_thread(
            _probe_status,
            self.config.status_url,
            timeout_seconds=self.config.probe_timeout_seconds,
        )

    def get_running_as(self) -> PackagerRunAs:
        if self.process_pid is not None:
            return self._running_as
        self._process = None
        self._running_as = PackagerRunAs.NOT_RUNNING

        record = self._state.read(self.port)
        return record.mode if record is not None else PackagerRunAs.NOT_RUNNING

    def _reset(self) -> None:
        self._process = None
        self._running_as = PackagerRunAs.NOT_RUNNING
        self._state.clear(self.port)

    async def _locate_process(self) -> tuple[int, bool]:
        """Return ``(pid, is_process_group)`` for the packager on our port."""
        own = self.process_pid
        if own is not None:
            return own, True
        record = self._state.read(self.port)
        if record is not None:
            return record.pid, True
        pid = await asyncio.to_thread(_find_listening_pid, self.port)
        if pid is None:
            raise ProcessControlError(
                f"A packager is running on port {self.port} but its process could not be found. "
                "Quit it manually and try again.",
                context={"port": self.port},
            )
        return pid, False

    async def stop(self) -> None:
        """Stop whatever packager is bound to our port, then forget it."""
        running = await self.is_running()
        if not running and self.process_pid is None:
            self.logger.warning("Packager is not running")
            self._reset()
            return

        pid, group = await self._locate_process()
        self.logger.info(f"Stopping packager on port {self.port} (pid {pid}).")
        popen = self._process if self._process is not None and self._process.pid == pid else None
        await _terminate(
            pid,
            group=group,
            timeout_seconds=self.config.shutdown_timeout_seconds,
            popen=popen,
        )
        self._reset()
        self.logger.info("Packager stopped.")

    async def start(self, run_as: PackagerRunAs, *, env: Optional[Mapping[str, str]] = None) -> None:
        """Launch the packager in ``run_as`` mode and wait until it answers."""
        run_as = PackagerRunAs(run_as)
        if run_as is PackagerRunAs.NOT_RUNNING:
            raise ValueError("cannot start the packager in not-running mode")

        if await self.is_running():
            self.logger.info("Packager is already running.")
            return

        argv = self.config.render_command(run_as)
        launch_env = dict(os.environ)
        launch_env.update(env or {})
        log_path = self.config.log_path
        ensure_parent_dir(log_path)

        self.logger.info(f"Starting packager on port {self.port}: {' '.join(argv)}")
        try:
            with open(log_path, "ab") as log_file:
                proc = subprocess.Popen(  # noqa: S603
                    argv,
                    cwd=str(self.config.project_root),
                    env=launch_env,
                    stdin=subprocess.DEVNULL,
                    stdout=log_file,
                    stderr=subprocess.STDOUT,
                    **_popen_kwargs(),
                )
        except OSError as exc:
            raise ProcessControlError(
                f"Failed to launch packager: {exc}",
                context={"command": argv, "cwd": str(self.config.project_root)},
            ) from exc

        self._process = proc
        self._running_as = run_as
        try:
            await self._wait_until_ready(proc, log_path)
            self._state.write(
                pid=proc.pid,
                host=self.host,
                port=self.port,
                run_as=run_as,
                project_root=self.config.project_root,
            )
        except ProcessControlError:
            await _terminate(
                proc.pid,
                group=True,
                timeout_seconds=min(2.0, self.config.shutdown_timeout_seconds),
                popen=proc,
            )
            self._reset()
            raise

        self.logger.info(f"Packager started as {run_as.value} (pid {proc.pid}).")

    async def _wait_until_ready(self, proc: subprocess.Popen, log_path: Path) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + max(0.1, self.config.startup_timeout_seconds)
        while True:
            exit_code = proc.poll()
            if exit_code is not None:
                raise ProcessControlError(
                    f"Packager exited with code {exit_code} before it was ready; see {log_path}",
                    context={"exit_code": exit_code, "log": str(log_path)},
                )
            if await self.is_running():
                return
            if loop.time() >= deadline:
                raise ProcessControlError(
                    f"Timed out waiting for the packager on {self.config.status_url}",
                    context={"timeout_seconds": self.config.startup_timeout_seconds},
                )
            await asyncio.sleep(max(0.05, self.config.poll_interval_seconds))

    async def start_as_react_native(self, *, env: Optional[Mapping[str, str]] = None) -> None:
        await self.start(PackagerRunAs.REACT_NATIVE, env=env)

    async def start_as_exponent(self, *, env: Optional[Mapping[str, str]] = None) -> None:
        await self.start(PackagerRunAs.EXPONENT, env=env)


__all__ = ["Packager"]
