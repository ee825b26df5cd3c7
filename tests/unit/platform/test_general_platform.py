from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from helpers.packager_fakes import FakePackager
from rnpack.core.exceptions import EnvFileReadError, ProcessControlError
from rnpack.core.launch import RunOptions
from rnpack.core.log import OutputChannelLogger
from rnpack.core.packager import PackagerRunAs, PackagerStatus, PackagerStatusIndicator
from rnpack.core.platform import GeneralMobilePlatform


def _platform(root: Path, packager: FakePackager, **options) -> GeneralMobilePlatform:
    run_options = RunOptions(platform="android", project_root=root, workspace_root=root, **options)
    return GeneralMobilePlatform(run_options, packager=packager)  # type: ignore[arg-type]


def test_fresh_start_starts_and_publishes_started(workspace: Path) -> None:
    packager = FakePackager()
    platform = _platform(workspace, packager)

    asyncio.run(platform.start_packager())

    assert packager.calls == ["is_running", "start"]
    assert packager.published == [PackagerStatus.STARTED]
    assert platform.status is PackagerStatus.STARTED


def test_reattaches_to_react_native_packager(workspace: Path) -> None:
    packager = FakePackager(running=True, running_as=PackagerRunAs.REACT_NATIVE)
    platform = _platform(workspace, packager)

    asyncio.run(platform.start_packager())

    assert packager.calls == ["is_running", "get_running_as"]
    assert packager.published == [PackagerStatus.STARTED]
    assert "Attaching to running React Native packager" in platform.logger.lines


def test_second_call_reuses_packager_started_by_first(workspace: Path) -> None:
    packager = FakePackager()
    platform = _platform(workspace, packager)

    async def scenario() -> None:
        await platform.start_packager()
        await platform.start_packager()

    asyncio.run(scenario())

    assert packager.calls.count("start") == 1
    assert packager.published == [PackagerStatus.STARTED, PackagerStatus.STARTED]


@pytest.mark.parametrize("running_as", [PackagerRunAs.EXPONENT, PackagerRunAs.NOT_RUNNING])
def test_restarts_packager_in_other_or_unknown_mode(workspace: Path, running_as: PackagerRunAs) -> None:
    packager = FakePackager(running=True, running_as=running_as)
    platform = _platform(workspace, packager)

    asyncio.run(platform.start_packager())

    assert packager.calls == ["is_running", "get_running_as", "stop", "start"]
    assert packager.published == [PackagerStatus.STOPPED, PackagerStatus.STARTED]
    assert packager.running_as is PackagerRunAs.REACT_NATIVE


def test_failed_stop_publishes_nothing_further(workspace: Path) -> None:
    packager = FakePackager(running=True, running_as=PackagerRunAs.EXPONENT, fail_stop=True)
    platform = _platform(workspace, packager)

    with pytest.raises(ProcessControlError, match="stop failed"):
        asyncio.run(platform.start_packager())

    assert "start" not in packager.calls
    assert packager.published == []
    assert platform.status is PackagerStatus.STOPPED


def test_failed_start_does_not_publish_started(workspace: Path) -> None:
    packager = FakePackager(fail_start=True)
    platform = _platform(workspace, packager)

    with pytest.raises(ProcessControlError, match="start failed"):
        asyncio.run(platform.start_packager())

    assert PackagerStatus.STARTED not in packager.published


def test_start_receives_resolved_environment(workspace: Path, monkeypatch) -> None:
    monkeypatch.delenv("API_URL", raising=False)
    monkeypatch.delenv("MODE", raising=False)
    (workspace / ".env").write_text("API_URL=http://x\nMODE=file\n", encoding="utf-8")
    packager = FakePackager()
    platform = _platform(
        workspace,
        packager,
        env_file=workspace / ".env",
        env={"MODE": "explicit"},
    )

    asyncio.run(platform.start_packager())

    assert packager.start_envs == [{"API_URL": "http://x", "MODE": "explicit"}]


def test_unreadable_env_file_aborts_before_start(workspace: Path) -> None:
    packager = FakePackager()
    platform = _platform(workspace, packager, env_file=workspace / "missing.env")

    with pytest.raises(EnvFileReadError):
        asyncio.run(platform.start_packager())

    assert "start" not in packager.calls
    assert packager.published == []


def test_env_argument_without_env_file_is_explicit_env(workspace: Path) -> None:
    platform = _platform(workspace, FakePackager(), env={"A": "1"})
    assert platform.get_env_argument() == {"A": "1"}
    assert platform.resolve_environment() == {"A": "1"}


def test_placeholder_operations_only_log(workspace: Path) -> None:
    platform = _platform(workspace, FakePackager())

    async def scenario() -> None:
        await platform.run_app()
        await platform.enable_js_debugging_mode()
        await platform.disable_js_debugging_mode()
        await platform.prewarm_bundle_cache()

    asyncio.run(scenario())

    assert platform.logger.lines == [
        "Connected to packager. You can now open your app in the simulator.",
        "Debugger ready. Enable remote debugging in app.",
        "Debugger ready. Disable remote debugging in app.",
    ]


def test_run_argument_must_be_provided_by_variants(workspace: Path) -> None:
    platform = _platform(workspace, FakePackager())
    with pytest.raises(NotImplementedError, match="get_run_argument"):
        platform.get_run_argument()

    class AndroidPlatform(GeneralMobilePlatform):
        def get_run_argument(self) -> list[str]:
            return ["--variant", "debug"]

    run_options = RunOptions(platform="android", project_root=workspace, workspace_root=workspace)
    android = AndroidPlatform(run_options, packager=FakePackager())  # type: ignore[arg-type]
    assert android.get_run_argument() == ["--variant", "debug"]


def test_logger_is_cleared_on_construction(workspace: Path) -> None:
    channel = OutputChannelLogger.get_channel("React Native: Run android")
    channel.info("left over from a previous run")

    platform = _platform(workspace, FakePackager())

    assert platform.logger is channel
    assert platform.logger.lines == []


def test_default_packager_uses_workspace_settings(workspace: Path) -> None:
    config_dir = workspace / ".rnpack"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("packager:\n  port: 19001\n", encoding="utf-8")

    platform = GeneralMobilePlatform(
        RunOptions(platform="ios", project_root=workspace, workspace_root=workspace)
    )

    assert platform.packager.port == 19001
    assert platform.status is PackagerStatus.STOPPED
    assert GeneralMobilePlatform.DEVICE == "device"
    assert GeneralMobilePlatform.SIMULATOR == "simulator"


def test_injected_status_indicator_receives_publishes(workspace: Path) -> None:
    indicator = PackagerStatusIndicator()
    seen: list[PackagerStatus] = []
    indicator.subscribe(seen.append)
    packager = FakePackager(running=True, running_as=PackagerRunAs.EXPONENT)
    run_options = RunOptions(platform="android", project_root=workspace, workspace_root=workspace)
    platform = GeneralMobilePlatform(
        run_options,
        packager=packager,  # type: ignore[arg-type]
        status_indicator=indicator,
    )

    asyncio.run(platform.start_packager())

    assert platform.status_indicator is indicator
    assert seen == [PackagerStatus.STOPPED, PackagerStatus.STARTED]
    assert platform.status is PackagerStatus.STARTED


def test_default_packager_shares_injected_status_indicator(workspace: Path) -> None:
    indicator = PackagerStatusIndicator()
    platform = GeneralMobilePlatform(
        RunOptions(platform="ios", project_root=workspace, workspace_root=workspace),
        status_indicator=indicator,
    )
    assert platform.status_indicator is indicator
    assert platform.packager.status_indicator is indicator


def test_resolve_environment_follows_overridden_env_argument(workspace: Path) -> None:
    class StagingPlatform(GeneralMobilePlatform):
        def get_env_argument(self) -> dict[str, str]:
            return {"STAGE": "staging"}

    run_options = RunOptions(platform="android", project_root=workspace, workspace_root=workspace)
    staging = StagingPlatform(run_options, packager=FakePackager())  # type: ignore[arg-type]

    assert staging.resolve_environment() == {"STAGE": "staging"}
