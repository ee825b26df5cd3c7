"""Platform-independent packager lifecycle control.

``GeneralMobilePlatform`` decides whether to reattach to, restart, or
freshly start the packager, and publishes the resulting status. Platform
variants (android, ios, ...) subclass it and override ``run_app``, the
debugging toggles, ``prewarm_bundle_cache`` and ``get_run_argument``.

Concurrent ``start_packager`` calls on one instance are not serialized
here; callers must not overlap them.
"""
from __future__ import annotations

from typing import ClassVar, List, Literal, Optional

from rnpack.core.config import PackagerSettings
from rnpack.core.launch import RunOptions, resolve_environment
from rnpack.core.log import OutputChannelLogger
from rnpack.core.packager import (
    Packager,
    PackagerRunAs,
    PackagerStatus,
    PackagerStatusIndicator,
)

TargetType = Literal["device", "simulator"]


class GeneralMobilePlatform:
    DEVICE: ClassVar[TargetType] = "device"
    SIMULATOR: ClassVar[TargetType] = "simulator"

    def __init__(
        self,
        run_options: RunOptions,
        *,
        packager: Optional[Packager] = None,
        status_indicator: Optional[PackagerStatusIndicator] = None,
        logger: Optional[OutputChannelLogger] = None,
    ) -> None:
        self.run_options = run_options
        self.platform_name = run_options.platform
        self.project_path = run_options.project_root
        if packager is None:
            settings = PackagerSettings(run_options.workspace_root)
            packager = Packager(
                settings.packager_config(project_root=run_options.project_root),
                status_indicator=status_indicator or PackagerStatusIndicator(),
            )
        self.packager = packager
        # An explicitly injected indicator receives every publish, even when
        # the injected packager carries its own.
        self._status_indicator = status_indicator or packager.status_indicator
        self.logger = logger or OutputChannelLogger.get_channel(
            f"React Native: Run {self.platform_name}"
        )
        self.logger.clear()

    @property
    def status_indicator(self) -> PackagerStatusIndicator:
        return self._status_indicator

    @property
    def status(self) -> PackagerStatus:
        return self.status_indicator.status

    async def run_app(self) -> None:
        self.logger.info("Connected to packager. You can now open your app in the simulator.")

    async def enable_js_debugging_mode(self) -> None:
        self.logger.info("Debugger ready. Enable remote debugging in app.")

    async def disable_js_debugging_mode(self) -> None:
        self.logger.info("Debugger ready. Disable remote debugging in app.")

    async def start_packager(self) -> None:
        """Leave a packager running in React Native mode and publish STARTED.

        A packager started in another mode, or by an unknown owner, is
        stopped first (publishing STOPPED). One already running in React
        Native mode is reused without a restart. Errors propagate and no
        STARTED is published.
        """
        self.logger.info("Starting React Native Packager.")
        running = await self.packager.is_running()
        if running:
            running_as = self.packager.get_running_as()
            if running_as is not PackagerRunAs.REACT_NATIVE:
                self.logger.info(
                    f"Packager on port {self.packager.port} is running as "
                    f"{running_as.value}; stopping it."
                )
                await self.packager.stop()
                self.status_indicator.publish(PackagerStatus.STOPPED)
                running = False
            else:
                self.logger.info("Attaching to running React Native packager")

        if not running:
            env = self.get_env_argument()
            await self.packager.start_as_react_native(env=env)

        self.status_indicator.publish(PackagerStatus.STARTED)

    async def prewarm_bundle_cache(self) -> None:
        # Variants that can warm the bundle cache before launch override this.
        return None

    def get_run_argument(self) -> List[str]:
        raise NotImplementedError("Not yet implemented: GeneralMobilePlatform.get_run_argument")

    def get_env_argument(self) -> dict[str, str]:
        return resolve_environment(self.run_options)

    def resolve_environment(self) -> dict[str, str]:
        return self.get_env_argument()


__all__ = ["GeneralMobilePlatform", "TargetType"]
