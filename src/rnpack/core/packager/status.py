from __future__ import annotations

import logging
from typing import Callable, List

from .models import PackagerStatus

logger = logging.getLogger(__name__)

StatusListener = Callable[[PackagerStatus], None]


class PackagerStatusIndicator:
    """Holds the last published packager status and notifies listeners.

    Listeners run synchronously in subscription order on every publish, even
    when the status did not change.
    """

    def __init__(self, listeners: List[StatusListener] | None = None) -> None:
        self._status = PackagerStatus.STOPPED
        self._listeners: List[StatusListener] = list(listeners or [])

    @property
    def status(self) -> PackagerStatus:
        return self._status

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, status: PackagerStatus) -> None:
        status = PackagerStatus(status)
        logger.info("Packager status: %s", status.value)
        self._status = status
        for listener in list(self._listeners):
            listener(status)

    update_packager_status = publish


__all__ = ["PackagerStatusIndicator", "StatusListener"]
