from __future__ import annotations

import pytest

from rnpack.core.packager import PackagerStatus, PackagerStatusIndicator


def test_initial_status_is_stopped() -> None:
    assert PackagerStatusIndicator().status is PackagerStatus.STOPPED


def test_publish_notifies_listeners_in_order_on_every_publish() -> None:
    seen: list[tuple[str, PackagerStatus]] = []
    indicator = PackagerStatusIndicator()
    indicator.subscribe(lambda s: seen.append(("first", s)))
    indicator.subscribe(lambda s: seen.append(("second", s)))

    indicator.publish(PackagerStatus.STARTED)
    indicator.publish(PackagerStatus.STARTED)

    assert indicator.status is PackagerStatus.STARTED
    assert seen == [
        ("first", PackagerStatus.STARTED),
        ("second", PackagerStatus.STARTED),
        ("first", PackagerStatus.STARTED),
        ("second", PackagerStatus.STARTED),
    ]


def test_unsubscribe_stops_notifications() -> None:
    seen: list[PackagerStatus] = []
    indicator = PackagerStatusIndicator()
    unsubscribe = indicator.subscribe(seen.append)

    indicator.publish(PackagerStatus.STARTED)
    unsubscribe()
    unsubscribe()
    indicator.publish(PackagerStatus.STOPPED)

    assert seen == [PackagerStatus.STARTED]


def test_publish_accepts_status_values() -> None:
    indicator = PackagerStatusIndicator()
    indicator.update_packager_status("started")  # type: ignore[arg-type]
    assert indicator.status is PackagerStatus.STARTED


def test_listener_errors_propagate() -> None:
    def _boom(_status: PackagerStatus) -> None:
        raise RuntimeError("listener failed")

    indicator = PackagerStatusIndicator(listeners=[_boom])
    with pytest.raises(RuntimeError, match="listener failed"):
        indicator.publish(PackagerStatus.STARTED)
