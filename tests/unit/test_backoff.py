from __future__ import annotations

import pytest

from fakes.timing import FakeSleep
from relay_tunnel.runtime.settings import load_backoff_settings
from relay_tunnel.stream.backoff import BackoffController, wait_before_retry


def test_backoff_sequence_from_fresh_state() -> None:
    backoff = BackoffController()
    delays = [backoff.on_failure().delay_ms for _ in range(6)]
    assert delays == [1, 95, 283, 659, 1411, 2915]


def test_backoff_notice_only_at_threshold() -> None:
    backoff = BackoffController()
    plans = [backoff.on_failure() for _ in range(5)]
    assert [p.notice_ms for p in plans[:4]] == [None, None, None, None]
    assert plans[4].delay_ms == 1411
    assert plans[4].notice_ms == 1911


def test_backoff_success_resets_and_reports_recovery() -> None:
    backoff = BackoffController()
    assert backoff.on_success() is False
    backoff.on_failure()
    backoff.on_failure()
    assert backoff.backoff_ms == 283
    assert backoff.on_success() is True
    assert backoff.backoff_ms == 0
    assert backoff.on_failure().delay_ms == 1


def test_backoff_uses_configured_message() -> None:
    assert BackoffController().notice_message == load_backoff_settings().notice_message


@pytest.mark.asyncio
async def test_wait_before_retry_surfaces_one_notice_per_slow_retry() -> None:
    backoff = BackoffController()
    sleep = FakeSleep()
    notices: list[tuple[str, int]] = []

    for _ in range(5):
        await wait_before_retry(
            backoff,
            operation="read",
            notify=lambda message, duration: notices.append((message, duration)),
            sleep_fn=sleep,
        )

    assert sleep.delays == [0.001, 0.095, 0.283, 0.659, 1.411]
    assert notices == [(backoff.notice_message, 1911)]
