"""Exponential retry backoff shared by the read and write pipelines.

Each pipeline owns its own controller so a struggling write path never slows
down reads (and the other way round).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from collections.abc import Callable, Awaitable

from relay_tunnel.state.settings import BackoffSettings
from relay_tunnel.runtime.settings import load_backoff_settings

logger = logging.getLogger(__name__)

NoticeFn = Callable[[str, int], None]
SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class RetryPlan:
    delay_ms: int
    # Display duration of the user-visible notice, None when it stays silent.
    notice_ms: int | None


class BackoffController:
    def __init__(self, settings: BackoffSettings | None = None) -> None:
        self._settings = settings or load_backoff_settings()
        self._backoff_ms = 0

    @property
    def backoff_ms(self) -> int:
        return self._backoff_ms

    @property
    def notice_message(self) -> str:
        return self._settings.notice_message

    def on_failure(self) -> RetryPlan:
        settings = self._settings
        if not self._backoff_ms:
            self._backoff_ms = settings.initial_ms

        delay_ms = self._backoff_ms
        notice_ms = None
        if delay_ms >= settings.notice_threshold_ms:
            notice_ms = delay_ms + settings.notice_margin_ms

        self._backoff_ms = self._backoff_ms * settings.growth_factor + settings.jitter_ms
        return RetryPlan(delay_ms=delay_ms, notice_ms=notice_ms)

    def on_success(self) -> bool:
        """Reset the backoff. Returns True when a backoff was in progress."""
        recovered = self._backoff_ms != 0
        self._backoff_ms = 0
        return recovered


async def wait_before_retry(
    backoff: BackoffController,
    *,
    operation: str,
    notify: NoticeFn | None,
    sleep_fn: SleepFn | None = None,
) -> RetryPlan:
    plan = backoff.on_failure()
    logger.info("%s error, backing off: %dms", operation.capitalize(), plan.delay_ms)
    if plan.notice_ms is not None and notify is not None:
        notify(backoff.notice_message, plan.notice_ms)
    await (sleep_fn or asyncio.sleep)(plan.delay_ms / 1000)
    return plan


__all__ = ["BackoffController", "NoticeFn", "RetryPlan", "SleepFn", "wait_before_retry"]
