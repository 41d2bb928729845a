"""Retry backoff configuration."""

from __future__ import annotations

# First delay after a healthy period.
BACKOFF_INITIAL_MS = 1
BACKOFF_GROWTH_FACTOR = 2
BACKOFF_JITTER_MS = 93

# Delays at or above the threshold surface a retry notice to the user. The
# notice outlives the delay so it does not fade just before the retry lands.
BACKOFF_NOTICE_THRESHOLD_MS = 1000
BACKOFF_NOTICE_MARGIN_MS = 500

RELAY_RETRY_MESSAGE = "Connection to relay lost, retrying..."

__all__ = [
    "BACKOFF_GROWTH_FACTOR",
    "BACKOFF_INITIAL_MS",
    "BACKOFF_JITTER_MS",
    "BACKOFF_NOTICE_MARGIN_MS",
    "BACKOFF_NOTICE_THRESHOLD_MS",
    "RELAY_RETRY_MESSAGE",
]
