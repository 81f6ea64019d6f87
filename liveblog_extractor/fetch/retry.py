"""
Bounded fixed-delay retry around the fetch layer.

Only TRANSIENT errors (HTTP 503/504) are retried. Everything else,
including parse and transport failures, propagates on the first attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

import httpx

from ..config import CapiConfig, DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from ..core.types import PageEnvelope
from ..utils.logging import log_event
from .errors import CapiError, RetriesExhaustedError
from .fetcher import fetch_page

logger = logging.getLogger(__name__)

T = TypeVar("T")


def with_retry(
    func: Callable[[], T],
    retry_delay: float = DEFAULT_RETRY_DELAY,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `func` until it succeeds or fails with a non-retryable error.

    Args:
        func: Zero-argument callable performing one attempt
        retry_delay: Seconds to sleep between attempts
        max_attempts: Total attempts allowed, including the first
        sleep: Sleep function, injectable for tests

    Returns:
        Whatever `func` returns on its first successful attempt

    Raises:
        CapiError: The first non-retryable error, unchanged
        RetriesExhaustedError: When a retryable error is still occurring
            on attempt `max_attempts`
        ValueError: If max_attempts is less than 1
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    attempts = 1
    while True:
        try:
            return func()
        except CapiError as err:
            if not err.is_retryable():
                raise
            if attempts >= max_attempts:
                raise RetriesExhaustedError(err, attempts) from err
            log_event(
                logger,
                f"CAPI returned {err.status_code}, retrying in {retry_delay}s",
                event="retry_scheduled",
                status_code=err.status_code,
                attempt=attempts,
                max_attempts=max_attempts,
            )
            sleep(retry_delay)
            attempts += 1


def fetch_page_with_retry(
    client: httpx.Client,
    cfg: CapiConfig,
    api_key: str,
    page: int,
    sleep: Callable[[float], None] = time.sleep,
) -> PageEnvelope:
    """Fetch one page, retrying on 503/504 according to `cfg`."""
    return with_retry(
        lambda: fetch_page(
            client,
            cfg.base_url,
            api_key,
            cfg.query_tag or "",
            page,
            cfg.page_size,
        ),
        retry_delay=cfg.retry_delay,
        max_attempts=cfg.max_attempts,
        sleep=sleep,
    )
