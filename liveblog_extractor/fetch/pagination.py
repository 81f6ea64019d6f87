"""Walk the search results page by page."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator

import httpx

from ..config import CapiConfig
from ..core.types import Document, PageEnvelope
from ..utils.logging import log_event
from .retry import fetch_page_with_retry

logger = logging.getLogger(__name__)


def iter_pages(
    client: httpx.Client,
    cfg: CapiConfig,
    api_key: str,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[PageEnvelope]:
    """Yield non-empty pages starting from page 1.

    Pages are requested strictly one after another. Iteration stops
    normally at the first page with no results; any CapiError from the
    retry layer propagates and ends the iteration.
    """
    page = 1
    while True:
        envelope = fetch_page_with_retry(client, cfg, api_key, page, sleep=sleep)
        if not envelope.results:
            log_event(
                logger,
                f"Reached the last page of results at page {page}",
                event="pagination_complete",
                page=page,
                total=envelope.total,
            )
            return
        log_event(
            logger,
            f"Fetched page {page} of {envelope.pages}",
            event="page_fetched",
            page=page,
            pages=envelope.pages,
            results=len(envelope.results),
        )
        yield envelope
        page += 1


def iter_documents(
    client: httpx.Client,
    cfg: CapiConfig,
    api_key: str,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[Document]:
    """Lazily yield every document matching the configured tag query.

    The next page is only requested once the consumer has taken every
    document of the current one. Stopping iteration early stops fetching.

    Args:
        client: HTTP client to issue requests with
        cfg: API, paging and retry settings
        api_key: Content API key
        sleep: Sleep function used between retries

    Yields:
        Documents in API order, page after page
    """
    for envelope in iter_pages(client, cfg, api_key, sleep=sleep):
        yield from envelope.results
