"""
Content API fetching.

This package handles request construction, error classification,
retries and pagination against the Content API search endpoint.
"""

from .errors import CapiError, ErrorKind, RetriesExhaustedError
from .fetcher import build_search_url, fetch_page
from .retry import fetch_page_with_retry, with_retry
from .pagination import iter_documents, iter_pages

__all__ = [
    "CapiError",
    "ErrorKind",
    "RetriesExhaustedError",
    "build_search_url",
    "fetch_page",
    "fetch_page_with_retry",
    "with_retry",
    "iter_documents",
    "iter_pages",
]
