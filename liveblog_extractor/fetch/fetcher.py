"""
Single-request access to the Content API search endpoint.

This module builds the search URL, issues one GET and turns the response
into either a PageEnvelope or a classified CapiError. It never retries;
see `retry.py` for that.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import quote, urlencode

import httpx

from ..core.types import PageEnvelope
from ..utils.logging import truncate_text
from .errors import CapiError

logger = logging.getLogger(__name__)


def build_search_url(
    base_url: str,
    api_key: str,
    tag_query: str,
    page: int,
    page_size: int,
) -> str:
    """Build the `/search` URL for one page of a tag query.

    The tag query is passed through untouched apart from percent-encoding,
    so the API's own grammar (`a,b` for AND, `a|b` for OR, `-a` for NOT)
    still applies.

    Args:
        base_url: API base URL, with or without a trailing slash
        api_key: Content API key
        tag_query: Tag query string
        page: 1-based page number
        page_size: Documents per page

    Returns:
        The full request URL

    Example:
        >>> build_search_url("https://content.guardianapis.com", "k", "a,b", 2, 10)
        'https://content.guardianapis.com/search?api-key=k&show-tags=all&tag=a%2Cb&show-blocks=all&page=2&page-size=10'
    """
    params = [
        ("api-key", api_key),
        ("show-tags", "all"),
        ("tag", tag_query),
        ("show-blocks", "all"),
        ("page", str(page)),
        ("page-size", str(page_size)),
    ]
    query = urlencode(params, quote_via=quote)
    return f"{base_url.rstrip('/')}/search?{query}"


def fetch_page(
    client: httpx.Client,
    base_url: str,
    api_key: str,
    tag_query: str,
    page: int,
    page_size: int,
) -> PageEnvelope:
    """Fetch and parse one page of search results.

    Args:
        client: HTTP client to issue the request with
        base_url: API base URL
        api_key: Content API key
        tag_query: Tag query string
        page: 1-based page number
        page_size: Documents per page

    Returns:
        The parsed page

    Raises:
        CapiError: TRANSPORT if no usable response arrived,
            TRANSIENT/PERMANENT for non-200 statuses, PARSE if a 200 body
            does not match the schema
    """
    url = build_search_url(base_url, api_key, tag_query, page, page_size)
    try:
        resp = client.get(url)
    except httpx.RequestError as exc:
        raise CapiError.transport_error(exc) from exc

    if resp.status_code != 200:
        raise CapiError.from_response(resp.status_code, resp.content)

    return _parse_envelope(resp)


def _parse_envelope(resp: httpx.Response) -> PageEnvelope:
    try:
        return PageEnvelope.from_dict(json.loads(resp.content))
    except ValueError as exc:
        # SchemaError, JSONDecodeError and UnicodeDecodeError
        body = resp.content.decode("utf-8", errors="replace")
        logger.error(
            "Unparseable CAPI response: %s",
            exc,
            extra={"event": "capi_parse_error", "body": truncate_text(body)},
        )
        raise CapiError.parse_error(resp.status_code, str(exc), body) from exc
