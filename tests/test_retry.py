"""Tests for the retry driver."""

from __future__ import annotations

import httpx
import pytest

from helpers import document_dict, envelope_dict
from liveblog_extractor.config import CapiConfig
from liveblog_extractor.fetch.errors import CapiError, ErrorKind, RetriesExhaustedError
from liveblog_extractor.fetch.retry import fetch_page_with_retry, with_retry


class _CountingHandler:
    """MockTransport handler that replays a list of response factories, repeating the last."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        index = min(self.calls - 1, len(self._responses) - 1)
        return self._responses[index]()


def _cfg(**overrides) -> CapiConfig:
    cfg = CapiConfig(base_url="https://capi.example.com", query_tag="world/live")
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return cfg


def test_permanent_503_makes_exactly_max_attempts():
    """A 503 that never clears should be tried exactly max_attempts times"""
    handler = _CountingHandler([lambda: httpx.Response(503, text="Service Unavailable")])
    sleeps: list[float] = []

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(CapiError) as excinfo:
            fetch_page_with_retry(client, _cfg(max_attempts=10), "key", 1, sleep=sleeps.append)

    assert handler.calls == 10
    assert excinfo.value.status_code == 503
    assert excinfo.value.kind is ErrorKind.TRANSIENT
    assert sleeps == [2.0] * 9


def test_exhausted_retries_are_reported_with_attempt_count():
    """Giving up should report the attempts and the last error"""
    handler = _CountingHandler([lambda: httpx.Response(504, text="Gateway Timeout")])

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(RetriesExhaustedError) as excinfo:
            fetch_page_with_retry(
                client, _cfg(max_attempts=3, retry_delay=0.5), "key", 1, sleep=lambda s: None
            )

    err = excinfo.value
    assert err.attempts == 3
    assert err.status_code == 504
    assert err.message == "Gateway Timeout"
    assert err.last_error.status_code == 504
    assert "3 attempts" in str(err)


def test_404_is_not_retried():
    """A 404 should be raised after a single attempt"""
    handler = _CountingHandler([lambda: httpx.Response(404, text="Not Found")])
    sleeps: list[float] = []

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(CapiError) as excinfo:
            fetch_page_with_retry(client, _cfg(), "key", 1, sleep=sleeps.append)

    assert handler.calls == 1
    assert excinfo.value.status_code == 404
    assert not isinstance(excinfo.value, RetriesExhaustedError)
    assert sleeps == []


def test_transient_error_then_success(json_response):
    """Transient errors should be retried until a page arrives"""
    handler = _CountingHandler(
        [
            lambda: httpx.Response(503, text="busy"),
            lambda: httpx.Response(504, text="busy"),
            lambda: json_response(envelope_dict([document_dict()])),
        ]
    )
    sleeps: list[float] = []

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        envelope = fetch_page_with_retry(
            client, _cfg(retry_delay=0.25), "key", 4, sleep=sleeps.append
        )

    assert handler.calls == 3
    assert sleeps == [0.25, 0.25]
    assert len(envelope.results) == 1


def test_parse_error_is_not_retried():
    """A parse error should not be retried"""
    handler = _CountingHandler([lambda: httpx.Response(200, text="not json")])

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(CapiError) as excinfo:
            fetch_page_with_retry(client, _cfg(), "key", 1, sleep=lambda s: None)

    assert handler.calls == 1
    assert excinfo.value.kind is ErrorKind.PARSE


def test_with_retry_does_not_catch_other_exceptions():
    """Non-API exceptions should pass straight through"""
    calls = 0

    def boom():
        nonlocal calls
        calls += 1
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        with_retry(boom, sleep=lambda s: None)
    assert calls == 1


def test_with_retry_single_attempt_budget():
    """A budget of one attempt should give up on the first 503"""
    calls = 0

    def unavailable():
        nonlocal calls
        calls += 1
        raise CapiError(503, "busy", ErrorKind.TRANSIENT)

    with pytest.raises(RetriesExhaustedError):
        with_retry(unavailable, max_attempts=1, sleep=lambda s: None)
    assert calls == 1


def test_with_retry_rejects_zero_attempts():
    with pytest.raises(ValueError, match="max_attempts"):
        with_retry(lambda: None, max_attempts=0)


def test_transport_error_is_not_retried():
    """A socket-level failure should get one attempt and no sleep"""
    calls = 0
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectTimeout("timed out", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(CapiError) as excinfo:
            fetch_page_with_retry(client, _cfg(), "key", 1, sleep=sleeps.append)

    assert calls == 1
    assert sleeps == []
    assert excinfo.value.kind is ErrorKind.TRANSPORT
    assert not isinstance(excinfo.value, RetriesExhaustedError)
