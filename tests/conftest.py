"""Shared fixtures."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from liveblog_extractor.core.types import BlockAttributes, ContentBlock


@pytest.fixture
def make_block() -> Callable[..., ContentBlock]:
    def _make(block_id: str, summary: bool = False) -> ContentBlock:
        return ContentBlock(
            id=block_id,
            body_html=f"<p>Block {block_id}</p>",
            attributes=BlockAttributes(summary=summary, title=f"Block {block_id}"),
        )

    return _make


@pytest.fixture
def json_response() -> Callable[..., httpx.Response]:
    def _make(payload: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))

    return _make
