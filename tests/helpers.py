"""Builders for CAPI-shaped test payloads."""

from __future__ import annotations

from typing import Any


def block_dict(block_id: str, summary: bool = False, title: str | None = None) -> dict[str, Any]:
    return {
        "id": block_id,
        "bodyHtml": f"<p>Block {block_id}</p>",
        "attributes": {"summary": summary, "title": title, "pinned": False},
        "firstPublishedDate": "2023-01-01T12:00:00Z",
    }


def document_dict(
    doc_id: str = "world/live/2023/jan/01/test-liveblog",
    body: list[dict[str, Any]] | None = None,
    tags: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "id": doc_id,
        "type": "liveblog",
        "webPublicationDate": "2023-01-01T09:30:00Z",
        "blocks": {"main": block_dict("main"), "body": body or []},
        "tags": tags or [],
    }


def envelope_dict(results: list[dict[str, Any]], page: int = 1, pages: int = 1) -> dict[str, Any]:
    return {
        "response": {
            "status": "ok",
            "userTier": "developer",
            "total": len(results),
            "startIndex": 1,
            "pageSize": 10,
            "currentPage": page,
            "pages": pages,
            "orderBy": "newest",
            "results": results,
        }
    }
