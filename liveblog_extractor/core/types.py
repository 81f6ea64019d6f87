"""
Core data types for the Liveblog Extractor.

This module defines the structures parsed from, and written back out of,
the Guardian Content API search response:
- ContentBlock / BlockAttributes: a single liveblog post
- BlockContainer: the "main" block plus the ordered body blocks
- Tag / Document / PageEnvelope: search response metadata
- Segment: a summary block and the body blocks grouped under it
- Stats: per-document metadata written alongside the segments

API field names are kept in camelCase on the wire (`bodyHtml`,
`firstPublishedDate`, ...) and mapped to snake_case attributes here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class SchemaError(ValueError):
    """Raised when API JSON does not match the expected shape."""


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a timezone-aware datetime."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_iso8601(value: datetime) -> str:
    """Format a datetime as ISO 8601, using the `Z` suffix for UTC.

    Fractional seconds are written with the fewest of 0, 3 or 6 digits that
    keep the value exact, so `.678` stays `.678` rather than `.678000`.
    """
    if not value.microsecond:
        timespec = "seconds"
    elif value.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    text = value.isoformat(timespec=timespec)
    if text.endswith("+00:00"):
        return f"{text[:-6]}Z"
    return text


def _require(data: Any, key: str, kind: type, where: str) -> Any:
    if not isinstance(data, dict):
        raise SchemaError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise SchemaError(f"{where}: missing '{key}'")
    value = data[key]
    # bool is a subclass of int
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise SchemaError(f"{where}: '{key}' has unexpected type {type(value).__name__}")
    return value


def _optional(data: dict[str, Any], key: str, kind: type, default: Any, where: str) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise SchemaError(f"{where}: '{key}' has unexpected type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class BlockAttributes:
    """Flags attached to a content block.

    Attributes:
        summary: True when the block is a summary (segment anchor)
        title: Optional headline shown above the block
        pinned: True when the block is pinned to the top of the liveblog
    """
    summary: bool = False
    title: str | None = None
    pinned: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> BlockAttributes:
        if not isinstance(data, dict):
            raise SchemaError("attributes: expected an object")
        return cls(
            summary=_optional(data, "summary", bool, False, "attributes"),
            title=_optional(data, "title", str, None, "attributes"),
            pinned=_optional(data, "pinned", bool, False, "attributes"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"summary": self.summary, "title": self.title, "pinned": self.pinned}


@dataclass(frozen=True)
class ContentBlock:
    """A single liveblog post as returned by the API.

    Attributes:
        id: Block identifier, unique within the document
        body_html: The rendered HTML body of the post
        attributes: Summary/title/pinned flags
        first_published_date: ISO 8601 timestamp of first publication, if present
    """
    id: str
    body_html: str
    attributes: BlockAttributes = field(default_factory=BlockAttributes)
    first_published_date: str | None = None

    @property
    def is_summary(self) -> bool:
        return self.attributes.summary

    @classmethod
    def from_dict(cls, data: Any) -> ContentBlock:
        return cls(
            id=_require(data, "id", str, "block"),
            body_html=_require(data, "bodyHtml", str, "block"),
            attributes=BlockAttributes.from_dict(data.get("attributes", {})),
            first_published_date=_optional(data, "firstPublishedDate", str, None, "block"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "bodyHtml": self.body_html,
            "attributes": self.attributes.to_dict(),
            "firstPublishedDate": self.first_published_date,
        }


@dataclass(frozen=True)
class BlockContainer:
    """The blocks of a document: the standfirst-like main block plus the body.

    Body order is the order the API returned (newest first) and is never
    changed. The main block is not part of the body.
    """
    main: ContentBlock
    body: tuple[ContentBlock, ...] = ()

    def count_body_blocks(self) -> int:
        return len(self.body)

    def count_summary_blocks(self) -> int:
        return sum(1 for block in self.body if block.is_summary)

    @classmethod
    def from_dict(cls, data: Any) -> BlockContainer:
        main = ContentBlock.from_dict(_require(data, "main", dict, "blocks"))
        body = _require(data, "body", list, "blocks")
        return cls(main=main, body=tuple(ContentBlock.from_dict(item) for item in body))


@dataclass(frozen=True)
class Tag:
    """Classification label attached to a document (keyword, contributor, ...)."""
    id: str
    web_title: str
    type: str

    @classmethod
    def from_dict(cls, data: Any) -> Tag:
        return cls(
            id=_require(data, "id", str, "tag"),
            web_title=_require(data, "webTitle", str, "tag"),
            type=_require(data, "type", str, "tag"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "webTitle": self.web_title, "type": self.type}


@dataclass(frozen=True)
class Document:
    """A single search result (a liveblog) with its blocks and tags."""
    id: str
    type: str
    web_publication_date: datetime
    blocks: BlockContainer
    tags: tuple[Tag, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Document:
        raw_date = _require(data, "webPublicationDate", str, "document")
        try:
            published = parse_iso8601(raw_date)
        except ValueError as exc:
            raise SchemaError(f"document: invalid webPublicationDate {raw_date!r}") from exc
        return cls(
            id=_require(data, "id", str, "document"),
            type=_require(data, "type", str, "document"),
            web_publication_date=published,
            blocks=BlockContainer.from_dict(_require(data, "blocks", dict, "document")),
            tags=tuple(Tag.from_dict(t) for t in _require(data, "tags", list, "document")),
        )


@dataclass(frozen=True)
class PageEnvelope:
    """One page of search results plus the paging metadata around it."""
    status: str
    total: int
    start_index: int
    page_size: int
    current_page: int
    pages: int
    order_by: str
    results: tuple[Document, ...] = ()
    user_tier: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> PageEnvelope:
        """Parse the full API body, i.e. `{"response": {...}}`."""
        response = _require(data, "response", dict, "envelope")
        where = "response"
        return cls(
            status=_require(response, "status", str, where),
            total=_require(response, "total", int, where),
            start_index=_require(response, "startIndex", int, where),
            page_size=_require(response, "pageSize", int, where),
            current_page=_require(response, "currentPage", int, where),
            pages=_require(response, "pages", int, where),
            order_by=_require(response, "orderBy", str, where),
            results=tuple(
                Document.from_dict(item) for item in _require(response, "results", list, where)
            ),
            user_tier=_optional(response, "userTier", str, None, where),
        )


@dataclass(frozen=True)
class Segment:
    """A summary block and the ordinary blocks grouped with it.

    `summary` is None only for the trailing run of blocks that no summary
    claimed (the most recent posts, or every post when nothing is marked).
    """
    summary: ContentBlock | None
    events: tuple[ContentBlock, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict() if self.summary is not None else None,
            "events": [block.to_dict() for block in self.events],
        }


@dataclass
class Stats:
    """Per-document metadata written next to the segments.

    Attributes:
        original_id: The CAPI id of the document
        web_publication_date: When the document was first published
        retrieved_at: When this run fetched the document
        summary_block_count: Number of body blocks flagged as summaries
        total_block_count: Number of body blocks
        keyword_tags: Tags of type "keyword", in API order
    """
    original_id: str
    web_publication_date: datetime
    retrieved_at: datetime
    summary_block_count: int
    total_block_count: int
    keyword_tags: list[Tag] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_id": self.original_id,
            "web_publication_date": format_iso8601(self.web_publication_date),
            "retrieved_at": format_iso8601(self.retrieved_at),
            "summary_block_count": self.summary_block_count,
            "total_block_count": self.total_block_count,
            "keyword_tags": [tag.to_dict() for tag in self.keyword_tags],
        }
