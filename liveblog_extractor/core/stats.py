"""Per-document statistics written to META.json."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator

from .types import Document, Stats, Tag

KEYWORD_TAG_TYPE = "keyword"


def filter_tags_by_type(tags: Iterable[Tag], tag_type: str) -> Iterator[Tag]:
    """Yield the tags of the given type, preserving order."""
    return (tag for tag in tags if tag.type == tag_type)


def build_stats(document: Document, retrieved_at: datetime | None = None) -> Stats:
    """Compute stats from the document's original block container.

    Args:
        document: The document as returned by the API
        retrieved_at: Retrieval timestamp; defaults to now (UTC)

    Returns:
        Stats with block counts and the document's keyword tags
    """
    return Stats(
        original_id=document.id,
        web_publication_date=document.web_publication_date,
        retrieved_at=retrieved_at or datetime.now(timezone.utc),
        summary_block_count=document.blocks.count_summary_blocks(),
        total_block_count=document.blocks.count_body_blocks(),
        keyword_tags=list(filter_tags_by_type(document.tags, KEYWORD_TAG_TYPE)),
    )
