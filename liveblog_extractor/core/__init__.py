"""
Core domain models and business logic.

This package contains the CAPI data types, the block segmentation
algorithm and the per-document statistics. None of it performs I/O.
"""

from .types import (
    BlockAttributes,
    BlockContainer,
    ContentBlock,
    Document,
    PageEnvelope,
    SchemaError,
    Segment,
    Stats,
    Tag,
)
from .chopper import segment, segment_document
from .stats import build_stats, filter_tags_by_type

__all__ = [
    "BlockAttributes",
    "BlockContainer",
    "ContentBlock",
    "Document",
    "PageEnvelope",
    "SchemaError",
    "Segment",
    "Stats",
    "Tag",
    "segment",
    "segment_document",
    "build_stats",
    "filter_tags_by_type",
]
