"""
Block segmentation ("the chopper").

The API returns a liveblog's body as one flat, newest-first list of blocks.
Editors periodically post a summary block that recaps the preceding updates;
this module splits the flat list at those summaries so each summary travels
with the blocks it recaps.
"""

from __future__ import annotations

from typing import Iterable

from .types import ContentBlock, Document, Segment


def segment(blocks: Iterable[ContentBlock]) -> list[Segment]:
    """Partition an ordered block list into summary-anchored segments.

    Blocks are consumed in the order given and never reordered. Every
    summary block closes the run of ordinary blocks collected since the
    previous summary (or the start). Whatever is left after the last
    summary becomes a final segment with no summary, which is emitted even
    when it is empty.

    Args:
        blocks: Body blocks in API order

    Returns:
        Exactly `summary count + 1` segments. Reinserting each segment's
        summary in front of its events and concatenating them reproduces
        the input.

    Examples:
        >>> segment([])
        [Segment(summary=None, events=())]
    """
    segments: list[Segment] = []
    pending: list[ContentBlock] = []

    for block in blocks:
        if block.is_summary:
            segments.append(Segment(summary=block, events=tuple(pending)))
            pending = []
        else:
            pending.append(block)

    segments.append(Segment(summary=None, events=tuple(pending)))
    return segments


def segment_document(document: Document) -> list[Segment]:
    """Segment a document's body blocks. The main block is left out."""
    return segment(document.blocks.body)
