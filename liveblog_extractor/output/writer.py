"""Per-document output folders.

Each document gets its own folder under the output directory, named after
the last component of its CAPI id. Inside it every segment is written as
`<summary block id>.json` (or `HEAD.json` for the segment without a
summary) and the document statistics as `META.json`. Summary ids are
sanitized before use, and ids that would clash with another file get a
numeric suffix.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Any, Iterable

from ..core.types import Segment, Stats

logger = logging.getLogger(__name__)

MAX_DIR_NAME_LENGTH = 200
UNKNOWN_DIR_NAME = "UNKNOWN"
HEAD_SEGMENT_NAME = "HEAD"
META_FILE_NAME = "META.json"
RESERVED_SEGMENT_NAMES = frozenset({HEAD_SEGMENT_NAME.casefold(), "meta"})

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def dir_name_from_capi_id(capi_id: str) -> str:
    """Derive a folder name from a CAPI id.

    Args:
        capi_id: Document id such as "world/live/2023/jan/01/some-liveblog"

    Returns:
        The last path component, truncated to 200 characters, or "UNKNOWN"
        when the id yields nothing usable

    Examples:
        >>> dir_name_from_capi_id("world/live/2023/jan/01/some-liveblog")
        'some-liveblog'
    """
    name = capi_id.rsplit("/", 1)[-1][:MAX_DIR_NAME_LENGTH]
    if not name or name in (".", ".."):
        return UNKNOWN_DIR_NAME
    return name


def segment_file_stem(block_id: str) -> str:
    """Turn a summary block id into a file stem that stays inside the folder.

    Runs of characters outside `[A-Za-z0-9._-]` become a single "-", and
    dots and dashes are trimmed from both ends. An id with nothing usable
    left maps to "block".

    Examples:
        >>> segment_file_stem("5f3a9c")
        '5f3a9c'
        >>> segment_file_stem("../etc/passwd")
        'etc-passwd'
    """
    stem = _UNSAFE_NAME_RE.sub("-", block_id).strip(".-")
    return stem[:MAX_DIR_NAME_LENGTH] or "block"


class DocumentOutput:
    """Manages file paths and writing for a single document's output folder."""

    def __init__(self, base_dir: Path, capi_id: str):
        """Initialize the DocumentOutput.

        Args:
            base_dir: The output directory holding all document folders
            capi_id: The CAPI id of the document
        """
        self._base_dir = base_dir
        self._capi_id = capi_id

    @property
    def folder(self) -> Path:
        return self._base_dir / dir_name_from_capi_id(self._capi_id)

    @property
    def meta_path(self) -> Path:
        return self.folder / META_FILE_NAME

    def segment_path(self, segment: Segment) -> Path:
        """Returns the file path for a single segment.

        Segments are named by their (sanitized) summary block id; the
        segment without a summary is written as HEAD.json. Use
        `segment_paths` when writing a whole document so that clashing
        names are told apart.
        """
        return self.segment_paths([segment])[0]

    def segment_paths(self, segments: Iterable[Segment]) -> list[Path]:
        """Returns one distinct file path per segment, in segment order.

        A summary whose name would clash with HEAD.json, META.json or an
        earlier segment (compared case-insensitively) gets a "-2", "-3", ...
        suffix.
        """
        taken = set(RESERVED_SEGMENT_NAMES)
        paths: list[Path] = []
        for segment in segments:
            if segment.summary is None:
                paths.append(self.folder / f"{HEAD_SEGMENT_NAME}.json")
                continue
            base = segment_file_stem(segment.summary.id)
            stem = base
            count = 1
            while stem.casefold() in taken:
                count += 1
                stem = f"{base}-{count}"
            if stem != base:
                logger.warning(
                    "Summary block %r clashes with an existing file name; writing %s.json",
                    segment.summary.id,
                    stem,
                )
            taken.add(stem.casefold())
            paths.append(self.folder / f"{stem}.json")
        return paths

    def ensure_folder(self) -> None:
        self.folder.mkdir(parents=True, exist_ok=True)

    def write_segments(self, segments: Iterable[Segment]) -> list[Path]:
        """Write every segment to its own JSON file.

        Returns:
            The paths written, in segment order
        """
        segments = list(segments)
        paths = self.segment_paths(segments)
        for segment, path in zip(segments, paths):
            _write_json(path, segment.to_dict())
        return paths

    def write_stats(self, stats: Stats) -> Path:
        _write_json(self.meta_path, stats.to_dict())
        return self.meta_path


def write_document(
    base_dir: Path,
    capi_id: str,
    segments: Iterable[Segment],
    stats: Stats,
) -> Path:
    """Write a document's segments and stats to its output folder.

    Args:
        base_dir: The output directory
        capi_id: The CAPI id of the document
        segments: Segments produced by the chopper
        stats: Statistics for the document

    Returns:
        The document's output folder

    Raises:
        OSError: If the folder or any file cannot be written
    """
    output = DocumentOutput(base_dir, capi_id)
    output.ensure_folder()
    logger.debug("Writing %s to %s", capi_id, output.folder)
    output.write_segments(segments)
    output.write_stats(stats)
    return output.folder


def _write_json(path: Path, data: dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
