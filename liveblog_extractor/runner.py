"""
Main pipeline orchestration for the Liveblog Extractor.

This module coordinates the whole run:
1. Page through the Content API search results for the tag query
2. Split each document's body blocks into segments
3. Compute per-document stats
4. Write segments and stats to the document's output folder

Pages are fetched one at a time and documents are written as soon as they
arrive, so a failure part-way leaves the documents already written in place.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Callable

import httpx
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .config import AppConfig, get_api_key
from .core.chopper import segment_document
from .core.stats import build_stats
from .fetch.errors import CapiError
from .fetch.pagination import iter_documents
from .output.writer import write_document
from .utils.logging import close_logging, log_event, setup_logging


@dataclass
class RunStats:
    """Counters collected during a run.

    Attributes:
        documents_seen: Documents received from the API
        documents_written: Documents written to disk
        documents_skipped: Documents dropped for having no summary blocks
        segments_written: Segment files written across all documents
    """
    documents_seen: int = 0
    documents_written: int = 0
    documents_skipped: int = 0
    segments_written: int = 0


def resolve_output_dir(cfg: AppConfig) -> Path:
    """Return the configured output directory, or the current directory."""
    if cfg.output.path:
        return Path(cfg.output.path)
    return Path.cwd()


def run_pipeline(
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunStats:
    """Run the fetch, segment and write pipeline.

    Args:
        cfg: Application configuration
        show_progress: Whether to display a progress spinner
        console: Rich console for output (creates default if None)
        client: HTTP client to use; one is created from `cfg.capi` if None
        sleep: Sleep function used between retries

    Returns:
        Counters for the run

    Raises:
        ValueError: If the API key or tag query is missing
        CapiError: If any page fails for good
        OSError: If output cannot be written
    """
    api_key = get_api_key(cfg.capi)
    if not api_key:
        raise ValueError(f"Missing Content API key (set {cfg.capi.api_key_env} or pass --capi-key)")
    if not cfg.capi.query_tag:
        raise ValueError("Missing tag query")

    output_dir = resolve_output_dir(cfg)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger = setup_logging(cfg.logging, output_dir)
    try:
        return _run(cfg, api_key, output_dir, logger, show_progress, console, client, sleep)
    finally:
        close_logging(logger)


def _run(
    cfg: AppConfig,
    api_key: str,
    output_dir: Path,
    logger: logging.Logger,
    show_progress: bool,
    console: Console | None,
    client: httpx.Client | None,
    sleep: Callable[[float], None],
) -> RunStats:
    log_event(
        logger,
        "Pipeline start",
        event="pipeline_start",
        query_tag=cfg.capi.query_tag,
        output=str(output_dir),
        page_size=cfg.capi.page_size,
    )

    stats = RunStats()
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=cfg.capi.timeout_seconds,
            headers={"User-Agent": cfg.capi.user_agent},
            trust_env=cfg.capi.trust_env,
        )

    progress: Progress | None = None
    task = None
    if show_progress:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            TextColumn("{task.completed} written"),
            TimeElapsedColumn(),
            console=console or Console(),
            transient=True,
        )
        progress.start()
        task = progress.add_task("Extracting liveblogs", total=None)

    try:
        _process_documents(client, cfg, api_key, output_dir, stats, logger, sleep, progress, task)
    except CapiError as exc:
        logger.error(
            "Pipeline failed: %s",
            exc,
            extra={
                "event": "pipeline_failed",
                "kind": exc.kind.value,
                "status_code": exc.status_code,
                "documents_written": stats.documents_written,
            },
        )
        raise
    finally:
        if progress is not None:
            progress.stop()
        if owns_client:
            client.close()

    log_event(
        logger,
        "Pipeline complete",
        event="pipeline_complete",
        documents_seen=stats.documents_seen,
        documents_written=stats.documents_written,
        documents_skipped=stats.documents_skipped,
        segments_written=stats.segments_written,
    )
    return stats


def _process_documents(
    client: httpx.Client,
    cfg: AppConfig,
    api_key: str,
    output_dir: Path,
    stats: RunStats,
    logger: logging.Logger,
    sleep: Callable[[float], None],
    progress: Progress | None,
    task,
) -> None:
    limit = cfg.output.limit
    if limit is not None and limit <= 0:
        return

    for document in iter_documents(client, cfg.capi, api_key, sleep=sleep):
        stats.documents_seen += 1
        doc_stats = build_stats(document)

        if cfg.output.drop_no_summary and doc_stats.summary_block_count == 0:
            stats.documents_skipped += 1
            log_event(
                logger,
                f"Skipping {document.id}: no summary blocks",
                event="document_skipped",
                document_id=document.id,
            )
            continue

        segments = segment_document(document)
        folder = write_document(output_dir, document.id, segments, doc_stats)
        stats.documents_written += 1
        stats.segments_written += len(segments)
        log_event(
            logger,
            f"Wrote {document.id}",
            event="document_written",
            document_id=document.id,
            folder=str(folder),
            segments=len(segments),
            summary_blocks=doc_stats.summary_block_count,
            total_blocks=doc_stats.total_block_count,
        )
        if progress is not None and task is not None:
            progress.advance(task, 1)

        if limit is not None and stats.documents_written >= limit:
            log_event(logger, f"Reached limit of {limit} documents", event="limit_reached", limit=limit)
            return
