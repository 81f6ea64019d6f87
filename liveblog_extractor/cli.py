"""
Command-line interface for the Liveblog Extractor.

Uses Typer to provide a CLI with options for all major configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import load_config
from .fetch.errors import CapiError
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
console = Console()


@app.callback()
def main() -> None:
    """Extract summary-anchored segments from Guardian liveblogs."""


@app.command()
def run(
    capi_key: str | None = typer.Option(
        None,
        "--capi-key",
        "-k",
        envvar="CAPI_KEY",
        help="Content API key (or set CAPI_KEY / .env).",
    ),
    query_tag: str | None = typer.Option(
        None,
        "--query-tag",
        "-q",
        help="Tag query: commas mean AND, pipes mean OR, a leading '-' negates.",
    ),
    output_path: Path | None = typer.Option(
        None, "--output-path", "-o", help="Output directory (default: current directory)."
    ),
    limit: int | None = typer.Option(
        None, "--limit", "-l", min=0, help="Stop after writing this many documents."
    ),
    page_size: int | None = typer.Option(
        None, "--page-size", "-p", min=1, help="Documents per API page."
    ),
    drop_no_summary: bool = typer.Option(
        False, "--drop-no-summary", "-d", help="Skip documents with no summary blocks."
    ),
    retry_delay: float | None = typer.Option(
        None, "--retry-delay", min=0.0, help="Seconds between retries on 503/504."
    ),
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", min=1, help="Attempts per page before giving up."
    ),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, dir_okay=False),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
):
    """Fetch every liveblog matching a tag query and write its segments.

    Each document is written to `<output>/<last id component>/`, one JSON
    file per segment plus META.json with the document stats.
    """
    load_dotenv()

    cfg = load_config(str(config) if config else None)

    if capi_key:
        cfg.capi.api_key = capi_key
    if query_tag:
        cfg.capi.query_tag = query_tag
    if page_size is not None:
        cfg.capi.page_size = page_size
    if retry_delay is not None:
        cfg.capi.retry_delay = retry_delay
    if max_attempts is not None:
        cfg.capi.max_attempts = max_attempts
    if base_url:
        cfg.capi.base_url = base_url
    if output_path is not None:
        cfg.output.path = str(output_path)
    if limit is not None:
        cfg.output.limit = limit
    if drop_no_summary:
        cfg.output.drop_no_summary = True
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file

    try:
        stats = run_pipeline(cfg, show_progress=progress, console=console)
    except (CapiError, ValueError) as exc:
        console.print(f"Error: {exc}", style="red", markup=False)
        raise typer.Exit(code=1) from exc

    console.print(
        f"Wrote {stats.documents_written} documents "
        f"({stats.segments_written} segments, {stats.documents_skipped} skipped)"
    )


if __name__ == "__main__":
    app()
