"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- CapiConfig: Content API access, paging and retry settings
- OutputConfig: Where and what to write
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

DEFAULT_BASE_URL = "https://content.guardianapis.com"
DEFAULT_PAGE_SIZE = 10
DEFAULT_RETRY_DELAY = 2.0
DEFAULT_MAX_ATTEMPTS = 10


@dataclass
class CapiConfig:
    """Configuration for talking to the Content API.

    Attributes:
        api_key: Inline API key (overrides the environment variable)
        api_key_env: Environment variable name containing the API key
        base_url: API base URL; `/search` is appended
        query_tag: Tag query; commas mean AND, pipes mean OR, a leading `-` negates
        page_size: Documents requested per page
        retry_delay: Seconds to wait between attempts on 503/504
        max_attempts: Total attempts per page, including the first
        timeout_seconds: Transport-level timeout for a single request
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    api_key: str | None = None
    api_key_env: str = "CAPI_KEY"
    base_url: str = DEFAULT_BASE_URL
    query_tag: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    timeout_seconds: float = 30.0
    trust_env: bool = True
    user_agent: str = "liveblog-extractor/0.1"


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        path: Base output directory; None means the current working directory
        limit: Maximum number of documents to write, None for no limit
        drop_no_summary: Skip documents that contain no summary blocks
    """

    path: str | None = None
    limit: int | None = None
    drop_no_summary: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to a file in the output directory
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    capi: CapiConfig = field(default_factory=CapiConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "capi": {
            "api_key": cfg.capi.api_key,
            "api_key_env": cfg.capi.api_key_env,
            "base_url": cfg.capi.base_url,
            "query_tag": cfg.capi.query_tag,
            "page_size": cfg.capi.page_size,
            "retry_delay": cfg.capi.retry_delay,
            "max_attempts": cfg.capi.max_attempts,
            "timeout_seconds": cfg.capi.timeout_seconds,
            "trust_env": cfg.capi.trust_env,
            "user_agent": cfg.capi.user_agent,
        },
        "output": {
            "path": cfg.output.path,
            "limit": cfg.output.limit,
            "drop_no_summary": cfg.output.drop_no_summary,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        capi=CapiConfig(**data["capi"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_key(cfg: CapiConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)
