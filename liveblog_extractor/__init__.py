"""
Liveblog Extractor - split Guardian liveblogs into summary-anchored segments.

This package pages through the Guardian Content API (CAPI) for a tag query,
and for every liveblog it finds, regroups the flat list of body blocks into
segments: each "summary" block together with the run of ordinary blocks
that came before it in the API order.

Main entry point is the CLI via the `liveblog-extractor run` command.

Example:
    $ liveblog-extractor run -k $CAPI_KEY -q tone/minutebyminute -o out/
"""

__all__ = ["__version__", "segment", "build_stats", "iter_documents", "CapiError"]
__version__ = "0.1.0"

from .core.chopper import segment
from .core.stats import build_stats
from .fetch.errors import CapiError
from .fetch.pagination import iter_documents
