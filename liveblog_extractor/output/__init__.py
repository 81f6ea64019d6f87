"""
Output generation.

This package writes segmented documents and their stats to disk.
"""

from .writer import DocumentOutput, dir_name_from_capi_id, segment_file_stem, write_document

__all__ = ["DocumentOutput", "dir_name_from_capi_id", "segment_file_stem", "write_document"]
