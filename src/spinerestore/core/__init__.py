"""Core functionality for spinerestore.

This package exposes the classification, relocation and search entry points
used by the CLI.
- classify: infer a file's type from its content.
- restore_extensions / organize_by_extension / rename_png_by_size: batch
  rename and move operations that never overwrite existing files.
- search: substring search across text-or-binary asset files.
"""

from spinerestore.core.classifier import classify, detect_file_type
from spinerestore.core.png import read_dimensions
from spinerestore.core.relocator import (
    organize_by_extension,
    organize_spine_assets,
    rename_png_by_size,
    restore_extensions,
)
from spinerestore.core.scanner import count_files, iter_files, scan_files
from spinerestore.core.searcher import search, search_atlas, search_skel

__all__ = [
    "classify",
    "count_files",
    "detect_file_type",
    "iter_files",
    "organize_by_extension",
    "organize_spine_assets",
    "read_dimensions",
    "rename_png_by_size",
    "restore_extensions",
    "scan_files",
    "search",
    "search_atlas",
    "search_skel",
]
