"""Content-based file type classification.

Extension-less asset files are classified from their bytes alone, in strict
priority order over a 64-byte header read once:

1. PNG signature in the first 8 bytes.
2. If the header decodes as UTF-8:
   a. ``<?xml`` / ``<!DOCTYPE`` prefix -> XML.
   b. Any other ``<`` prefix -> re-read the whole file and apply the plist
      heuristic (declaration, ``</plist>``, ``<dict>`` or ``<...>`` end to end).
   c. ``{`` / ``[`` prefix -> re-read the whole file and parse it as JSON.
3. Fallback: whole file is valid UTF-8 -> ATLAS, otherwise SKEL.

The header peek bounds I/O for the common cases; full-file reads only happen
once the header has shown text-like signal.
"""

import json
import logging
from pathlib import Path
from typing import Any

from spinerestore.errors import DecodeError, FileAccessError
from spinerestore.models.core import TypeTag
from spinerestore.utils.text import decode_strict, is_valid_text

logger = logging.getLogger(__name__)

HEADER_SIZE = 64
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
XML_PREFIXES = ("<?xml", "<!DOCTYPE")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _read_header(path: Path) -> bytes:
    try:
        with path.open("rb") as f:
            return f.read(HEADER_SIZE)
    except OSError as e:
        raise FileAccessError(f"Cannot read file header ({e.strerror})", path) from e


def _read_all(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileAccessError(f"Cannot read file ({e.strerror})", path) from e


def _read_text(path: Path) -> str | None:
    """Full file as strict UTF-8, or None when it is not valid text."""
    try:
        return decode_strict(_read_all(path), path)
    except DecodeError as e:
        logger.debug("Not text: %s", e)
        return None


def looks_like_xml(content: str) -> bool:
    """Plist-style XML heuristic applied to the full, stripped file content."""
    trimmed = content.strip()
    return (
        trimmed.startswith(XML_PREFIXES)
        or "</plist>" in trimmed
        or "<dict>" in trimmed
        or (trimmed.startswith("<") and trimmed.endswith(">"))
    )


def is_json(content: str) -> bool:
    """Return True if *content* parses as a single JSON value."""
    try:
        json.loads(content, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False
    return True


def detect_file_type(path: Path) -> TypeTag:
    """Classify *path* by content.

    Args:
        path: File to inspect.

    Returns:
        The inferred TypeTag. Never UNKNOWN for a readable file: text falls back
        to ATLAS and undecodable bytes to SKEL.

    Raises:
        FileAccessError: If the file cannot be opened or read.
    """
    header = _read_header(path)

    if header[:8] == PNG_SIGNATURE:
        return TypeTag.PNG

    try:
        trimmed = header.decode("utf-8").strip()
    except UnicodeDecodeError:
        # A multi-byte character cut at the header boundary lands here as well.
        trimmed = None

    if trimmed is not None:
        if trimmed.startswith(XML_PREFIXES):
            return TypeTag.XML

        if trimmed.startswith("<"):
            content = _read_text(path)
            if content is not None and looks_like_xml(content):
                return TypeTag.XML

        if trimmed.startswith(("{", "[")):
            content = _read_text(path)
            if content is not None and is_json(content):
                return TypeTag.JSON

    if is_valid_text(_read_all(path)):
        return TypeTag.ATLAS
    return TypeTag.SKEL


def classify(path: Path) -> TypeTag:
    """Classify *path*, returning UNKNOWN instead of raising on I/O errors."""
    try:
        return detect_file_type(path)
    except FileAccessError as e:
        logger.debug("Classification failed: %s", e)
        return TypeTag.UNKNOWN
