"""PNG header parsing.

Only the fixed 24-byte prefix of a PNG file is read: the 8-byte signature, the
8-byte header of the first chunk (length + type) and the first 8 bytes of the
IHDR payload, which hold the big-endian width and height. CRCs and later
chunks are ignored.
"""

import struct
from pathlib import Path

from spinerestore.core.classifier import PNG_SIGNATURE
from spinerestore.errors import FileAccessError, FormatError
from spinerestore.models.core import Dimensions

PNG_HEADER_SIZE = 24
IHDR = b"IHDR"


def parse_dimensions(header: bytes, path: Path | None = None) -> Dimensions:
    """Extract dimensions from the first 24 bytes of a PNG file.

    Args:
        header: Leading bytes of the file (at least 24).
        path: Used in error messages only.

    Returns:
        The image Dimensions.

    Raises:
        FormatError: If the data is short, the signature is wrong, or the first
            chunk is not IHDR.
    """
    if len(header) < PNG_HEADER_SIZE:
        raise FormatError(
            f"PNG header truncated ({len(header)} of {PNG_HEADER_SIZE} bytes)", path
        )
    if header[:8] != PNG_SIGNATURE:
        raise FormatError("Not a PNG file (bad signature)", path)
    if header[12:16] != IHDR:
        raise FormatError("IHDR chunk not found", path)
    width, height = struct.unpack(">II", header[16:24])
    return Dimensions(width=width, height=height)


def read_dimensions(path: Path) -> Dimensions:
    """Read the pixel dimensions of the PNG at *path*.

    Raises:
        FileAccessError: If the file cannot be opened or read.
        FormatError: If the PNG header is missing or malformed.
    """
    try:
        with path.open("rb") as f:
            header = f.read(PNG_HEADER_SIZE)
    except OSError as e:
        raise FileAccessError(f"Cannot read PNG file ({e.strerror})", path) from e
    return parse_dimensions(header, path)
