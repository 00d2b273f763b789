"""Best-effort text decoding.

Asset files are nominally UTF-8 but may contain stray invalid byte sequences.
Decoding is an explicit two-step attempt: strict UTF-8 first, then a lossy
decode that substitutes U+FFFD for every invalid sequence. Callers that care
can tell clean text from recovered text via ``DecodedText.lossy``.
"""

from dataclasses import dataclass
from pathlib import Path

from spinerestore.errors import DecodeError

ENCODING = "utf-8"
REPLACEMENT_CHAR = "\ufffd"


@dataclass(frozen=True)
class DecodedText:
    """Decoded file content."""

    text: str
    lossy: bool = False


def decode_strict(data: bytes, path: Path | None = None) -> str:
    """Decode *data* as UTF-8, raising DecodeError on invalid sequences."""
    try:
        return data.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Invalid {ENCODING} at byte {e.start}", path) from e


def decode_text(data: bytes) -> DecodedText:
    """Decode *data* strictly, falling back to replacement-character decoding."""
    try:
        return DecodedText(data.decode(ENCODING))
    except UnicodeDecodeError:
        return DecodedText(data.decode(ENCODING, errors="replace"), lossy=True)


def is_valid_text(data: bytes) -> bool:
    """Return True if *data* is valid UTF-8 (the empty string included)."""
    try:
        data.decode(ENCODING)
    except UnicodeDecodeError:
        return False
    return True
