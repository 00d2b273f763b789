"""Utility modules for spinerestore."""

from spinerestore.utils.config import resolve_setting, resolve_workers, set_setting
from spinerestore.utils.text import DecodedText, decode_text, is_valid_text

__all__ = [
    "DecodedText",
    "decode_text",
    "is_valid_text",
    "resolve_setting",
    "resolve_workers",
    "set_setting",
]
