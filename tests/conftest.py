"""Shared fixtures for spinerestore tests."""

import struct
import zlib
from pathlib import Path
from typing import Callable

import pytest

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def png_bytes(width: int, height: int) -> bytes:
    """Build the header of a PNG: signature plus a complete IHDR chunk."""
    payload = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    crc = struct.pack(">I", zlib.crc32(b"IHDR" + payload) & 0xFFFFFFFF)
    return PNG_SIGNATURE + struct.pack(">I", len(payload)) + b"IHDR" + payload + crc


@pytest.fixture
def make_png() -> Callable[[Path, int, int], Path]:
    """Factory writing a minimal PNG of the given size to a path."""

    def _make(path: Path, width: int, height: int) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(png_bytes(width, height))
        return path

    return _make


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """An unpacked asset directory with extension-less files.

    Layout::

        work/
            foo          PNG 10x20
            bar          {"a":1}
            baz.txt      already has an extension
            nested/
                hero     readable text (atlas)
                hero_skel  undecodable bytes (skeleton)
    """
    work = tmp_path / "work"
    (work / "nested").mkdir(parents=True)
    (work / "foo").write_bytes(png_bytes(10, 20))
    (work / "bar").write_text('{"a":1}', encoding="utf-8")
    (work / "baz.txt").write_text("plain", encoding="utf-8")
    (work / "nested" / "hero").write_text(
        "hero.png\nsize: 1024,1024\nformat: RGBA8888\n", encoding="utf-8"
    )
    (work / "nested" / "hero_skel").write_bytes(b"\x00\xff\xfe spine 3.8 \x80\x81")
    return work
