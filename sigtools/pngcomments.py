"""Convert binary PPM images to PNG keeping their comments, and read them back.

Comments are stored in a private ancillary chunk named ``pnmc``.
"""

from __future__ import annotations

import re
import struct
import sys
import zlib
from typing import BinaryIO

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
COMMENT_CHUNK = b"pnmc"

_WHITESPACE = b" \t\n\v\f\r"
_INTEGER = re.compile(rb"[+-]?[0-9]+")


class PngError(Exception):
    """Raised when an image cannot be converted or read."""


class _Cursor:
    """Position in an in-memory PNM file."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def skip_whitespace(self) -> None:
        while self.pos < len(self.data) and self.data[self.pos] in _WHITESPACE:
            self.pos += 1

    def token(self) -> bytes:
        self.skip_whitespace()
        start = self.pos
        while self.pos < len(self.data) and self.data[self.pos] not in _WHITESPACE:
            self.pos += 1
        return self.data[start:self.pos]

    def integer(self) -> int:
        self.skip_whitespace()
        match = _INTEGER.match(self.data, self.pos)
        if match is None:
            raise PngError("error reading pnm file")
        self.pos = match.end()
        return int(match.group())

    def comments(self) -> bytes:
        collected = bytearray()
        while True:
            if self.pos >= len(self.data):
                raise PngError("error reading pnm file")
            if self.data[self.pos] != ord("#"):
                return bytes(collected)
            end = self.data.find(b"\n", self.pos + 1)
            if end == -1:
                raise PngError("error reading pnm file")
            collected += self.data[self.pos + 1:end] + b"\n"
            self.pos = end + 1


def _chunk(kind: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(kind + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)


def pnm_to_png(src: BinaryIO, dst: BinaryIO) -> None:
    """Read a binary 8-bit PPM from ``src`` and write an RGB PNG to ``dst``."""
    cursor = _Cursor(src.read())
    if cursor.token() != b"P6":
        raise PngError("bad pnm file (not binary PNM)")
    cursor.skip_whitespace()
    comments = cursor.comments()

    width = cursor.integer()
    height = cursor.integer()
    colors = cursor.integer()
    cursor.pos += 1  # exactly one whitespace byte before the pixels
    if colors != 255:
        raise PngError("bad pnm file (not 256-color)")
    if width <= 0 or height <= 0:
        raise PngError("can't write png")

    row_size = width * 3
    pixels = cursor.data[cursor.pos:cursor.pos + row_size * height]
    if len(pixels) < row_size * height:
        raise PngError("error reading pnm file")

    raw = b"".join(
        b"\x00" + pixels[row * row_size:(row + 1) * row_size] for row in range(height)
    )
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    dst.write(PNG_SIGNATURE)
    dst.write(_chunk(b"IHDR", header))
    dst.write(_chunk(COMMENT_CHUNK, comments))
    dst.write(_chunk(b"IDAT", zlib.compress(raw)))
    dst.write(_chunk(b"IEND", b""))


def read_png_comments(src: BinaryIO) -> bytes:
    """Return the contents of all ``pnmc`` chunks before the image data."""
    if src.read(8) != PNG_SIGNATURE:
        raise PngError("not a PNG file")
    collected = bytearray()
    first = True
    while True:
        header = src.read(8)
        if len(header) < 8:
            raise PngError("can't read PNG file")
        length, kind = struct.unpack(">I4s", header)
        body = src.read(length)
        crc = src.read(4)
        if len(body) < length or len(crc) < 4:
            raise PngError("can't read PNG file")
        if first and kind != b"IHDR":
            raise PngError("can't read PNG file")
        first = False
        if zlib.crc32(kind + body) & 0xFFFFFFFF != struct.unpack(">I", crc)[0]:
            if not kind[0] & 0x20:
                raise PngError("can't read PNG file")
            continue
        if kind in (b"IDAT", b"IEND"):
            return bytes(collected)
        if kind == COMMENT_CHUNK:
            collected += body


def main_pnmtopng(argv=None) -> int:
    """Convert PPM on standard input to PNG on standard output; takes no arguments."""
    try:
        pnm_to_png(sys.stdin.buffer, sys.stdout.buffer)
    except PngError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    sys.stdout.buffer.flush()
    return 0


def main_pnginfo(argv=None) -> int:
    """Print the comments stored in the PNG file named by the only argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if len(args) != 1:
            raise PngError("usage: sig_pnginfo <file>")
        path = args[0]
        try:
            stream = open(path, "rb")
        except OSError:
            raise PngError(f"can't open file:{path}") from None
        with stream:
            comments = read_png_comments(stream)
    except PngError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    sys.stdout.buffer.write(comments)
    sys.stdout.buffer.flush()
    return 0