import io
import struct
import sys
import zlib

import pytest

from sigtools.pngcomments import (
    PNG_SIGNATURE,
    PngError,
    main_pnginfo,
    main_pnmtopng,
    pnm_to_png,
    read_png_comments,
)

PIXELS = bytes(range(18))  # 3 x 2 RGB


def _pnm(comments=b"", colors=b"255", pixels=PIXELS):
    return b"P6\n" + comments + b"3 2\n" + colors + b"\n" + pixels


def _convert(data):
    out = io.BytesIO()
    pnm_to_png(io.BytesIO(data), out)
    return out.getvalue()


def test_png_header_and_size():
    png = _convert(_pnm())
    assert png[:8] == PNG_SIGNATURE
    assert png[12:16] == b"IHDR"
    assert png[16:24] == struct.pack(">II", 3, 2)
    assert png.endswith(b"IEND\xaeB`\x82")


def test_pixels_are_stored_unchanged():
    png = _convert(_pnm())
    idx = png.index(b"IDAT")
    (length,) = struct.unpack(">I", png[idx - 4:idx])
    raw = zlib.decompress(png[idx + 4:idx + 4 + length])
    assert raw == b"\x00" + PIXELS[:9] + b"\x00" + PIXELS[9:]


def test_comments_round_trip():
    png = _convert(_pnm(b"# fmin: 10\n# fmax: 20\n"))
    assert read_png_comments(io.BytesIO(png)) == b" fmin: 10\n fmax: 20\n"


def test_no_comments_gives_empty():
    png = _convert(_pnm())
    assert read_png_comments(io.BytesIO(png)) == b""


def test_not_binary_pnm():
    with pytest.raises(PngError, match="not binary PNM"):
        _convert(b"P3\n3 2\n255\n")


def test_not_256_colors():
    with pytest.raises(PngError, match="not 256-color"):
        _convert(_pnm(colors=b"65535"))


def test_short_pixel_data():
    with pytest.raises(PngError):
        _convert(_pnm(pixels=PIXELS[:10]))


def test_read_rejects_non_png():
    with pytest.raises(PngError, match="not a PNG file"):
        read_png_comments(io.BytesIO(b"not a png file at all"))


def test_read_rejects_truncated_png():
    png = _convert(_pnm(b"# x\n"))
    with pytest.raises(PngError):
        read_png_comments(io.BytesIO(png[:20]))


def test_corrupted_comment_chunk_is_skipped():
    png = bytearray(_convert(_pnm(b"# abc\n")))
    idx = png.index(b"pnmc")
    png[idx + 4] ^= 0xFF
    assert read_png_comments(io.BytesIO(bytes(png))) == b""


def test_main_pnginfo_prints_comments(tmp_path, capsysbinary):
    path = tmp_path / "image.png"
    path.write_bytes(_convert(_pnm(b"# window: 256\n")))
    assert main_pnginfo([str(path)]) == 0
    assert capsysbinary.readouterr().out == b" window: 256\n"


def test_main_pnginfo_usage_error(capsysbinary):
    assert main_pnginfo([]) == 1
    assert b"usage" in capsysbinary.readouterr().err


def test_main_pnginfo_missing_file(tmp_path, capsysbinary):
    assert main_pnginfo([str(tmp_path / "missing.png")]) == 1
    assert b"can't open file" in capsysbinary.readouterr().err


def test_main_pnmtopng_converts_stdin(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(_pnm(b"# a\n"))))
    assert main_pnmtopng() == 0
    png = capsysbinary.readouterr().out
    assert read_png_comments(io.BytesIO(png)) == b" a\n"


def test_main_pnmtopng_reports_error(monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"garbage")))
    assert main_pnmtopng() == 1
    assert capsysbinary.readouterr().err.startswith(b"Error: ")