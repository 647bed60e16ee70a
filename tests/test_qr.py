"""Tests for QR code generation."""

import base64
import io
from unittest.mock import patch

import pytest
from PIL import Image

from litepages.errors import RenderError
from litepages.modules.qr import generate_qr_png, qr_data_uri
from litepages.modules.qr.generator import clamp_size

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_png_of_requested_size():
    png = generate_qr_png("https://lite.example.com/seaside-villa", size=300)
    assert png.startswith(PNG_MAGIC)
    assert Image.open(io.BytesIO(png)).size == (300, 300)


def test_small_size_scaled_up_to_exact_width():
    png = generate_qr_png("https://lite.example.com/390580", size=100, margin=1)
    assert Image.open(io.BytesIO(png)).size == (100, 100)


def test_size_clamped():
    assert clamp_size(10) == 64
    assert clamp_size(5000) == 2000
    assert clamp_size(None) == 300
    assert clamp_size(0, default=200) == 200
    png = generate_qr_png("https://lite.example.com/x", size=5)
    assert Image.open(io.BytesIO(png)).size == (64, 64)


def test_size_from_query_text():
    assert clamp_size("128") == 128
    assert clamp_size(" 400 ") == 400
    assert clamp_size("abc") == 300
    assert clamp_size("", default=200) == 200
    assert clamp_size("-5") == 300
    assert clamp_size("99999") == 2000


def test_data_uri():
    uri = qr_data_uri("https://lite.example.com/x", size=120)
    assert uri.startswith("data:image/png;base64,")
    assert base64.b64decode(uri.split(",", 1)[1]).startswith(PNG_MAGIC)


def test_failure_raises_render_error():
    with patch("litepages.modules.qr.generator.qrcode.QRCode", side_effect=ValueError("bad")):
        with pytest.raises(RenderError, match="QR generation failed"):
            generate_qr_png("https://lite.example.com/x")
