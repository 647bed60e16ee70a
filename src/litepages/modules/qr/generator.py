"""QR code rasterization for lite page URLs."""

from __future__ import annotations

import base64
import io
import logging

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

from litepages.errors import RenderError

logger = logging.getLogger(__name__)

MIN_SIZE = 64
MAX_SIZE = 2000


def clamp_size(size: int | str | None, default: int = 300) -> int:
    """Pixel size within bounds; missing, unparseable or non-positive input gives ``default``."""
    if isinstance(size, str):
        try:
            size = int(size.strip())
        except ValueError:
            return default
    if not size or size <= 0:
        return default
    return max(MIN_SIZE, min(size, MAX_SIZE))


def generate_qr_png(url: str, size: int = 300, margin: int = 2) -> bytes:
    """Encode ``url`` as a square PNG ``size`` pixels wide with ``margin`` quiet-zone modules."""
    size = clamp_size(size)
    try:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=1, border=margin)
        qr.add_data(url)
        qr.make(fit=True)
        modules = qr.modules_count + 2 * margin
        qr.box_size = max(1, size // modules)
        image = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")
        if image.size != (size, size):
            image = image.resize((size, size), Image.NEAREST)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
    except Exception as exc:
        logger.exception("QR generation failed for %s", url)
        raise RenderError("QR generation failed") from exc


def qr_data_uri(url: str, size: int = 300, margin: int = 2) -> str:
    """Base64 PNG data URI suitable for an ``<img src>``."""
    encoded = base64.b64encode(generate_qr_png(url, size, margin)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
