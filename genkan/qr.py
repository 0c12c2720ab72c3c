"""Render the page URL as an inline QR code image.

The code is drawn from the module matrix produced by :mod:`qrcode` onto a
Pillow canvas, scaled with nearest-neighbour sampling so module edges stay
sharp, and returned as a PNG data URL that templates can place directly in
an ``<img>`` tag.

Example
-------
>>> asset = page_qr_code("https://example.com")
>>> asset.mime_type
'image/png'
"""

from __future__ import annotations

import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from ._constants import QR_CODE_SIZE
from .assets import EmbeddedAsset
from .config import ConfigError

_QUIET_ZONE = 2


def page_qr_code(url: str, *, size: int = QR_CODE_SIZE) -> EmbeddedAsset:
    """Return a ``size`` x ``size`` PNG QR code encoding ``url``.

    Raises
    ------
    ConfigError
        If ``url`` is too long to fit in a QR code.
    """
    code = qrcode.QRCode(border=_QUIET_ZONE, error_correction=ERROR_CORRECT_M)
    code.add_data(url)
    try:
        code.make(fit=True)
    except DataOverflowError as exc:
        msg = f"meta.page_url is too long to encode as a QR code: {exc}"
        raise ConfigError(msg) from exc

    matrix = code.get_matrix()
    modules = len(matrix)
    canvas = Image.new("L", (modules, modules), 255)
    canvas.putdata([0 if dark else 255 for row in matrix for dark in row])
    scaled = canvas.resize((size, size), Image.Resampling.NEAREST)

    buffer = io.BytesIO()
    scaled.save(buffer, format="PNG", optimize=True)
    return EmbeddedAsset.from_bytes(buffer.getvalue(), "image/png")


__all__ = ["page_qr_code"]
