"""Detect image formats and shrink oversized rasters before embedding.

Formats are sniffed from the leading bytes rather than trusted from a file
extension. SVG and ICO payloads are embedded untouched. Other rasters are only
resized when a side exceeds the role's target size; the longer side is scaled
down to the target with Lanczos resampling and the result is re-encoded as
PNG. Images that already fit are embedded byte-for-byte.
"""

from __future__ import annotations

import dataclasses as dc
import io
import logging

from PIL import Image

from .models import AssetCorruptError, EmbeddedAsset

logger = logging.getLogger(__name__)

NEVER_RESIZED = frozenset(("svg", "ico"))
_PNG_SAFE_MODES = frozenset(("RGB", "RGBA", "L", "LA"))
_SVG_SNIFF_BYTES = 2048


@dc.dataclass(frozen=True, slots=True)
class DetectedFormat:
    """Image format identified from content."""

    name: str
    mime_type: str

    @property
    def resizable(self) -> bool:
        return self.name not in NEVER_RESIZED


_SIGNATURES: tuple[tuple[bytes, DetectedFormat], ...] = (
    (b"\x89PNG\r\n\x1a\n", DetectedFormat("png", "image/png")),
    (b"\xff\xd8\xff", DetectedFormat("jpeg", "image/jpeg")),
    (b"GIF87a", DetectedFormat("gif", "image/gif")),
    (b"GIF89a", DetectedFormat("gif", "image/gif")),
    (b"\x00\x00\x01\x00", DetectedFormat("ico", "image/x-icon")),
    (b"BM", DetectedFormat("bmp", "image/bmp")),
    (b"II*\x00", DetectedFormat("tiff", "image/tiff")),
    (b"MM\x00*", DetectedFormat("tiff", "image/tiff")),
)
SVG_FORMAT = DetectedFormat("svg", "image/svg+xml")
WEBP_FORMAT = DetectedFormat("webp", "image/webp")


def sniff_format(data: bytes) -> DetectedFormat | None:
    """Return the format of ``data`` or None when it is not a known image.

    Examples
    --------
    >>> sniff_format(b"\\x89PNG\\r\\n\\x1a\\n....").name
    'png'
    >>> sniff_format(b"<svg xmlns='http://www.w3.org/2000/svg'/>").name
    'svg'
    >>> sniff_format(b"hello") is None
    True
    """
    for signature, detected in _SIGNATURES:
        if data.startswith(signature):
            return detected
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return WEBP_FORMAT
    if _is_svg(data):
        return SVG_FORMAT
    return _identify_with_pillow(data)


def _is_svg(data: bytes) -> bool:
    head = data[:_SVG_SNIFF_BYTES].removeprefix(b"\xef\xbb\xbf").lstrip().lower()
    if head.startswith(b"<svg"):
        return True
    if head.startswith((b"<?xml", b"<!--", b"<!doctype svg")):
        return b"<svg" in head
    return False


def _identify_with_pillow(data: bytes) -> DetectedFormat | None:
    try:
        with Image.open(io.BytesIO(data)) as image:
            name = image.format
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError):
        return None
    if not name:
        return None
    mime_type = Image.MIME.get(name) or f"image/{name.lower()}"
    return DetectedFormat(name.lower(), mime_type)


def scaled_dimensions(width: int, height: int, target: int) -> tuple[int, int]:
    """Scale the longer side of ``width``x``height`` to ``target``, keeping aspect."""
    if width >= height:
        return target, max(1, round(height * target / width))
    return max(1, round(width * target / height)), target


def fit_within(
    data: bytes, target: int, detected: DetectedFormat, *, origin: str
) -> tuple[bytes, str]:
    """Return ``(payload, mime_type)`` for a raster no larger than ``target``.

    Rasters that already fit are returned unchanged; the pipeline never
    upscales.

    Raises
    ------
    AssetCorruptError
        If Pillow cannot decode ``data``.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width, height = image.size
            if width <= target and height <= target:
                return data, detected.mime_type
            new_size = scaled_dimensions(width, height, target)
            source = image if image.mode in _PNG_SAFE_MODES else image.convert("RGBA")
            resized = source.resize(new_size, Image.Resampling.LANCZOS)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        msg = f"Image data from '{origin}' could not be decoded: {exc}"
        raise AssetCorruptError(msg) from exc

    buffer = io.BytesIO()
    resized.save(buffer, format="PNG", optimize=True)
    payload = buffer.getvalue()
    logger.info(
        "Resized %s from %dx%d to %dx%d (%d -> %d bytes)",
        origin,
        width,
        height,
        *new_size,
        len(data),
        len(payload),
    )
    return payload, "image/png"


def embed_image(data: bytes, target: int, *, origin: str) -> EmbeddedAsset:
    """Turn acquired image bytes into a data URL asset.

    Parameters
    ----------
    data : bytes
        Raw bytes from the network or disk.
    target : int
        Square target size in pixels for the image's role.
    origin : str
        URL or path used in log and error messages.

    Raises
    ------
    AssetCorruptError
        If the content is not a recognizable image or cannot be decoded.
    """
    detected = sniff_format(data)
    if detected is None:
        msg = f"Content from '{origin}' is not a recognized image format."
        raise AssetCorruptError(msg)
    if not detected.resizable:
        return EmbeddedAsset.from_bytes(data, detected.mime_type)
    payload, mime_type = fit_within(data, target, detected, origin=origin)
    return EmbeddedAsset.from_bytes(payload, mime_type)


__all__ = [
    "NEVER_RESIZED",
    "DetectedFormat",
    "embed_image",
    "fit_within",
    "scaled_dimensions",
    "sniff_format",
]
