"""Classify configured image strings into remote, local, or inline sources."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import ImageSource, InlineText, LocalPath, RemoteUrl

IMAGE_EXTENSIONS = frozenset(
    (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".tif", ".tiff", ".ico", ".svg")
)
_REMOTE_PREFIXES = ("http://", "https://")


def classify_source(value: str, base_dir: Path) -> ImageSource:
    """Return the ImageSource variant described by a configured string.

    Parameters
    ----------
    value : str
        The raw string from the configuration (icon, avatar, favicon).
    base_dir : Path
        Directory of the configuration file; relative paths resolve here.

    Returns
    -------
    ImageSource
        ``RemoteUrl`` for ``http(s)://`` and protocol-relative ``//`` URLs,
        ``LocalPath`` for anything that exists on disk or reads like a path,
        and ``InlineText`` for data URLs, emoji and other literals.

    Examples
    --------
    >>> from pathlib import Path
    >>> classify_source("https://example.com/a.png", Path("."))
    RemoteUrl(url='https://example.com/a.png')
    >>> classify_source("🌐", Path("."))
    InlineText(text='🌐')
    """
    text = value.strip()
    lowered = text.lower()
    if lowered.startswith(_REMOTE_PREFIXES):
        return RemoteUrl(url=text)
    if text.startswith("//"):
        return RemoteUrl(url=f"https:{text}")
    if lowered.startswith("data:") or not text:
        return InlineText(text=value)
    candidate = Path(text).expanduser()
    resolved = candidate if candidate.is_absolute() else base_dir / candidate
    if _looks_like_path(text) or _exists(resolved):
        return LocalPath(path=resolved, declared=text)
    return InlineText(text=value)


def source_label(source: ImageSource) -> str:
    """Return the string a user would recognise from their config."""
    match source:
        case RemoteUrl(url=url):
            return url
        case LocalPath(declared=declared):
            return declared
        case InlineText(text=text):
            return text
        case _:  # pragma: no cover - exhaustive over ImageSource
            typ.assert_never(source)


def _looks_like_path(text: str) -> bool:
    if any(char.isspace() for char in text):
        return False
    if "/" in text or "\\" in text or text.startswith((".", "~")):
        return True
    return Path(text).suffix.lower() in IMAGE_EXTENSIONS


def _exists(path: Path) -> bool:
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False


__all__ = ["IMAGE_EXTENSIONS", "classify_source", "source_label"]
