"""Value types shared by the asset pipeline."""

from __future__ import annotations

import base64
import dataclasses as dc
import enum
from pathlib import Path


class AssetError(RuntimeError):
    """Base class for failures while turning an image source into an asset."""


class AssetUnavailableError(AssetError):
    """Raised when a remote or local image cannot be acquired."""


class AssetCorruptError(AssetError):
    """Raised when acquired bytes are not a decodable image."""


class ImageRole(enum.StrEnum):
    """Where an image is used on the page; each role has its own target size."""

    AVATAR = "avatar"
    ICON = "icon"
    FAVICON = "favicon"


@dc.dataclass(frozen=True, slots=True)
class RemoteUrl:
    """An ``http(s)://`` image reference."""

    url: str


@dc.dataclass(frozen=True, slots=True)
class LocalPath:
    """An image file on disk, already resolved against the config directory.

    ``declared`` keeps the spelling from the config for messages only, so
    ``icon.png`` and ``./icon.png`` compare equal.
    """

    path: Path
    declared: str = dc.field(compare=False)


@dc.dataclass(frozen=True, slots=True)
class InlineText:
    """Emoji, literal text, or an existing data URL; embedded unchanged."""

    text: str


ImageSource = RemoteUrl | LocalPath | InlineText


@dc.dataclass(frozen=True, slots=True)
class ImageRequest:
    """One unit of asset work; equal requests in a build are processed once."""

    source: ImageSource
    role: ImageRole
    size: int


@dc.dataclass(frozen=True, slots=True)
class EmbeddedAsset:
    """An inline data URL or a passthrough string ready for the template.

    Attributes
    ----------
    value : str
        The data URL, or the original text for passthrough sources.
    mime_type : str | None
        MIME type of the encoded payload; ``None`` for text passthrough.
    """

    value: str
    mime_type: str | None = None

    @classmethod
    def from_bytes(cls, payload: bytes, mime_type: str) -> EmbeddedAsset:
        """Encode ``payload`` as a base64 data URL."""
        encoded = base64.b64encode(payload).decode("ascii")
        return cls(value=f"data:{mime_type};base64,{encoded}", mime_type=mime_type)

    @classmethod
    def text(cls, value: str) -> EmbeddedAsset:
        """Wrap a literal string that is embedded as-is."""
        return cls(value=value)

    @property
    def is_data_url(self) -> bool:
        """Return True when the asset renders as an ``<img>`` source."""
        return self.value.startswith("data:")

    def decode(self) -> bytes:
        """Return the raw bytes of a base64 data URL."""
        if not self.is_data_url:
            msg = "Only data URL assets carry an encoded payload."
            raise ValueError(msg)
        _, _, encoded = self.value.partition(",")
        return base64.b64decode(encoded)

    def __str__(self) -> str:
        return self.value


__all__ = [
    "AssetCorruptError",
    "AssetError",
    "AssetUnavailableError",
    "EmbeddedAsset",
    "ImageRequest",
    "ImageRole",
    "ImageSource",
    "InlineText",
    "LocalPath",
    "RemoteUrl",
]
