"""Fetch, validate, resize and inline the images a link page references.

The entry point is :class:`AssetPipeline`; :func:`classify_source` turns a
configured string into the :data:`ImageSource` union it consumes.
"""

from .cache import AssetCache
from .fetcher import RemoteImageFetcher
from .models import (
    AssetCorruptError,
    AssetError,
    AssetUnavailableError,
    EmbeddedAsset,
    ImageRequest,
    ImageRole,
    ImageSource,
    InlineText,
    LocalPath,
    RemoteUrl,
)
from .pipeline import PLACEHOLDER_ICON, AssetPipeline, EmbeddedAssets
from .sources import classify_source, source_label
from .transcode import embed_image, sniff_format

__all__ = [
    "PLACEHOLDER_ICON",
    "AssetCache",
    "AssetCorruptError",
    "AssetError",
    "AssetPipeline",
    "AssetUnavailableError",
    "EmbeddedAsset",
    "EmbeddedAssets",
    "ImageRequest",
    "ImageRole",
    "ImageSource",
    "InlineText",
    "LocalPath",
    "RemoteImageFetcher",
    "RemoteUrl",
    "classify_source",
    "embed_image",
    "sniff_format",
    "source_label",
]
