"""On-disk cache of embedded assets shared across builds.

Entries are keyed by a SHA-256 of the source identity, role and target size.
Each entry is a small JSON document holding its own key and a digest of the
stored value; an entry whose key or digest does not match, or that cannot be
parsed, is treated as a miss. Writes go to a temporary file that is renamed
into place, so readers never observe a partial entry. Concurrent writers are
last-writer-wins, which is safe because entries are regenerable.
"""

from __future__ import annotations

import contextlib
import hashlib
import json
import logging
import os
import tempfile
import typing as typ

from .models import EmbeddedAsset

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import ImageRole

logger = logging.getLogger(__name__)


def _digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class AssetCache:
    """Content-addressed store of :class:`EmbeddedAsset` values."""

    def __init__(self, root: Path) -> None:
        """Point the cache at ``root``; the directory is created on first write."""
        self.root = root

    @staticmethod
    def key_for(identity: str, role: ImageRole, size: int) -> str:
        """Return the cache key for a source identity, role and target size."""
        return _digest(f"{identity}\n{role}\n{size}")

    def _entry_path(self, key: str) -> Path:
        return self.root / key[:2] / f"{key}.json"

    def get(self, key: str) -> EmbeddedAsset | None:
        """Return the cached asset for ``key`` or None on a miss."""
        path = self._entry_path(key)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            value = payload["value"]
            mime_type = payload.get("mime_type")
            valid = (
                payload.get("key") == key
                and isinstance(value, str)
                and payload.get("digest") == _digest(value)
            )
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.debug("Ignoring unreadable cache entry %s: %s", path, exc)
            return None
        if not valid:
            logger.debug("Ignoring mismatched cache entry %s", path)
            return None
        return EmbeddedAsset(value=value, mime_type=mime_type)

    def put(self, key: str, asset: EmbeddedAsset) -> None:
        """Store ``asset`` under ``key``; failures are logged and ignored."""
        path = self._entry_path(key)
        payload = {
            "key": key,
            "digest": _digest(asset.value),
            "mime_type": asset.mime_type,
            "value": asset.value,
        }
        temp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{key[:8]}-",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                json.dump(payload, handle)
            os.replace(temp_name, path)
        except OSError as exc:
            if temp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)
            logger.warning("Could not write asset cache entry %s: %s", path, exc)


__all__ = ["AssetCache"]
