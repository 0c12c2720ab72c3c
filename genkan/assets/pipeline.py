"""Turn image references into embeddable assets for a single build.

:class:`AssetPipeline` takes the :class:`ImageRequest` values a page needs
(avatars, link and social icons, the favicon), removes duplicates, and
processes the remaining work in two pools: a bounded I/O pool that downloads
URLs and reads files, and a CPU pool that sniffs, resizes and encodes. The
whole phase completes before :meth:`AssetPipeline.embed_all` returns, and the
result is keyed by request so completion order never affects the page.

Failures are handled per role. An icon that cannot be acquired is replaced by
a neutral placeholder; an avatar or favicon uses its configured fallback, or
is omitted. A favicon renders as a URL reference, so inline text that is not a
data URL counts as unavailable for it. Undecodable bytes from a local file are
a configuration mistake and abort the build with :class:`AssetCorruptError`.

Example
-------
>>> from pathlib import Path
>>> from genkan.assets import AssetPipeline, ImageRequest, ImageRole, InlineText
>>> pipeline = AssetPipeline(base_dir=Path("."))
>>> request = ImageRequest(InlineText("🌐"), ImageRole.ICON, 128)
>>> pipeline.embed_all([request])[request].value
'🌐'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import hashlib
import logging
import os
import typing as typ
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from genkan._constants import DEFAULT_MAX_FETCHES, PLACEHOLDER_ICON_SVG

from .fetcher import RemoteImageFetcher
from .models import (
    AssetCorruptError,
    AssetError,
    AssetUnavailableError,
    EmbeddedAsset,
    ImageRequest,
    ImageRole,
    InlineText,
    LocalPath,
    RemoteUrl,
)
from .sources import classify_source, source_label
from .transcode import embed_image

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .cache import AssetCache

logger = logging.getLogger(__name__)

PLACEHOLDER_ICON = EmbeddedAsset.from_bytes(
    PLACEHOLDER_ICON_SVG.encode("utf-8"), "image/svg+xml"
)

EmbeddedAssets = dict[ImageRequest, EmbeddedAsset | None]


@dc.dataclass(frozen=True, slots=True)
class _Acquired:
    """Bytes for one request plus the identity used as its cache key."""

    data: bytes
    identity: str


def _is_fatal(request: ImageRequest, error: AssetError) -> bool:
    return isinstance(error, AssetCorruptError) and isinstance(
        request.source, LocalPath
    )


def _inline(request: ImageRequest) -> EmbeddedAsset:
    """Pass inline text through; a favicon must already be a data URL."""
    text = typ.cast("InlineText", request.source).text
    asset = EmbeddedAsset.text(text)
    if request.role is ImageRole.FAVICON and not asset.is_data_url:
        msg = f"Inline text '{text}' cannot be used as a {request.role} image"
        raise AssetUnavailableError(msg)
    return asset


class AssetPipeline:
    """Acquire, validate, resize and encode every image a page references."""

    def __init__(
        self,
        *,
        base_dir: Path,
        fetcher: RemoteImageFetcher | None = None,
        cache: AssetCache | None = None,
        max_fetches: int = DEFAULT_MAX_FETCHES,
        max_workers: int | None = None,
        fallbacks: cabc.Mapping[ImageRole, str] | None = None,
    ) -> None:
        """Configure the pipeline.

        Parameters
        ----------
        base_dir : Path
            Directory of the configuration file; used for fallback sources.
        fetcher : RemoteImageFetcher, optional
            HTTP client. Defaults to one whose pool matches ``max_fetches``.
        cache : AssetCache, optional
            Cross-build cache; ``None`` disables caching.
        max_fetches : int, optional
            Upper bound on simultaneous acquisitions.
        max_workers : int, optional
            Size of the decode/resize pool. Defaults to the CPU count, capped
            at four.
        fallbacks : Mapping[ImageRole, str], optional
            Sources to use when an avatar or favicon cannot be embedded.
        """
        if max_fetches < 1:
            msg = "max_fetches must be at least 1"
            raise ValueError(msg)
        self.base_dir = base_dir
        self.fetcher = fetcher or RemoteImageFetcher(max_connections=max_fetches)
        self.cache = cache
        self.max_fetches = max_fetches
        self.max_workers = max_workers or min(4, os.cpu_count() or 1)
        self.fallbacks = dict(fallbacks or {})

    def embed(self, request: ImageRequest) -> EmbeddedAsset | None:
        """Process a single request; see :meth:`embed_all`."""
        return self.embed_all([request])[request]

    def embed_all(self, requests: cabc.Iterable[ImageRequest]) -> EmbeddedAssets:
        """Process ``requests`` and return an asset (or None) for each one.

        Identical requests are processed once. ``None`` means the asset could
        not be produced and the role has no fallback, so the slot is omitted.

        Raises
        ------
        AssetCorruptError
            If a local file does not contain a decodable image. Outstanding
            work is cancelled before the error propagates.
        """
        unique = list(dict.fromkeys(requests))
        results: EmbeddedAssets = {}
        pending: list[ImageRequest] = []
        failures: list[tuple[ImageRequest, AssetError]] = []
        for request in unique:
            match request.source:
                case InlineText():
                    try:
                        results[request] = _inline(request)
                    except AssetUnavailableError as exc:
                        failures.append((request, exc))
                case RemoteUrl(url=url):
                    cached = self._cache_get(url, request)
                    if cached is None:
                        pending.append(request)
                    else:
                        results[request] = cached
                case LocalPath():
                    pending.append(request)
                case _:  # pragma: no cover - exhaustive over ImageSource
                    typ.assert_never(request.source)

        failures.extend(self._process(pending, results))
        substitutes: EmbeddedAssets = {}
        for request, error in failures:
            results[request] = self._degrade(request, error, substitutes)
        return results

    def _process(
        self, pending: list[ImageRequest], results: EmbeddedAssets
    ) -> list[tuple[ImageRequest, AssetError]]:
        """Run acquisition and transcoding concurrently for ``pending``."""
        failures: list[tuple[ImageRequest, AssetError]] = []
        if not pending:
            return failures
        with (
            ThreadPoolExecutor(
                max_workers=self.max_fetches, thread_name_prefix="genkan-fetch"
            ) as io_pool,
            ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="genkan-image"
            ) as cpu_pool,
        ):
            acquisitions: dict[Future[_Acquired], ImageRequest] = {
                io_pool.submit(self._acquire, request): request for request in pending
            }
            transcodes: dict[Future[EmbeddedAsset], tuple[ImageRequest, str]] = {}
            outstanding: set[Future[typ.Any]] = set(acquisitions)
            try:
                while outstanding:
                    done, outstanding = wait(outstanding, return_when=FIRST_COMPLETED)
                    for future in done:
                        if future in acquisitions:
                            request = acquisitions[future]
                            submitted = self._on_acquired(
                                request, future, cpu_pool, results, failures
                            )
                            if submitted is not None:
                                transcodes[submitted[0]] = (request, submitted[1])
                                outstanding.add(submitted[0])
                        else:
                            request, identity = transcodes[future]
                            self._on_transcoded(
                                request, identity, future, results, failures
                            )
            except BaseException:
                io_pool.shutdown(wait=False, cancel_futures=True)
                cpu_pool.shutdown(wait=False, cancel_futures=True)
                raise
        return failures

    def _on_acquired(
        self,
        request: ImageRequest,
        future: Future[_Acquired],
        cpu_pool: ThreadPoolExecutor,
        results: EmbeddedAssets,
        failures: list[tuple[ImageRequest, AssetError]],
    ) -> tuple[Future[EmbeddedAsset], str] | None:
        try:
            acquired = future.result()
        except AssetUnavailableError as exc:
            failures.append((request, exc))
            return None
        if isinstance(request.source, LocalPath):
            cached = self._cache_get(acquired.identity, request)
            if cached is not None:
                results[request] = cached
                return None
        submitted = cpu_pool.submit(
            embed_image,
            acquired.data,
            request.size,
            origin=source_label(request.source),
        )
        return submitted, acquired.identity

    def _on_transcoded(
        self,
        request: ImageRequest,
        identity: str,
        future: Future[EmbeddedAsset],
        results: EmbeddedAssets,
        failures: list[tuple[ImageRequest, AssetError]],
    ) -> None:
        try:
            asset = future.result()
        except AssetCorruptError as exc:
            if _is_fatal(request, exc):
                raise
            failures.append((request, exc))
            return
        results[request] = asset
        self._cache_put(identity, request, asset)
        logger.debug(
            "Embedded %s %s", request.role, source_label(request.source)
        )

    def _acquire(self, request: ImageRequest) -> _Acquired:
        """Download or read the bytes behind ``request``."""
        match request.source:
            case RemoteUrl(url=url):
                return _Acquired(data=self.fetcher.fetch(url), identity=url)
            case LocalPath(path=path, declared=declared):
                try:
                    data = path.read_bytes()
                except OSError as exc:
                    msg = f"Failed to read image file '{declared}': {exc}"
                    raise AssetUnavailableError(msg) from exc
                digest = hashlib.sha256(data).hexdigest()
                return _Acquired(data=data, identity=f"{path.resolve()}#{digest}")
            case InlineText():  # pragma: no cover - handled before acquisition
                msg = "Inline text is never acquired."
                raise AssertionError(msg)
            case _:  # pragma: no cover - exhaustive over ImageSource
                typ.assert_never(request.source)

    def _embed_now(self, request: ImageRequest) -> EmbeddedAsset:
        """Process ``request`` on the calling thread without fallbacks."""
        if isinstance(request.source, InlineText):
            return _inline(request)
        acquired = self._acquire(request)
        return embed_image(
            acquired.data, request.size, origin=source_label(request.source)
        )

    def _degrade(
        self,
        request: ImageRequest,
        error: AssetError,
        substitutes: EmbeddedAssets,
    ) -> EmbeddedAsset | None:
        """Return the role's substitute for a request that could not be embedded.

        ``substitutes`` memoises fallback work for one :meth:`embed_all` call,
        so several failures sharing a fallback acquire it once.
        """
        label = source_label(request.source)
        match request.role:
            case ImageRole.ICON:
                logger.warning("%s; using placeholder icon for '%s'", error, label)
                return PLACEHOLDER_ICON
            case ImageRole.AVATAR | ImageRole.FAVICON:
                fallback = self.fallbacks.get(request.role)
                if fallback is None:
                    logger.warning("%s; omitting %s", error, request.role)
                    return None
                logger.warning(
                    "%s; using configured %s fallback '%s'",
                    error,
                    request.role,
                    fallback,
                )
                substitute = dc.replace(
                    request, source=classify_source(fallback, self.base_dir)
                )
                if substitute not in substitutes:
                    substitutes[substitute] = self._embed_substitute(substitute)
                return substitutes[substitute]
            case _:  # pragma: no cover - exhaustive over ImageRole
                typ.assert_never(request.role)

    def _embed_substitute(self, substitute: ImageRequest) -> EmbeddedAsset | None:
        try:
            return self._embed_now(substitute)
        except AssetError as exc:
            if _is_fatal(substitute, exc):
                raise
            logger.warning("%s; omitting %s", exc, substitute.role)
            return None

    def _cache_get(self, identity: str, request: ImageRequest) -> EmbeddedAsset | None:
        if self.cache is None:
            return None
        cached = self.cache.get(self.cache.key_for(identity, request.role, request.size))
        if cached is not None:
            logger.debug("Asset cache hit for %s", source_label(request.source))
        return cached

    def _cache_put(
        self, identity: str, request: ImageRequest, asset: EmbeddedAsset
    ) -> None:
        if self.cache is None:
            return
        self.cache.put(self.cache.key_for(identity, request.role, request.size), asset)

    def close(self) -> None:
        """Release the HTTP session."""
        self.fetcher.close()


__all__ = ["PLACEHOLDER_ICON", "AssetPipeline", "EmbeddedAssets"]
