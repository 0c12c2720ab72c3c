"""HTTP acquisition of remote images.

Example
-------
>>> from genkan.assets.fetcher import RemoteImageFetcher
>>> fetcher = RemoteImageFetcher(timeout=5)  # doctest: +SKIP
>>> data = fetcher.fetch("https://cdn.simpleicons.org/github")  # doctest: +SKIP
"""

from __future__ import annotations

from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter

from genkan._constants import DEFAULT_MAX_FETCHES, FETCH_TIMEOUT_SECONDS, USER_AGENT

from .models import AssetUnavailableError


class RemoteImageFetcher:
    """Thin wrapper around a ``requests`` session for downloading images.

    Each URL gets exactly one attempt; failures surface as
    :class:`AssetUnavailableError` so the pipeline can substitute a fallback.
    The session is shared by the pipeline's fetch threads, and its connection
    pool is sized to match the number of concurrent fetches.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        max_connections: int = DEFAULT_MAX_FETCHES,
    ) -> None:
        """Initialise the fetcher with an optional preconfigured session.

        Parameters
        ----------
        session : requests.Session, optional
            Session to reuse. When omitted a new session is created with a
            connection pool of ``max_connections`` and retries disabled.
        timeout : float, optional
            Per-request timeout in seconds.
        max_connections : int, optional
            Pool size for a session created by the fetcher.
        """
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=max_connections,
                pool_maxsize=max_connections,
                max_retries=0,
            )
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._session = session
        self.timeout = timeout
        self._headers = {
            "User-Agent": USER_AGENT,
            "Accept": "image/avif,image/webp,image/svg+xml,image/*;q=0.9,*/*;q=0.5",
        }

    def fetch(self, url: str) -> bytes:
        """Return the response body for ``url``.

        Raises
        ------
        AssetUnavailableError
            On connection errors, timeouts, or HTTP status 400 and above.
        """
        try:
            response = self._session.get(
                url, headers=self._headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to download '{url}': {exc}"
            raise AssetUnavailableError(msg) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            msg = f"Download of '{url}' failed with status {response.status_code}"
            raise AssetUnavailableError(msg)
        return response.content

    def close(self) -> None:
        """Close the session if the fetcher created it."""
        if self._owns_session:
            self._session.close()


__all__ = ["RemoteImageFetcher"]
