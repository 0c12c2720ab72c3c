"""Shared fixtures for genkan tests.

Images are generated with Pillow on demand so no binary fixtures live in the
repository, and HTTP access always goes through a ``requests.Session`` mock so
the suite never touches the network.
"""

from __future__ import annotations

import io
import typing as typ
from textwrap import dedent

import pytest
import requests
from PIL import Image

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from pytest_mock import MockerFixture

ImageFactory = typ.Callable[..., bytes]

MINIMAL_CONFIG = dedent(
    """
    [profile]
    name = "Ada Lovelace"
    bio = "Analyst of engines."

    [meta]
    title = "Ada"
    description = "Links for Ada"

    [[links]]
    title = "Notes"
    url = "https://example.com/notes"
    """
).strip()


def make_image(
    width: int, height: int, *, fmt: str = "PNG", mode: str = "RGB"
) -> bytes:
    """Return encoded image bytes of the requested size and format."""
    color: typ.Any = (200, 40, 40) if mode == "RGB" else (200, 40, 40, 255)
    if mode in {"L", "P"}:
        color = 128
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def image_size(payload: bytes) -> tuple[int, int]:
    """Return the pixel dimensions of encoded image bytes."""
    with Image.open(io.BytesIO(payload)) as image:
        return image.size


@pytest.fixture
def image_bytes() -> ImageFactory:
    """Expose :func:`make_image` as a fixture."""
    return make_image


@pytest.fixture
def measure() -> typ.Callable[[bytes], tuple[int, int]]:
    """Expose :func:`image_size` as a fixture."""
    return image_size


@pytest.fixture
def write_config(tmp_path: Path) -> cabc.Callable[[str], Path]:
    """Return a helper that writes TOML text to ``tmp_path/config.toml``."""

    def _write(text: str = MINIMAL_CONFIG) -> Path:
        path = tmp_path / "config.toml"
        path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
        return path

    return _write


class StubResponses:
    """Map of URL to ``(status, body)`` served by :func:`stub_session`."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, bytes]] = {}
        self.calls: list[str] = []

    def add(self, url: str, body: bytes, status: int = 200) -> None:
        self.routes[url] = (status, body)

    def count(self, url: str) -> int:
        return self.calls.count(url)


@pytest.fixture
def http_routes() -> StubResponses:
    return StubResponses()


@pytest.fixture
def stub_session(mocker: MockerFixture, http_routes: StubResponses) -> typ.Any:
    """A ``requests.Session`` mock answering from :func:`http_routes`."""
    session = mocker.Mock(spec=requests.Session)

    def _get(url: str, **_kwargs: typ.Any) -> typ.Any:
        http_routes.calls.append(url)
        if url not in http_routes.routes:
            msg = f"connection refused for {url}"
            raise requests.ConnectionError(msg)
        status, body = http_routes.routes[url]
        response = mocker.Mock()
        response.status_code = status
        response.content = body
        return response

    session.get.side_effect = _get
    return session
