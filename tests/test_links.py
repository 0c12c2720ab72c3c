"""Tests for link and social link validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from genkan.assets import InlineText, LocalPath, RemoteUrl
from genkan.config import ConfigError, LinkConfig, SocialLinkConfig
from genkan.links import (
    BlockLink,
    SpaceLink,
    build_link,
    build_links,
    build_social_links,
)

BASE_DIR = Path("/srv/site")


def _link(index: int = 0, **values: str) -> LinkConfig:
    return LinkConfig(index=index, **values, declared=frozenset(values))


def test_missing_link_type_defaults_to_block() -> None:
    entry = build_link(_link(title="Blog", url="https://example.com"), base_dir=BASE_DIR)
    assert entry == BlockLink(title="Blog", url="https://example.com")


@pytest.mark.parametrize("link_type", ["BLOCK", "Block", "block"])
def test_link_type_is_case_insensitive(link_type: str) -> None:
    entry = build_link(_link(title="Blog", link_type=link_type), base_dir=BASE_DIR)
    assert isinstance(entry, BlockLink)


def test_unknown_link_type_is_rejected() -> None:
    with pytest.raises(ConfigError, match=r"links\[3\]\.link_type"):
        build_link(_link(3, title="x", link_type="divider"), base_dir=BASE_DIR)


def test_block_requires_title() -> None:
    with pytest.raises(ConfigError, match=r"links\[0\]\.title"):
        build_link(_link(url="https://example.com"), base_dir=BASE_DIR)


def test_block_without_url_is_static_text() -> None:
    entry = build_link(_link(title="Available for work"), base_dir=BASE_DIR)
    assert isinstance(entry, BlockLink)
    assert entry.url is None


def test_block_without_icon_has_no_icon() -> None:
    entry = build_link(_link(title="Blog"), base_dir=BASE_DIR)
    assert isinstance(entry, BlockLink)
    assert entry.icon is None, "an omitted icon must not become a placeholder"


def test_block_icons_are_classified() -> None:
    remote = build_link(
        _link(title="a", icon="https://cdn.example.com/a.png"), base_dir=BASE_DIR
    )
    local = build_link(_link(title="b", icon="icons/b.png"), base_dir=BASE_DIR)
    emoji = build_link(_link(title="c", icon="🌐"), base_dir=BASE_DIR)
    assert isinstance(remote, BlockLink)
    assert remote.icon == RemoteUrl("https://cdn.example.com/a.png")
    assert isinstance(local, BlockLink)
    assert local.icon == LocalPath(BASE_DIR / "icons/b.png", "icons/b.png")
    assert isinstance(emoji, BlockLink)
    assert emoji.icon == InlineText("🌐")


def test_space_requires_height() -> None:
    with pytest.raises(ConfigError, match=r"links\[2\]\.height"):
        build_link(_link(2, link_type="space"), base_dir=BASE_DIR)


@pytest.mark.parametrize("key", ["url", "icon", "description"])
def test_space_rejects_block_fields(key: str) -> None:
    values = {"link_type": "space", "height": "12px", key: "anything"}
    with pytest.raises(ConfigError, match=rf"links\[1\]\.{key}"):
        build_link(_link(1, **values), base_dir=BASE_DIR)


def test_space_keeps_height() -> None:
    entry = build_link(_link(link_type="SPACE", height="24px"), base_dir=BASE_DIR)
    assert entry == SpaceLink(height="24px")


def test_build_links_preserves_declaration_order() -> None:
    declared = [
        _link(0, title="first"),
        _link(1, link_type="space", height="8px"),
        _link(2, title="third"),
    ]
    entries = build_links(declared, base_dir=BASE_DIR)
    assert [type(entry).__name__ for entry in entries] == [
        "BlockLink",
        "SpaceLink",
        "BlockLink",
    ]
    assert isinstance(entries[2], BlockLink)
    assert entries[2].title == "third"


def test_build_links_requires_an_entry() -> None:
    with pytest.raises(ConfigError, match="at least one"):
        build_links([], base_dir=BASE_DIR)


def test_social_links_require_icon_and_url() -> None:
    with pytest.raises(ConfigError, match=r"social_links\[1\]\.url"):
        build_social_links(
            [
                SocialLinkConfig(icon="🐙", url="https://github.com/"),
                SocialLinkConfig(icon="🐦", url=None),
            ],
            base_dir=BASE_DIR,
        )


def test_social_links_classify_icons() -> None:
    (social,) = build_social_links(
        [SocialLinkConfig(icon="//cdn.example.com/gh.svg", url="https://gh", title="GH")],
        base_dir=BASE_DIR,
    )
    assert social.icon == RemoteUrl("https://cdn.example.com/gh.svg")
    assert social.title == "GH"
