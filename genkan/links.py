"""Validate ``[[links]]`` and social link entries into closed entry types.

Declaration order is the on-page order and is preserved exactly. A link is
either a :class:`BlockLink` (a titled row, clickable when it has a ``url``)
or a :class:`SpaceLink` (vertical spacing only).

Examples
--------
>>> from pathlib import Path
>>> from genkan.config import LinkConfig
>>> build_links([LinkConfig(index=0, title="Blog", declared=frozenset({"title"}))],
...             base_dir=Path("."))
(BlockLink(title='Blog', url=None, icon=None, description=None),)
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from .assets import ImageSource, classify_source
from .config import ConfigError, LinkConfig, SocialLinkConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class LinkType(enum.StrEnum):
    """Accepted ``link_type`` values."""

    BLOCK = "block"
    SPACE = "space"


SPACE_FORBIDDEN_KEYS = ("url", "icon", "description")


@dc.dataclass(frozen=True, slots=True)
class BlockLink:
    """A titled entry; no ``url`` means static text, no ``icon`` means no icon slot."""

    title: str
    url: str | None = None
    icon: ImageSource | None = None
    description: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SpaceLink:
    """Vertical spacing between entries."""

    height: str


LinkEntry = BlockLink | SpaceLink


@dc.dataclass(frozen=True, slots=True)
class SocialLink:
    """An icon in the profile's social row."""

    icon: ImageSource
    url: str
    title: str | None = None


def _link_type(link: LinkConfig) -> LinkType:
    raw = (link.link_type or LinkType.BLOCK).lower()
    try:
        return LinkType(raw)
    except ValueError:
        msg = (
            f"Invalid 'links[{link.index}].link_type' value '{link.link_type}'. "
            "Must be 'block' or 'space'."
        )
        raise ConfigError(msg) from None


def build_link(link: LinkConfig, *, base_dir: Path) -> LinkEntry:
    """Validate one declared entry and return its typed form.

    Raises
    ------
    ConfigError
        If the entry's type is unknown, a block has no title, or a space has
        no height or declares a key only blocks accept.
    """
    kind = _link_type(link)
    match kind:
        case LinkType.SPACE:
            for key in SPACE_FORBIDDEN_KEYS:
                if key in link.declared:
                    msg = (
                        f"Space entry cannot declare 'links[{link.index}].{key}'."
                    )
                    raise ConfigError(msg)
            if link.height is None:
                msg = f"Space entry requires 'links[{link.index}].height'."
                raise ConfigError(msg)
            return SpaceLink(height=link.height)
        case LinkType.BLOCK:
            if not link.title:
                msg = f"Block entry requires a non-empty 'links[{link.index}].title'."
                raise ConfigError(msg)
            icon = classify_source(link.icon, base_dir) if link.icon else None
            return BlockLink(
                title=link.title,
                url=link.url,
                icon=icon,
                description=link.description,
            )
        case _:  # pragma: no cover - exhaustive over LinkType
            typ.assert_never(kind)


def build_links(
    links: cabc.Sequence[LinkConfig], *, base_dir: Path
) -> tuple[LinkEntry, ...]:
    """Return every declared entry in declaration order.

    Raises
    ------
    ConfigError
        If no entries are declared, or any entry is invalid.
    """
    if not links:
        msg = "Configuration must declare at least one entry under 'links'."
        raise ConfigError(msg)
    return tuple(build_link(link, base_dir=base_dir) for link in links)


def build_social_links(
    entries: cabc.Sequence[SocialLinkConfig], *, base_dir: Path
) -> tuple[SocialLink, ...]:
    """Validate ``profile.social_links``; each needs an ``icon`` and a ``url``."""
    socials: list[SocialLink] = []
    for idx, entry in enumerate(entries):
        for key in ("icon", "url"):
            if getattr(entry, key) is None:
                msg = (
                    f"Configuration key 'profile.social_links[{idx}].{key}' "
                    "is required."
                )
                raise ConfigError(msg)
        socials.append(
            SocialLink(
                icon=classify_source(typ.cast("str", entry.icon), base_dir),
                url=typ.cast("str", entry.url),
                title=entry.title,
            )
        )
    return tuple(socials)


__all__ = [
    "BlockLink",
    "LinkEntry",
    "LinkType",
    "SocialLink",
    "SpaceLink",
    "build_link",
    "build_links",
    "build_social_links",
]
