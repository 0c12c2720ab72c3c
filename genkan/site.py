"""Combine resolved styles, embedded assets and links into one page model.

Assembly is a pure step. :func:`plan_assets` lists every image the page needs
as an :class:`ImageRequest`; once the asset pipeline has produced a mapping
from request to :class:`EmbeddedAsset`, :func:`assemble_site` binds those
results into a frozen :class:`SiteModel` that templates read without any
further lookups.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .assets import (
    EmbeddedAsset,
    EmbeddedAssets,
    ImageRequest,
    ImageRole,
    classify_source,
)
from .links import BlockLink, LinkEntry, SocialLink, SpaceLink
from .qr import page_qr_code

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import RawConfig
    from .style import ResolvedTheme


@dc.dataclass(frozen=True, slots=True)
class AssetPlan:
    """Image requests for one page, positioned to match the model slots.

    ``link_icons`` is aligned with the link entries; spaces and blocks
    without an icon hold ``None``.
    """

    light_avatar: ImageRequest | None
    dark_avatar: ImageRequest | None
    favicon: ImageRequest | None
    social_icons: tuple[ImageRequest, ...]
    link_icons: tuple[ImageRequest | None, ...]

    def requests(self) -> list[ImageRequest]:
        """Return every planned request, duplicates included, in page order."""
        slots = (
            self.light_avatar,
            self.dark_avatar,
            self.favicon,
            *self.social_icons,
            *self.link_icons,
        )
        return [request for request in slots if request is not None]


def plan_assets(
    config: RawConfig,
    links: cabc.Sequence[LinkEntry],
    socials: cabc.Sequence[SocialLink],
) -> AssetPlan:
    """Describe every image the page references with its role and target size."""
    image = config.image
    base_dir = config.base_dir

    def request(value: str | None, role: ImageRole, size: int) -> ImageRequest | None:
        if not value:
            return None
        return ImageRequest(classify_source(value, base_dir), role, size)

    link_icons: list[ImageRequest | None] = []
    for entry in links:
        match entry:
            case BlockLink(icon=None) | SpaceLink():
                link_icons.append(None)
            case BlockLink(icon=icon):
                link_icons.append(
                    ImageRequest(icon, ImageRole.ICON, image.link_icon_size)
                )
            case _:  # pragma: no cover - exhaustive over LinkEntry
                typ.assert_never(entry)

    return AssetPlan(
        light_avatar=request(
            config.profile.light.avatar, ImageRole.AVATAR, image.avatar_size
        ),
        dark_avatar=request(
            config.profile.dark.avatar, ImageRole.AVATAR, image.avatar_size
        ),
        favicon=request(config.meta.favicon, ImageRole.FAVICON, image.favicon_size),
        social_icons=tuple(
            ImageRequest(social.icon, ImageRole.ICON, image.social_icon_size)
            for social in socials
        ),
        link_icons=tuple(link_icons),
    )


@dc.dataclass(frozen=True, slots=True)
class ProfileImagery:
    """Avatar and background settings for one color mode."""

    avatar: EmbeddedAsset | None
    background: str | None
    background_image: str | None


@dc.dataclass(frozen=True, slots=True)
class SocialEntry:
    """A rendered social icon link."""

    icon: EmbeddedAsset | None
    url: str
    title: str | None


@dc.dataclass(frozen=True, slots=True)
class ResolvedProfile:
    """Profile header content with images embedded."""

    name: str
    bio: str
    light: ProfileImagery
    dark: ProfileImagery
    social_links: tuple[SocialEntry, ...]


@dc.dataclass(frozen=True, slots=True)
class BlockEntry:
    """A rendered link row; ``url`` and ``icon`` are optional."""

    kind: typ.ClassVar[str] = "block"

    title: str
    url: str | None
    icon: EmbeddedAsset | None
    description: str | None


@dc.dataclass(frozen=True, slots=True)
class SpaceEntry:
    """Vertical spacing between rows."""

    kind: typ.ClassVar[str] = "space"

    height: str


SiteEntry = BlockEntry | SpaceEntry


@dc.dataclass(frozen=True, slots=True)
class ResolvedMeta:
    """Document metadata with the favicon and page QR code embedded."""

    title: str
    description: str
    page_url: str | None
    favicon: EmbeddedAsset | None
    custom_css: str | None
    analytics: str | None
    show_footer: bool
    share_title: str | None
    qr_code: EmbeddedAsset | None


@dc.dataclass(frozen=True, slots=True)
class SiteModel:
    """Everything a theme template needs to render the page."""

    profile: ResolvedProfile
    theme: ResolvedTheme
    meta: ResolvedMeta
    links: tuple[SiteEntry, ...]
    dark_mode: str


def _lookup(
    embedded: EmbeddedAssets, request: ImageRequest | None
) -> EmbeddedAsset | None:
    if request is None:
        return None
    if request not in embedded:
        msg = f"Image request {request!r} was never resolved by the asset pipeline."
        raise RuntimeError(msg)
    return embedded[request]


def assemble_site(
    config: RawConfig,
    *,
    theme: ResolvedTheme,
    links: cabc.Sequence[LinkEntry],
    socials: cabc.Sequence[SocialLink],
    plan: AssetPlan,
    embedded: EmbeddedAssets,
) -> SiteModel:
    """Bind resolved styles, links and embedded images into a SiteModel.

    Parameters
    ----------
    config : RawConfig
        Parsed configuration; supplies the pass-through profile and meta
        fields.
    theme : ResolvedTheme
        Output of :func:`genkan.style.resolve_theme`.
    links, socials : Sequence
        Validated entries, in declaration order.
    plan : AssetPlan
        The plan the pipeline was run against.
    embedded : EmbeddedAssets
        Pipeline results; ``None`` marks an asset omitted after a failure.

    Raises
    ------
    RuntimeError
        If a planned request has no entry in ``embedded``.
    ConfigError
        If ``meta.page_url`` is too long to encode as a QR code.
    """
    if len(plan.link_icons) != len(links) or len(plan.social_icons) != len(socials):
        msg = "Asset plan does not match the link entries it was built from."
        raise RuntimeError(msg)

    light_avatar = _lookup(embedded, plan.light_avatar)
    dark_avatar = _lookup(embedded, plan.dark_avatar) or light_avatar
    profile_config = config.profile
    profile = ResolvedProfile(
        name=profile_config.name,
        bio=profile_config.bio,
        light=ProfileImagery(
            avatar=light_avatar,
            background=profile_config.light.background,
            background_image=profile_config.light.background_image,
        ),
        dark=ProfileImagery(
            avatar=dark_avatar,
            background=profile_config.dark.background,
            background_image=profile_config.dark.background_image,
        ),
        social_links=tuple(
            SocialEntry(
                icon=_lookup(embedded, request), url=social.url, title=social.title
            )
            for social, request in zip(socials, plan.social_icons, strict=True)
        ),
    )

    entries: list[SiteEntry] = []
    for entry, request in zip(links, plan.link_icons, strict=True):
        match entry:
            case SpaceLink(height=height):
                entries.append(SpaceEntry(height=height))
            case BlockLink(title=title, url=url, description=description):
                entries.append(
                    BlockEntry(
                        title=title,
                        url=url,
                        icon=_lookup(embedded, request),
                        description=description,
                    )
                )
            case _:  # pragma: no cover - exhaustive over LinkEntry
                typ.assert_never(entry)

    meta_config = config.meta
    meta = ResolvedMeta(
        title=meta_config.title,
        description=meta_config.description,
        page_url=meta_config.page_url,
        favicon=_lookup(embedded, plan.favicon),
        custom_css=meta_config.custom_css,
        analytics=meta_config.analytics,
        show_footer=meta_config.show_footer,
        share_title=meta_config.share_title or meta_config.title,
        qr_code=page_qr_code(meta_config.page_url) if meta_config.page_url else None,
    )
    return SiteModel(
        profile=profile,
        theme=theme,
        meta=meta,
        links=tuple(entries),
        dark_mode=config.dark_mode.mode,
    )


__all__ = [
    "AssetPlan",
    "BlockEntry",
    "ProfileImagery",
    "ResolvedMeta",
    "ResolvedProfile",
    "SiteEntry",
    "SiteModel",
    "SocialEntry",
    "SpaceEntry",
    "assemble_site",
    "plan_assets",
]
