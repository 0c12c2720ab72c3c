"""Typed dataclasses describing a parsed genkan site configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

from genkan._constants import DEFAULT_IMAGE_SIZES, DEFAULT_THEME


class ConfigError(ValueError):
    """Raised when the site configuration is invalid or contradictory."""


class TextDomain(enum.StrEnum):
    """Independently styled text regions of the page."""

    HEADER = "header"
    BIO = "bio"
    LINK_TITLE = "link_title"
    LINK_DESCRIPTION = "link_description"


class ColorMode(enum.StrEnum):
    """Color schemes every resolved style is emitted for."""

    LIGHT = "light"
    DARK = "dark"


TYPOGRAPHY_FIELDS = ("size", "font", "weight", "style", "color")
THEME_COLOR_NAMES = ("primary", "secondary", "background")


@dc.dataclass(frozen=True, slots=True)
class TypographyStyle:
    """One ``theme.typography.<table>`` entry; unset fields are ``None``."""

    size: str | None = None
    font: str | None = None
    weight: str | None = None
    style: str | None = None
    color: str | None = None
    size_dark: str | None = None
    font_dark: str | None = None
    weight_dark: str | None = None
    style_dark: str | None = None
    color_dark: str | None = None

    def value(self, field: str) -> str | None:
        """Return the mode-agnostic value for ``field``."""
        return getattr(self, field)

    def dark_value(self, field: str) -> str | None:
        """Return the dark-mode override for ``field``."""
        return getattr(self, f"{field}_dark")


@dc.dataclass(frozen=True, slots=True)
class TypographyConfig:
    """The ``theme.typography`` table: a default entry plus one per domain."""

    default: TypographyStyle = dc.field(default_factory=TypographyStyle)
    header: TypographyStyle = dc.field(default_factory=TypographyStyle)
    bio: TypographyStyle = dc.field(default_factory=TypographyStyle)
    link_title: TypographyStyle = dc.field(default_factory=TypographyStyle)
    link_description: TypographyStyle = dc.field(default_factory=TypographyStyle)

    def for_domain(self, domain: TextDomain) -> TypographyStyle:
        """Return the typography entry configured for ``domain``."""
        return getattr(self, domain.value)


@dc.dataclass(frozen=True, slots=True)
class ThemeColors:
    """Flat color fields from ``theme``, ``theme.light`` or ``theme.dark``."""

    primary_color: str | None = None
    secondary_color: str | None = None
    background_color: str | None = None
    header_color: str | None = None
    bio_color: str | None = None
    link_title_color: str | None = None
    link_description_color: str | None = None

    def get(self, name: str) -> str | None:
        """Return ``<name>_color`` or ``None`` when unset."""
        return getattr(self, f"{name}_color")


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Visual theming applied to the generated page."""

    name: str = DEFAULT_THEME
    button_style: str = "rounded"
    font_family: str = "system-ui, -apple-system, sans-serif"
    link_spacing: str = "24px"
    typography: TypographyConfig = dc.field(default_factory=TypographyConfig)
    light: ThemeColors = dc.field(default_factory=ThemeColors)
    dark: ThemeColors = dc.field(default_factory=ThemeColors)
    legacy: ThemeColors = dc.field(default_factory=ThemeColors)

    def colors(self, mode: ColorMode) -> ThemeColors:
        """Return the color table for ``mode``."""
        return self.dark if mode is ColorMode.DARK else self.light


@dc.dataclass(frozen=True, slots=True)
class ProfileAssets:
    """Per-mode profile imagery and backgrounds."""

    avatar: str | None = None
    background: str | None = None
    background_image: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SocialLinkConfig:
    """A declared social icon link, prior to validation."""

    icon: str | None
    url: str | None
    title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ProfileConfig:
    """Profile header content."""

    name: str
    bio: str
    light: ProfileAssets = dc.field(default_factory=ProfileAssets)
    dark: ProfileAssets = dc.field(default_factory=ProfileAssets)
    social_links: tuple[SocialLinkConfig, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class MetaConfig:
    """Document metadata passed through to the page head and footer."""

    title: str
    description: str
    page_url: str | None = None
    favicon: str | None = None
    custom_css: str | None = None
    analytics: str | None = None
    show_footer: bool = True
    share_title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ImageSettings:
    """Target sizes per image role and optional fallbacks."""

    avatar_size: int = DEFAULT_IMAGE_SIZES["avatar_size"]
    link_icon_size: int = DEFAULT_IMAGE_SIZES["link_icon_size"]
    social_icon_size: int = DEFAULT_IMAGE_SIZES["social_icon_size"]
    favicon_size: int = DEFAULT_IMAGE_SIZES["favicon_size"]
    avatar_fallback: str | None = None
    favicon_fallback: str | None = None


@dc.dataclass(frozen=True, slots=True)
class DarkModeConfig:
    """How the page script picks between light and dark at view time."""

    mode: str = "disable"


@dc.dataclass(frozen=True, slots=True)
class LinkConfig:
    """A ``[[links]]`` entry exactly as declared, prior to validation.

    ``declared`` records which keys were present so the link builder can tell
    an omitted key from an empty one.
    """

    index: int
    title: str | None = None
    url: str | None = None
    icon: str | None = None
    description: str | None = None
    link_type: str | None = None
    height: str | None = None
    declared: frozenset[str] = frozenset()


@dc.dataclass(frozen=True, slots=True)
class RawConfig:
    """The whole parsed configuration tree for one build."""

    profile: ProfileConfig
    theme: ThemeConfig
    meta: MetaConfig
    links: tuple[LinkConfig, ...]
    dark_mode: DarkModeConfig = dc.field(default_factory=DarkModeConfig)
    image: ImageSettings = dc.field(default_factory=ImageSettings)
    base_dir: Path = Path()


__all__ = [
    "THEME_COLOR_NAMES",
    "TYPOGRAPHY_FIELDS",
    "ColorMode",
    "ConfigError",
    "DarkModeConfig",
    "ImageSettings",
    "LinkConfig",
    "MetaConfig",
    "ProfileAssets",
    "ProfileConfig",
    "RawConfig",
    "SocialLinkConfig",
    "TextDomain",
    "ThemeColors",
    "ThemeConfig",
    "TypographyConfig",
    "TypographyStyle",
]
