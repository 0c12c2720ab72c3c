"""Resolve typography and theme colors for every text domain and color mode.

Values come from several places in ``[theme]``: per-domain typography tables
with optional ``*_dark`` overrides, the ``typography.default`` table, legacy
flat ``<domain>_color`` fields, and finally built-in defaults. Each field is
looked up independently by walking an ordered tuple of accessor functions and
taking the first defined value, so every tier can be exercised on its own.

Both color modes are always emitted; the page script decides which one to
show at view time.

Examples
--------
>>> from genkan.config import ColorMode, TextDomain, ThemeConfig
>>> resolved = resolve_theme(ThemeConfig())
>>> resolved.for_mode(ColorMode.LIGHT).typography[TextDomain.HEADER].size
'2rem'
>>> resolved.for_mode(ColorMode.DARK).colors.background
'#121212'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .config import (
    THEME_COLOR_NAMES,
    TYPOGRAPHY_FIELDS,
    ColorMode,
    TextDomain,
    ThemeConfig,
)

DEFAULT_FONT = "system-ui, -apple-system, sans-serif"

_DOMAIN_SHAPES: dict[TextDomain, dict[str, str]] = {
    TextDomain.HEADER: {"size": "2rem", "weight": "700"},
    TextDomain.BIO: {"size": "1.1rem", "weight": "normal"},
    TextDomain.LINK_TITLE: {"size": "1.1rem", "weight": "600"},
    TextDomain.LINK_DESCRIPTION: {"size": "0.9rem", "weight": "normal"},
}
_DOMAIN_COLORS: dict[ColorMode, dict[TextDomain, str]] = {
    ColorMode.LIGHT: {
        TextDomain.HEADER: "#000000",
        TextDomain.BIO: "rgba(0, 0, 0, 0.7)",
        TextDomain.LINK_TITLE: "#000000",
        TextDomain.LINK_DESCRIPTION: "rgba(0, 0, 0, 0.6)",
    },
    ColorMode.DARK: {
        TextDomain.HEADER: "#ffffff",
        TextDomain.BIO: "rgba(255, 255, 255, 0.7)",
        TextDomain.LINK_TITLE: "#ffffff",
        TextDomain.LINK_DESCRIPTION: "rgba(255, 255, 255, 0.6)",
    },
}

BUILTIN_TYPOGRAPHY: dict[ColorMode, dict[TextDomain, dict[str, str]]] = {
    mode: {
        domain: {
            "font": DEFAULT_FONT,
            "style": "normal",
            **shape,
            "color": _DOMAIN_COLORS[mode][domain],
        }
        for domain, shape in _DOMAIN_SHAPES.items()
    }
    for mode in ColorMode
}

BUILTIN_COLORS: dict[ColorMode, dict[str, str]] = {
    ColorMode.LIGHT: {
        "primary": "#000000",
        "secondary": "#000000",
        "background": "#ffffff",
    },
    ColorMode.DARK: {
        "primary": "#ffffff",
        "secondary": "#ffffff",
        "background": "#121212",
    },
}


class MissingDefaultError(RuntimeError):
    """Raised when no tier, including the built-in defaults, yields a value."""


@dc.dataclass(frozen=True, slots=True)
class StyleLookup:
    """One typography field lookup: ``field`` of ``domain`` in ``mode``."""

    theme: ThemeConfig
    domain: TextDomain
    mode: ColorMode
    field: str


@dc.dataclass(frozen=True, slots=True)
class ColorLookup:
    """One theme color lookup: ``name`` (primary/secondary/background) in ``mode``."""

    theme: ThemeConfig
    mode: ColorMode
    name: str


def domain_mode_override(lookup: StyleLookup) -> str | None:
    """Tier 1: ``typography.<domain>.<field>_dark`` in dark mode, else ``<field>``."""
    entry = lookup.theme.typography.for_domain(lookup.domain)
    if lookup.mode is ColorMode.DARK:
        return entry.dark_value(lookup.field)
    return entry.value(lookup.field)


def domain_value(lookup: StyleLookup) -> str | None:
    """Tier 2: ``typography.<domain>.<field>``."""
    return lookup.theme.typography.for_domain(lookup.domain).value(lookup.field)


def default_mode_override(lookup: StyleLookup) -> str | None:
    """Tier 3a: ``typography.default.<field>_dark`` in dark mode."""
    if lookup.mode is ColorMode.DARK:
        return lookup.theme.typography.default.dark_value(lookup.field)
    return None


def default_value(lookup: StyleLookup) -> str | None:
    """Tier 3b: ``typography.default.<field>``."""
    return lookup.theme.typography.default.value(lookup.field)


def legacy_color(lookup: StyleLookup) -> str | None:
    """Tier 4: flat ``<domain>_color`` fields from older configurations."""
    if lookup.field != "color":
        return None
    theme = lookup.theme
    if lookup.mode is ColorMode.DARK:
        return theme.dark.get(lookup.domain.value)
    return theme.light.get(lookup.domain.value) or theme.legacy.get(
        lookup.domain.value
    )


def builtin_typography(lookup: StyleLookup) -> str | None:
    """Tier 5: hard-coded defaults."""
    return BUILTIN_TYPOGRAPHY[lookup.mode][lookup.domain].get(lookup.field)


TYPOGRAPHY_CASCADE: tuple[typ.Callable[[StyleLookup], str | None], ...] = (
    domain_mode_override,
    domain_value,
    default_mode_override,
    default_value,
    legacy_color,
    builtin_typography,
)


def mode_color(lookup: ColorLookup) -> str | None:
    """``theme.<mode>.<name>_color``."""
    return lookup.theme.colors(lookup.mode).get(lookup.name)


def legacy_theme_color(lookup: ColorLookup) -> str | None:
    """Flat ``theme.<name>_color``, which only ever described light mode."""
    if lookup.mode is ColorMode.LIGHT:
        return lookup.theme.legacy.get(lookup.name)
    return None


def builtin_color(lookup: ColorLookup) -> str | None:
    return BUILTIN_COLORS[lookup.mode].get(lookup.name)


COLOR_CASCADE: tuple[typ.Callable[[ColorLookup], str | None], ...] = (
    mode_color,
    legacy_theme_color,
    builtin_color,
)


@dc.dataclass(frozen=True, slots=True)
class ResolvedTypography:
    """Fully populated text style for one domain in one mode."""

    size: str
    font: str
    weight: str
    style: str
    color: str


@dc.dataclass(frozen=True, slots=True)
class DomainTypography:
    """Resolved typography for all four text domains."""

    header: ResolvedTypography
    bio: ResolvedTypography
    link_title: ResolvedTypography
    link_description: ResolvedTypography

    def __getitem__(self, domain: TextDomain | str) -> ResolvedTypography:
        return getattr(self, TextDomain(domain).value)


@dc.dataclass(frozen=True, slots=True)
class ResolvedColors:
    """Theme-wide colors for one mode."""

    primary: str
    secondary: str
    background: str


@dc.dataclass(frozen=True, slots=True)
class ModeStyle:
    """Everything the stylesheet needs for one color mode."""

    typography: DomainTypography
    colors: ResolvedColors


@dc.dataclass(frozen=True, slots=True)
class ResolvedTheme:
    """Theme settings with both color modes fully resolved."""

    name: str
    button_style: str
    font_family: str
    link_spacing: str
    light: ModeStyle
    dark: ModeStyle

    def for_mode(self, mode: ColorMode) -> ModeStyle:
        """Return the resolved styles for ``mode``."""
        return self.dark if mode is ColorMode.DARK else self.light


def _is_defined(field: str, value: str | None) -> bool:
    """Return whether ``value`` ends the cascade; empty fonts fall through."""
    if value is None:
        return False
    return not (field == "font" and not value)


def resolve_field(
    lookup: StyleLookup,
    cascade: typ.Sequence[typ.Callable[[StyleLookup], str | None]] = (
        TYPOGRAPHY_CASCADE
    ),
) -> str:
    """Return the first defined value for ``lookup`` walking ``cascade`` in order.

    Raises
    ------
    MissingDefaultError
        If every accessor, including the built-in tier, comes up empty.
    """
    for accessor in cascade:
        value = accessor(lookup)
        if _is_defined(lookup.field, value):
            return typ.cast("str", value)
    msg = (
        f"No built-in default for typography field '{lookup.field}' of "
        f"'{lookup.domain}' in {lookup.mode} mode."
    )
    raise MissingDefaultError(msg)


def resolve_color(
    lookup: ColorLookup,
    cascade: typ.Sequence[typ.Callable[[ColorLookup], str | None]] = COLOR_CASCADE,
) -> str:
    """Return the first defined theme color for ``lookup``."""
    for accessor in cascade:
        value = accessor(lookup)
        if value:
            return value
    msg = f"No built-in default for '{lookup.name}' color in {lookup.mode} mode."
    raise MissingDefaultError(msg)


def resolve_typography(
    theme: ThemeConfig, domain: TextDomain, mode: ColorMode
) -> ResolvedTypography:
    """Resolve all five fields of ``domain`` in ``mode`` independently."""
    values = {
        field: resolve_field(StyleLookup(theme, domain, mode, field))
        for field in TYPOGRAPHY_FIELDS
    }
    return ResolvedTypography(**values)


def resolve_mode(theme: ThemeConfig, mode: ColorMode) -> ModeStyle:
    """Resolve every text domain and theme color for ``mode``."""
    typography = DomainTypography(
        **{
            domain.value: resolve_typography(theme, domain, mode)
            for domain in TextDomain
        }
    )
    colors = ResolvedColors(
        **{
            name: resolve_color(ColorLookup(theme, mode, name))
            for name in THEME_COLOR_NAMES
        }
    )
    return ModeStyle(typography=typography, colors=colors)


def resolve_theme(theme: ThemeConfig) -> ResolvedTheme:
    """Resolve typography and colors for both modes.

    Parameters
    ----------
    theme : ThemeConfig
        Parsed ``[theme]`` table. Unknown domains or mode suffixes were
        already rejected by the loader with a ``ConfigError``.

    Returns
    -------
    ResolvedTheme
        Theme passthrough fields plus a fully populated :class:`ModeStyle`
        for light and dark.
    """
    return ResolvedTheme(
        name=theme.name,
        button_style=theme.button_style,
        font_family=theme.font_family,
        link_spacing=theme.link_spacing,
        light=resolve_mode(theme, ColorMode.LIGHT),
        dark=resolve_mode(theme, ColorMode.DARK),
    )


__all__ = [
    "BUILTIN_COLORS",
    "BUILTIN_TYPOGRAPHY",
    "COLOR_CASCADE",
    "TYPOGRAPHY_CASCADE",
    "ColorLookup",
    "DomainTypography",
    "MissingDefaultError",
    "ModeStyle",
    "ResolvedColors",
    "ResolvedTheme",
    "ResolvedTypography",
    "StyleLookup",
    "resolve_color",
    "resolve_field",
    "resolve_mode",
    "resolve_theme",
    "resolve_typography",
]
