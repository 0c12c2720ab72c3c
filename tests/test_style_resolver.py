"""Tests for the typography and color cascade."""

from __future__ import annotations

import typing as typ

import pytest

from genkan import style
from genkan.config import (
    TYPOGRAPHY_FIELDS,
    ColorMode,
    TextDomain,
    ThemeColors,
    ThemeConfig,
    TypographyConfig,
    TypographyStyle,
    parse_config,
)
from genkan.style import (
    BUILTIN_COLORS,
    BUILTIN_TYPOGRAPHY,
    ColorLookup,
    MissingDefaultError,
    StyleLookup,
    resolve_color,
    resolve_field,
    resolve_theme,
)


def _theme(**sections: typ.Any) -> ThemeConfig:
    raw = {
        "profile": {"name": "Ada"},
        "meta": {"title": "t", "description": "d"},
        "links": [{"title": "x"}],
        "theme": sections,
    }
    return parse_config(raw).theme


@pytest.mark.parametrize("mode", list(ColorMode))
@pytest.mark.parametrize("domain", list(TextDomain))
def test_resolution_is_total(domain: TextDomain, mode: ColorMode) -> None:
    """Every domain and mode resolves all five fields, even with an empty theme."""
    resolved = resolve_theme(ThemeConfig()).for_mode(mode).typography[domain]
    for field in TYPOGRAPHY_FIELDS:
        value = getattr(resolved, field)
        assert value, f"{domain}/{mode} left '{field}' unresolved"


def test_builtin_defaults_cover_every_field() -> None:
    for mode in ColorMode:
        for domain in TextDomain:
            assert set(BUILTIN_TYPOGRAPHY[mode][domain]) == set(TYPOGRAPHY_FIELDS)
        assert set(BUILTIN_COLORS[mode]) == {"primary", "secondary", "background"}


def test_typography_color_beats_legacy_flat_color() -> None:
    """Both set for the same domain: the typography table wins."""
    theme = _theme(header_color="#222222", typography={"header": {"color": "#111111"}})
    resolved = resolve_theme(theme)
    assert resolved.light.typography.header.color == "#111111", (
        "typography.header.color should take precedence over header_color"
    )


def test_legacy_flat_color_used_when_typography_silent() -> None:
    theme = _theme(bio_color="#333333")
    resolved = resolve_theme(theme)
    assert resolved.light.typography.bio.color == "#333333"
    assert resolved.dark.typography.bio.color == BUILTIN_TYPOGRAPHY[ColorMode.DARK][
        TextDomain.BIO
    ]["color"], "top-level flat colors only describe light mode"


def test_mode_table_color_beats_top_level_legacy() -> None:
    theme = _theme(header_color="#222222", light={"header_color": "#444444"})
    assert resolve_theme(theme).light.typography.header.color == "#444444"


def test_dark_legacy_color_applies_to_dark_only() -> None:
    theme = _theme(dark={"link_title_color": "#abcdef"})
    resolved = resolve_theme(theme)
    assert resolved.dark.typography.link_title.color == "#abcdef"
    assert resolved.light.typography.link_title.color == "#000000"


def test_dark_suffix_overrides_domain_value_in_dark_mode() -> None:
    theme = _theme(typography={"header": {"size": "3rem", "size_dark": "2.5rem"}})
    resolved = resolve_theme(theme)
    assert resolved.light.typography.header.size == "3rem"
    assert resolved.dark.typography.header.size == "2.5rem"


def test_domain_value_applies_to_dark_mode_without_suffix() -> None:
    theme = _theme(typography={"bio": {"style": "italic"}})
    assert resolve_theme(theme).dark.typography.bio.style == "italic"


def test_default_table_fills_unset_domains() -> None:
    theme = _theme(
        typography={
            "default": {"font": "Georgia, serif", "weight_dark": "300"},
            "link_title": {"font": "Inter"},
        }
    )
    resolved = resolve_theme(theme)
    assert resolved.light.typography.header.font == "Georgia, serif"
    assert resolved.light.typography.link_title.font == "Inter"
    assert resolved.dark.typography.bio.weight == "300"
    assert resolved.light.typography.bio.weight == "normal"


def test_empty_font_falls_through() -> None:
    theme = _theme(typography={"header": {"font": ""}, "default": {"font": "Mono"}})
    assert resolve_theme(theme).light.typography.header.font == "Mono"


def test_fields_resolve_independently() -> None:
    theme = _theme(typography={"header": {"color": "#010101"}})
    header = resolve_theme(theme).light.typography.header
    assert header.color == "#010101"
    assert header.size == "2rem", "unset size must still come from the defaults"


def test_theme_colors_cascade() -> None:
    theme = _theme(
        primary_color="#ff0000",
        light={"secondary_color": "#00ff00"},
        dark={"background_color": "#000000"},
    )
    resolved = resolve_theme(theme)
    assert resolved.light.colors.primary == "#ff0000"
    assert resolved.light.colors.secondary == "#00ff00"
    assert resolved.light.colors.background == "#ffffff"
    assert resolved.dark.colors.primary == "#ffffff", (
        "flat theme colors must not leak into dark mode"
    )
    assert resolved.dark.colors.background == "#000000"


def test_each_tier_is_an_independent_accessor() -> None:
    theme = ThemeConfig(
        typography=TypographyConfig(
            default=TypographyStyle(color="#d0d0d0", color_dark="#0d0d0d"),
            header=TypographyStyle(color="#aaaaaa", color_dark="#bbbbbb"),
        ),
        legacy=ThemeColors(header_color="#cccccc"),
    )
    dark = StyleLookup(theme, TextDomain.HEADER, ColorMode.DARK, "color")
    light = StyleLookup(theme, TextDomain.HEADER, ColorMode.LIGHT, "color")

    assert style.domain_mode_override(dark) == "#bbbbbb"
    assert style.domain_value(dark) == "#aaaaaa"
    assert style.default_mode_override(dark) == "#0d0d0d"
    assert style.default_mode_override(light) is None
    assert style.default_value(light) == "#d0d0d0"
    assert style.legacy_color(light) == "#cccccc"
    assert style.legacy_color(dark) is None
    assert style.builtin_typography(light) == "#000000"


def test_resolve_field_walks_custom_cascade_in_order() -> None:
    lookup = StyleLookup(ThemeConfig(), TextDomain.BIO, ColorMode.LIGHT, "size")
    calls: list[str] = []

    def first(_: StyleLookup) -> str | None:
        calls.append("first")
        return None

    def second(_: StyleLookup) -> str | None:
        calls.append("second")
        return "9px"

    def third(_: StyleLookup) -> str | None:  # pragma: no cover - never reached
        calls.append("third")
        return "1px"

    assert resolve_field(lookup, (first, second, third)) == "9px"
    assert calls == ["first", "second"]


def test_missing_builtin_default_raises() -> None:
    lookup = StyleLookup(ThemeConfig(), TextDomain.BIO, ColorMode.LIGHT, "size")
    with pytest.raises(MissingDefaultError):
        resolve_field(lookup, (lambda _: None,))
    with pytest.raises(MissingDefaultError):
        resolve_color(ColorLookup(ThemeConfig(), ColorMode.DARK, "primary"), ())
