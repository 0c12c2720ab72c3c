"""Utility helpers shared by the genkan configuration loader."""

from __future__ import annotations

import typing as typ

from .models import (
    TYPOGRAPHY_FIELDS,
    ColorMode,
    ConfigError,
    TextDomain,
    ThemeColors,
    ThemeConfig,
    TypographyConfig,
    TypographyStyle,
)

TYPOGRAPHY_TABLES = ("default", *(domain.value for domain in TextDomain))
TYPOGRAPHY_KEYS = frozenset(
    (*TYPOGRAPHY_FIELDS, *(f"{field}_{ColorMode.DARK}" for field in TYPOGRAPHY_FIELDS))
)
COLOR_KEYS = frozenset(
    f"{name}_color"
    for name in (
        "primary",
        "secondary",
        "background",
        *(domain.value for domain in TextDomain),
    )
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _style_value(value: object | None) -> str | None:
    """Return a typography value as text, keeping empty strings intact."""
    match value:
        case None:
            return None
        case str() as text:
            return text.strip()
        case bool():
            return str(value).lower()
        case _:
            return str(value)


def _as_mapping(value: object | None, key: str) -> dict[str, typ.Any]:
    """Return ``value`` as a dict, treating a missing table as empty."""
    match value:
        case None:
            return {}
        case dict() as data:
            return dict(data)
        case _:
            msg = f"Configuration key '{key}' must be a table."
            raise ConfigError(msg)


def _positive_int(value: object, key: str) -> int:
    """Return ``value`` as a positive integer or raise ConfigError."""
    if isinstance(value, bool):
        msg = f"Configuration key '{key}' must be a positive integer."
        raise ConfigError(msg)
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"Configuration key '{key}' must be a positive integer."
        raise ConfigError(msg) from exc
    if number <= 0:
        msg = f"Configuration key '{key}' must be a positive integer."
        raise ConfigError(msg)
    return number


def _build_typography_style(
    payload: typ.Mapping[str, typ.Any], key: str
) -> TypographyStyle:
    """Build one typography entry, rejecting unknown fields and mode suffixes."""
    for field in payload:
        if field not in TYPOGRAPHY_KEYS:
            msg = (
                f"Unknown typography field '{key}.{field}'. Expected one of "
                f"{', '.join(sorted(TYPOGRAPHY_KEYS))}."
            )
            raise ConfigError(msg)
    return TypographyStyle(
        **{field: _style_value(value) for field, value in payload.items()}
    )


def _build_typography(payload: typ.Mapping[str, typ.Any]) -> TypographyConfig:
    """Build the typography table, rejecting unknown text domains."""
    tables: dict[str, TypographyStyle] = {}
    for name, entry in payload.items():
        key = f"theme.typography.{name}"
        if name not in TYPOGRAPHY_TABLES:
            msg = (
                f"Unknown typography domain '{key}'. Expected one of "
                f"{', '.join(TYPOGRAPHY_TABLES)}."
            )
            raise ConfigError(msg)
        tables[name] = _build_typography_style(_as_mapping(entry, key), key)
    return TypographyConfig(**tables)


def _build_theme_colors(
    payload: typ.Mapping[str, typ.Any], key: str, *, strict: bool = True
) -> ThemeColors:
    """Build a flat color table; unknown keys are errors when ``strict``."""
    values: dict[str, str | None] = {}
    for name, value in payload.items():
        if name in COLOR_KEYS:
            values[name] = _optional_str(value)
        elif strict:
            msg = f"Unknown color field '{key}.{name}'."
            raise ConfigError(msg)
    return ThemeColors(**values)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig from the ``[theme]`` table."""
    base = ThemeConfig()
    for name, value in payload.items():
        if isinstance(value, dict) and name not in ("typography", *ColorMode):
            msg = (
                f"Unknown theme table 'theme.{name}'. Expected 'theme.light', "
                "'theme.dark' or 'theme.typography'."
            )
            raise ConfigError(msg)
    return ThemeConfig(
        name=_optional_str(payload.get("name")) or base.name,
        button_style=_optional_str(payload.get("button_style")) or base.button_style,
        font_family=_optional_str(payload.get("font_family")) or base.font_family,
        link_spacing=_optional_str(payload.get("link_spacing")) or base.link_spacing,
        typography=_build_typography(
            _as_mapping(payload.get("typography"), "theme.typography")
        ),
        light=_build_theme_colors(
            _as_mapping(payload.get("light"), "theme.light"), "theme.light"
        ),
        dark=_build_theme_colors(
            _as_mapping(payload.get("dark"), "theme.dark"), "theme.dark"
        ),
        legacy=_build_theme_colors(payload, "theme", strict=False),
    )


__all__ = [
    "COLOR_KEYS",
    "TYPOGRAPHY_KEYS",
    "TYPOGRAPHY_TABLES",
    "_as_mapping",
    "_build_theme_colors",
    "_build_theme_config",
    "_build_typography",
    "_build_typography_style",
    "_optional_str",
    "_positive_int",
    "_style_value",
]
