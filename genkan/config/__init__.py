"""Load and validate the TOML site description for a genkan build.

This subpackage parses ``config.toml``, applies defaults, and produces frozen
dataclasses (:class:`RawConfig`, :class:`ThemeConfig`, etc.) that the style
resolver, asset pipeline, and link builder consume. The primary entry point is
:func:`load_config`; :func:`parse_config` accepts an already deserialized
mapping.

Examples
--------
>>> from pathlib import Path
>>> from genkan.config import load_config
>>> config = load_config(Path("config.toml"))  # doctest: +SKIP
>>> config.image.avatar_size  # doctest: +SKIP
512
"""

from .loader import load_config, parse_config
from .models import (
    THEME_COLOR_NAMES,
    TYPOGRAPHY_FIELDS,
    ColorMode,
    ConfigError,
    DarkModeConfig,
    ImageSettings,
    LinkConfig,
    MetaConfig,
    ProfileAssets,
    ProfileConfig,
    RawConfig,
    SocialLinkConfig,
    TextDomain,
    ThemeColors,
    ThemeConfig,
    TypographyConfig,
    TypographyStyle,
)

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
    "load_config",
    "parse_config",
]
