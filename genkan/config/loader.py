"""Load site configuration TOML into typed dataclasses."""

from __future__ import annotations

import tomllib
import typing as typ
from pathlib import Path

from genkan._constants import DARK_MODE_CHOICES

from .helpers import (
    _as_mapping,
    _build_theme_config,
    _optional_str,
    _positive_int,
)
from .models import (
    ConfigError,
    DarkModeConfig,
    ImageSettings,
    LinkConfig,
    MetaConfig,
    ProfileAssets,
    ProfileConfig,
    RawConfig,
    SocialLinkConfig,
)

LINK_KEYS = frozenset(("title", "url", "icon", "description", "link_type", "height"))


def load_config(path: Path) -> RawConfig:
    """Load the TOML configuration describing one link page.

    Parameters
    ----------
    path : Path
        Filesystem path to the TOML configuration file (for example,
        ``config.toml``). Relative asset paths are later resolved against this
        file's directory.

    Returns
    -------
    RawConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If the TOML cannot be parsed or a section is missing or malformed.

    Examples
    --------
    >>> from pathlib import Path
    >>> from genkan.config import load_config
    >>> config = load_config(Path("config.toml"))  # doctest: +SKIP
    >>> config.profile.name  # doctest: +SKIP
    'Your Name'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        with path.open("rb") as handle:
            loaded = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse TOML in '{path}': {exc}"
        raise ConfigError(msg) from exc
    return parse_config(loaded, base_dir=path.resolve().parent)


def parse_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> RawConfig:
    """Build a RawConfig from an already deserialized mapping."""
    profile = _build_profile_config(_as_mapping(raw.get("profile"), "profile"))
    theme = _build_theme_config(_as_mapping(raw.get("theme"), "theme"))
    meta = _build_meta_config(_as_mapping(raw.get("meta"), "meta"))
    links = _build_link_configs(raw.get("links"))
    dark_mode = _build_dark_mode(_as_mapping(raw.get("dark_mode"), "dark_mode"))
    image = _build_image_settings(_as_mapping(raw.get("image"), "image"))
    return RawConfig(
        profile=profile,
        theme=theme,
        meta=meta,
        links=links,
        dark_mode=dark_mode,
        image=image,
        base_dir=base_dir or Path.cwd(),
    )


def _build_profile_config(payload: typ.Mapping[str, typ.Any]) -> ProfileConfig:
    """Build the profile section; a flat ``avatar`` feeds the light variant."""
    name = _optional_str(payload.get("name"))
    if not name:
        msg = "Configuration key 'profile.name' cannot be empty."
        raise ConfigError(msg)
    legacy_avatar = _optional_str(payload.get("avatar"))
    light = _build_profile_assets(
        _as_mapping(payload.get("light"), "profile.light"), legacy_avatar
    )
    dark = _build_profile_assets(
        _as_mapping(payload.get("dark"), "profile.dark"), None
    )
    return ProfileConfig(
        name=name,
        bio=str(payload.get("bio") or ""),
        light=light,
        dark=dark,
        social_links=_build_social_links(payload.get("social_links")),
    )


def _build_profile_assets(
    payload: typ.Mapping[str, typ.Any], fallback_avatar: str | None
) -> ProfileAssets:
    """Build the per-mode profile assets table."""
    return ProfileAssets(
        avatar=_optional_str(payload.get("avatar")) or fallback_avatar,
        background=_optional_str(payload.get("background")),
        background_image=_optional_str(payload.get("background_image")),
    )


def _build_social_links(entries: object | None) -> tuple[SocialLinkConfig, ...]:
    """Collect ``profile.social_links`` entries without validating them."""
    match entries:
        case None:
            return ()
        case list() as items:
            pass
        case _:
            msg = "Configuration key 'profile.social_links' must be an array."
            raise ConfigError(msg)
    links: list[SocialLinkConfig] = []
    for idx, entry in enumerate(items):
        data = _as_mapping(entry, f"profile.social_links[{idx}]")
        links.append(
            SocialLinkConfig(
                icon=_optional_str(data.get("icon")),
                url=_optional_str(data.get("url")),
                title=_optional_str(data.get("title")),
            )
        )
    return tuple(links)


def _build_meta_config(payload: typ.Mapping[str, typ.Any]) -> MetaConfig:
    """Build the meta section; ``title`` and ``description`` are required."""
    for key in ("title", "description"):
        if payload.get(key) is None:
            msg = f"Configuration key 'meta.{key}' is required."
            raise ConfigError(msg)
    show_footer = payload.get("show_footer", True)
    if not isinstance(show_footer, bool):
        msg = "Configuration key 'meta.show_footer' must be a boolean."
        raise ConfigError(msg)
    return MetaConfig(
        title=str(payload["title"]),
        description=str(payload["description"]),
        page_url=_optional_str(payload.get("page_url")),
        favicon=_optional_str(payload.get("favicon")),
        custom_css=_optional_str(payload.get("custom_css")),
        analytics=_optional_str(payload.get("analytics")),
        show_footer=show_footer,
        share_title=_optional_str(payload.get("share_title")),
    )


def _build_link_configs(entries: object | None) -> tuple[LinkConfig, ...]:
    """Collect ``[[links]]`` entries in declaration order."""
    match entries:
        case None:
            return ()
        case list() as items:
            pass
        case _:
            msg = "Configuration key 'links' must be an array of tables."
            raise ConfigError(msg)
    links: list[LinkConfig] = []
    for idx, entry in enumerate(items):
        data = _as_mapping(entry, f"links[{idx}]")
        unknown = sorted(set(data) - LINK_KEYS)
        if unknown:
            msg = f"Unknown key 'links[{idx}].{unknown[0]}'."
            raise ConfigError(msg)
        links.append(
            LinkConfig(
                index=idx,
                title=_optional_str(data.get("title")),
                url=_optional_str(data.get("url")),
                icon=_optional_str(data.get("icon")),
                description=_optional_str(data.get("description")),
                link_type=_optional_str(data.get("link_type")),
                height=_optional_str(data.get("height")),
                declared=frozenset(data),
            )
        )
    return tuple(links)


def _build_dark_mode(payload: typ.Mapping[str, typ.Any]) -> DarkModeConfig:
    """Build the dark mode section and validate the chosen mode."""
    mode = (_optional_str(payload.get("mode")) or DarkModeConfig().mode).lower()
    if mode not in DARK_MODE_CHOICES:
        msg = (
            f"Invalid 'dark_mode.mode' value '{payload.get('mode')}'. Must be "
            f"one of {', '.join(DARK_MODE_CHOICES)}."
        )
        raise ConfigError(msg)
    return DarkModeConfig(mode=mode)


def _build_image_settings(payload: typ.Mapping[str, typ.Any]) -> ImageSettings:
    """Build the image section, requiring positive target sizes."""
    base = ImageSettings()
    sizes = {
        key: _positive_int(payload.get(key, getattr(base, key)), f"image.{key}")
        for key in (
            "avatar_size",
            "link_icon_size",
            "social_icon_size",
            "favicon_size",
        )
    }
    return ImageSettings(
        **sizes,
        avatar_fallback=_optional_str(payload.get("avatar_fallback")),
        favicon_fallback=_optional_str(payload.get("favicon_fallback")),
    )


__all__ = ["load_config", "parse_config"]
