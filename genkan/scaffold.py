"""Create a starter genkan project directory.

``genkan init`` writes a commented ``config.toml`` covering every section the
loader understands, plus empty ``themes/`` and ``output/`` directories. The
document is built with tomlkit so comments survive later edits.
"""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

import tomlkit
from tomlkit.items import Table

from ._constants import DEFAULT_CONFIG_FILENAME, DEFAULT_IMAGE_SIZES, DEFAULT_THEME


@dc.dataclass(frozen=True, slots=True)
class ScaffoldResult:
    """Paths created by :func:`init_project`."""

    config_path: Path
    directories: tuple[Path, ...]


def _table(values: dict[str, object], *, comment: str | None = None) -> Table:
    table = tomlkit.table()
    if comment:
        table.add(tomlkit.comment(comment))
    for key, value in values.items():
        table[key] = value
    return table


def starter_document() -> tomlkit.TOMLDocument:
    """Return the starter configuration as a tomlkit document."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("genkan site configuration"))
    doc.add(tomlkit.comment("Build with: genkan build --config config.toml"))
    doc.add(tomlkit.nl())

    profile = _table(
        {"name": "Your Name", "bio": "A short line about you."},
        comment="Avatar and icons may be URLs, paths relative to this file, or emoji.",
    )
    profile["light"] = _table({"avatar": "https://github.com/github.png"})
    social = tomlkit.aot()
    social.append(
        _table(
            {
                "icon": "https://cdn.simpleicons.org/github",
                "url": "https://github.com/",
                "title": "GitHub",
            }
        )
    )
    profile["social_links"] = social
    doc["profile"] = profile

    theme = _table({"name": DEFAULT_THEME, "button_style": "rounded"})
    typography = tomlkit.table(is_super_table=True)
    typography["header"] = _table(
        {"size": "2rem", "weight": "700"},
        comment="Any of size, font, weight, style, color; add _dark for dark mode.",
    )
    theme["typography"] = typography
    doc["theme"] = theme

    doc["meta"] = _table(
        {"title": "Your Name", "description": "Links to everything I do."}
    )
    doc["image"] = _table(
        dict(DEFAULT_IMAGE_SIZES),
        comment="Target sizes in pixels; larger images are scaled down.",
    )
    doc["dark_mode"] = _table(
        {"mode": "auto"}, comment="One of auto, light, dark, disable."
    )

    links = tomlkit.aot()
    links.append(
        _table(
            {
                "title": "My Website",
                "url": "https://example.com",
                "icon": "🌐",
                "description": "Personal homepage",
            }
        )
    )
    links.append(_table({"link_type": "space", "height": "16px"}))
    links.append(_table({"title": "Available for work"}))
    doc["links"] = links
    return doc


def init_project(path: Path) -> ScaffoldResult:
    """Write a starter project into ``path``.

    Raises
    ------
    FileExistsError
        If ``path`` already contains a configuration file.
    """
    config_path = path / DEFAULT_CONFIG_FILENAME
    if config_path.exists():
        msg = f"Refusing to overwrite existing configuration '{config_path}'."
        raise FileExistsError(msg)
    directories = (path / "themes", path / "output")
    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)
    config_path.write_text(tomlkit.dumps(starter_document()), encoding="utf-8")
    return ScaffoldResult(config_path=config_path, directories=directories)


__all__ = ["ScaffoldResult", "init_project", "starter_document"]
