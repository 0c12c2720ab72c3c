"""genkan page rendering pipeline.

This module turns a parsed :class:`~genkan.config.RawConfig` into the single
self-contained ``index.html`` artefact. :class:`SitePageBuilder` validates the
links, resolves typography and colors, locates the theme, runs the asset
pipeline, assembles the :class:`~genkan.site.SiteModel`, and renders the
theme's ``style.css`` and ``template.html`` with Jinja2.

Typical usage mirrors the ``genkan build`` command:

>>> from pathlib import Path
>>> from genkan.config import load_config
>>> builder = SitePageBuilder(load_config(Path("config.toml")),
...                           output_dir=Path("output"))  # doctest: +SKIP
>>> builder.run()  # doctest: +SKIP
PosixPath('output/index.html')

Nothing is written until rendering succeeds, so a fatal configuration,
theme, or asset error leaves the output directory untouched. The theme check
happens before any image is fetched.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ._constants import (
    DEFAULT_MAX_FETCHES,
    OUTPUT_FILENAME,
    THEME_SCRIPT,
    THEME_STYLESHEET,
    THEME_TEMPLATE,
)
from .assets import AssetCache, AssetPipeline, ImageRole
from .links import build_links, build_social_links
from .site import SiteModel, assemble_site, plan_assets
from .style import resolve_theme

if typ.TYPE_CHECKING:
    from .config import RawConfig

logger = logging.getLogger(__name__)

BUNDLED_THEMES_DIR = Path(__file__).parent / "themes"


class ThemeError(FileNotFoundError):
    """Raised when the configured theme or one of its required files is missing."""


def theme_search_path(
    base_dir: Path, themes_dir: Path | None = None
) -> tuple[Path, ...]:
    """Return the directories searched for themes, highest priority first."""
    candidates = [
        *([themes_dir] if themes_dir is not None else []),
        base_dir / "themes",
        Path.cwd() / "themes",
        BUNDLED_THEMES_DIR,
    ]
    return tuple(dict.fromkeys(candidates))


def find_theme_path(
    name: str, base_dir: Path, *, themes_dir: Path | None = None
) -> Path:
    """Locate the directory of theme ``name`` and check its required files.

    Parameters
    ----------
    name : str
        ``theme.name`` from the configuration.
    base_dir : Path
        Directory containing the configuration file.
    themes_dir : Path, optional
        Extra directory searched before the defaults.

    Returns
    -------
    Path
        The first matching theme directory.

    Raises
    ------
    ThemeError
        If no directory named ``name`` exists in the search path, or the one
        found lacks ``template.html`` or ``style.css``.
    """
    searched = theme_search_path(base_dir, themes_dir)
    for root in searched:
        candidate = root / name
        if candidate.is_dir():
            break
    else:
        locations = ", ".join(str(root) for root in searched)
        msg = f"Theme '{name}' not found in: {locations}"
        raise ThemeError(msg)
    for required in (THEME_TEMPLATE, THEME_STYLESHEET):
        if not (candidate / required).is_file():
            msg = f"Theme '{name}' is missing required file '{candidate / required}'."
            raise ThemeError(msg)
    return candidate


@dc.dataclass(frozen=True, slots=True)
class ValidationReport:
    """Summary of a successful dry run."""

    theme_path: Path
    link_count: int
    social_count: int


def validate_site(
    config: RawConfig, *, themes_dir: Path | None = None
) -> ValidationReport:
    """Run every configuration and theme check without touching images.

    Raises
    ------
    ConfigError
        If links, social links or typography are invalid.
    ThemeError
        If the theme cannot be found.
    """
    links = build_links(config.links, base_dir=config.base_dir)
    socials = build_social_links(
        config.profile.social_links, base_dir=config.base_dir
    )
    resolve_theme(config.theme)
    theme_path = find_theme_path(
        config.theme.name, config.base_dir, themes_dir=themes_dir
    )
    return ValidationReport(
        theme_path=theme_path, link_count=len(links), social_count=len(socials)
    )


class SitePageBuilder:
    """Render the link page described by a parsed configuration."""

    def __init__(
        self,
        config: RawConfig,
        *,
        output_dir: Path,
        themes_dir: Path | None = None,
        pipeline: AssetPipeline | None = None,
        cache_dir: Path | None = None,
        max_fetches: int = DEFAULT_MAX_FETCHES,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : RawConfig
            Parsed configuration.
        output_dir : Path
            Directory that receives ``index.html``.
        themes_dir : Path, optional
            Extra directory searched for the theme before the defaults.
        pipeline : AssetPipeline, optional
            Preconfigured pipeline; ``cache_dir`` and ``max_fetches`` are
            ignored when one is supplied.
        cache_dir : Path, optional
            Enables the on-disk asset cache rooted here.
        max_fetches : int, optional
            Bound on concurrent image acquisitions.
        """
        self.config = config
        self.output_dir = output_dir
        self.themes_dir = themes_dir
        self._owns_pipeline = pipeline is None
        if pipeline is None:
            image = config.image
            fallbacks = {
                role: value
                for role, value in (
                    (ImageRole.AVATAR, image.avatar_fallback),
                    (ImageRole.FAVICON, image.favicon_fallback),
                )
                if value
            }
            pipeline = AssetPipeline(
                base_dir=config.base_dir,
                cache=AssetCache(cache_dir) if cache_dir is not None else None,
                max_fetches=max_fetches,
                fallbacks=fallbacks,
            )
        self.pipeline = pipeline

    @property
    def output_path(self) -> Path:
        return self.output_dir / OUTPUT_FILENAME

    def build_model(self) -> tuple[SiteModel, Path]:
        """Validate, resolve and embed everything; return the model and theme path."""
        config = self.config
        links = build_links(config.links, base_dir=config.base_dir)
        socials = build_social_links(
            config.profile.social_links, base_dir=config.base_dir
        )
        theme = resolve_theme(config.theme)
        theme_path = find_theme_path(
            config.theme.name, config.base_dir, themes_dir=self.themes_dir
        )
        plan = plan_assets(config, links, socials)
        requests = plan.requests()
        logger.info("Embedding %d image reference(s)", len(requests))
        embedded = self.pipeline.embed_all(requests)
        site = assemble_site(
            config,
            theme=theme,
            links=links,
            socials=socials,
            plan=plan,
            embedded=embedded,
        )
        return site, theme_path

    def render(self, site: SiteModel, theme_path: Path) -> str:
        """Render the theme's stylesheet, script and template for ``site``."""
        env = Environment(
            loader=FileSystemLoader(theme_path),
            autoescape=select_autoescape(["html", "htm"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        context = {
            "site": site,
            "profile": site.profile,
            "theme": site.theme,
            "meta": site.meta,
            "links": site.links,
            "dark_mode": site.dark_mode,
        }
        css = env.get_template(THEME_STYLESHEET).render(**context)
        js = ""
        if (theme_path / THEME_SCRIPT).is_file():
            js = env.get_template(THEME_SCRIPT).render(**context)
        html = env.get_template(THEME_TEMPLATE).render(css=css, js=js, **context)
        if not html.endswith("\n"):
            html += "\n"
        return html

    def run(self) -> Path:
        """Build and write ``index.html``, returning its path.

        Raises
        ------
        ConfigError, ThemeError, AssetCorruptError
            On fatal problems; no output is written in that case.
        """
        try:
            site, theme_path = self.build_model()
        finally:
            if self._owns_pipeline:
                self.pipeline.close()
        html = self.render(site, theme_path)
        output_path = self.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        logger.info("Wrote %s (%d bytes)", output_path, len(html.encode("utf-8")))
        return output_path


__all__ = [
    "BUNDLED_THEMES_DIR",
    "SitePageBuilder",
    "ThemeError",
    "ValidationReport",
    "find_theme_path",
    "theme_search_path",
    "validate_site",
]
