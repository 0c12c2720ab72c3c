"""Cyclopts CLI entrypoint for building genkan link pages.

The ``genkan`` console script defined here renders a single self-contained
``index.html`` from a TOML description of a profile, its links and a theme.
``genkan validate`` checks the configuration and theme without fetching any
images, and ``genkan init`` scaffolds a starter project.

Every option can also be supplied through a ``GENKAN_*`` environment variable.

Examples
--------
Build the page described by ``config.toml`` into ``output/``:

>>> from genkan.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory with the asset cache enabled:

>>> from genkan.cli import app
>>> app(
...     ["build", "--output", "dist", "--cache-dir", ".genkan-cache"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_FILENAME, DEFAULT_MAX_FETCHES
from .builder import SitePageBuilder, validate_site
from .config import load_config
from .logging_setup import configure_logging
from .scaffold import init_project

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_FILENAME)
DEFAULT_OUTPUT = Path("output")

app = App(name="genkan", config=cyclopts.config.Env("GENKAN_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render the link page into a single index.html.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="GENKAN_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path, Parameter(help="Output directory", env_var="GENKAN_OUTPUT")
    ] = DEFAULT_OUTPUT,
    cache_dir: typ.Annotated[
        Path | None,
        Parameter(
            help="Reuse fetched and resized images across builds",
            env_var="GENKAN_CACHE_DIR",
        ),
    ] = None,
    max_fetches: typ.Annotated[
        int,
        Parameter(
            help="Maximum concurrent image downloads", env_var="GENKAN_MAX_FETCHES"
        ),
    ] = DEFAULT_MAX_FETCHES,
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug detail", env_var="GENKAN_VERBOSE")
    ] = False,
) -> None:
    """Build the page and print the path written.

    Parameters
    ----------
    config : Path, optional
        TOML configuration file; relative image paths resolve against its
        directory.
    output : Path, optional
        Directory that receives ``index.html``.
    cache_dir : Path or None, optional
        Root of the on-disk asset cache. Caching is off when omitted.
    max_fetches : int, optional
        Bound on simultaneous image acquisitions.
    verbose : bool, optional
        Enable ``DEBUG`` logging.

    Raises
    ------
    ConfigError
        If the configuration is malformed.
    ThemeError
        If the theme or its required files are missing.
    AssetCorruptError
        If a local image file cannot be decoded.
    """
    configure_logging(verbose=verbose)
    site_config = load_config(config)
    builder = SitePageBuilder(
        site_config,
        output_dir=output,
        cache_dir=cache_dir,
        max_fetches=max_fetches,
    )
    written = builder.run()
    print(f"wrote {_format_path(written)}")


@app.command(help="Check the configuration and theme without fetching images.")
def validate(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="GENKAN_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Load ``config`` and run link, typography and theme checks."""
    configure_logging()
    report = validate_site(load_config(config))
    print(
        f"ok: {report.link_count} link(s), {report.social_count} social link(s), "
        f"theme {_format_path(report.theme_path)}"
    )


@app.command(help="Create a starter config.toml with themes/ and output/ folders.")
def init(
    path: typ.Annotated[
        Path, Parameter(help="Project directory to initialise")
    ] = Path(),
) -> None:
    """Scaffold a new project in ``path``; an existing config is never replaced."""
    result = init_project(path)
    print(f"wrote {_format_path(result.config_path)}")
    for directory in result.directories:
        print(f"created {_format_path(directory)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``genkan`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
