"""Behaviour tests for building and validating a genkan site using pytest-bdd.

The scenarios drive :class:`~genkan.builder.SitePageBuilder` and
:func:`~genkan.builder.validate_site` against a config written to a temporary
directory. Image downloads are answered by a ``requests.Session`` mock, so the
scenarios never touch the network and can count every fetch.

Usage
-----
Run ``pytest tests/bdd/test_site_build.py -v``.
"""

from __future__ import annotations

import io
import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest
import requests
from bs4 import BeautifulSoup
from PIL import Image
from pytest_bdd import given, scenarios, then, when

from genkan.assets import AssetPipeline, RemoteImageFetcher
from genkan.builder import SitePageBuilder, ThemeError, validate_site
from genkan.config import load_config

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "site_build.feature"
scenarios(FEATURE_FILE)

AVATAR_URL = "https://images.example.com/avatar.png"
ICON_URL = "https://images.example.com/icon.png"

ScenarioState = dict[str, typ.Any]


def _png(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (10, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


def _write_config(tmp_path: Path, theme: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        dedent(
            f"""
            [profile]
            name = "Grace"
            bio = "Compilers and cobol."
            avatar = "{AVATAR_URL}"

            [theme]
            name = "{theme}"

            [meta]
            title = "Grace"
            description = "Links"

            [[links]]
            title = "Talks"
            url = "https://example.com/talks"
            icon = "{ICON_URL}"

            [[links]]
            title = "Papers"
            url = "https://example.com/papers"
            icon = "{ICON_URL}"
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return path


@given("a site config with a remote avatar and a shared link icon")
def given_site_config(tmp_path: Path, scenario_state: ScenarioState) -> None:
    scenario_state["config_path"] = _write_config(tmp_path, "simple")
    scenario_state["output_dir"] = tmp_path / "output"


@given("a site config that names a missing theme")
def given_missing_theme(tmp_path: Path, scenario_state: ScenarioState) -> None:
    scenario_state["config_path"] = _write_config(tmp_path, "no-such-theme")
    scenario_state["output_dir"] = tmp_path / "output"


@given("image downloads are served from memory")
def given_memory_downloads(
    mocker: MockerFixture, scenario_state: ScenarioState
) -> None:
    """Install a session mock that serves PNGs and records requested URLs."""
    bodies = {AVATAR_URL: _png(900, 600), ICON_URL: _png(300, 300)}
    calls: list[str] = []

    def _get(url: str, **_kwargs: typ.Any) -> typ.Any:
        calls.append(url)
        response = mocker.Mock()
        response.status_code = 200
        response.content = bodies[url]
        return response

    session = mocker.Mock(spec=requests.Session)
    session.get.side_effect = _get
    scenario_state["session"] = session
    scenario_state["calls"] = calls


def _builder(scenario_state: ScenarioState) -> SitePageBuilder:
    config = load_config(typ.cast("Path", scenario_state["config_path"]))
    pipeline = AssetPipeline(
        base_dir=config.base_dir,
        fetcher=RemoteImageFetcher(session=scenario_state["session"]),
    )
    return SitePageBuilder(
        config,
        output_dir=typ.cast("Path", scenario_state["output_dir"]),
        pipeline=pipeline,
    )


@when("I build the site")
def when_build(scenario_state: ScenarioState) -> None:
    scenario_state["written"] = _builder(scenario_state).run()


@when("I validate the site")
def when_validate(scenario_state: ScenarioState) -> None:
    config = load_config(typ.cast("Path", scenario_state["config_path"]))
    scenario_state["report"] = validate_site(config)


@when("I try to build the site")
def when_try_build(scenario_state: ScenarioState) -> None:
    try:
        _builder(scenario_state).run()
    except ThemeError as exc:
        scenario_state["error"] = exc


@then("index.html is written to the output directory")
def then_index_written(scenario_state: ScenarioState) -> None:
    written = typ.cast("Path", scenario_state["written"])
    assert written == scenario_state["output_dir"] / "index.html"
    assert written.is_file(), f"expected {written} to exist"


@then("the avatar is inlined as a data URL")
def then_avatar_inlined(scenario_state: ScenarioState) -> None:
    written = typ.cast("Path", scenario_state["written"])
    soup = BeautifulSoup(written.read_text(encoding="utf-8"), "html.parser")
    avatar = soup.select_one(".avatar--light img")
    assert avatar is not None, "expected an avatar image"
    assert avatar["src"].startswith("data:image/png;base64,")


@then("the shared icon was downloaded once")
def then_icon_once(scenario_state: ScenarioState) -> None:
    calls = typ.cast("list[str]", scenario_state["calls"])
    assert calls.count(ICON_URL) == 1, f"expected one icon fetch, got {calls!r}"


@then("no image was downloaded")
def then_no_downloads(scenario_state: ScenarioState) -> None:
    assert scenario_state["calls"] == []


@then("no output was written")
def then_no_output(scenario_state: ScenarioState) -> None:
    assert not (scenario_state["output_dir"] / "index.html").exists()


@then("the build fails with a theme error")
def then_theme_error(scenario_state: ScenarioState) -> None:
    error = scenario_state.get("error")
    assert isinstance(error, ThemeError), f"expected ThemeError, got {error!r}"
    assert "no-such-theme" in str(error)
