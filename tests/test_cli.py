"""Tests for the ``genkan`` command functions and project scaffolding."""

from __future__ import annotations

import tomllib
import typing as typ

import pytest

from genkan import cli
from genkan.assets import AssetCorruptError
from genkan.builder import ThemeError
from genkan.config import ConfigError, load_config
from genkan.scaffold import init_project

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from pytest_mock import MockerFixture


def test_init_writes_loadable_config(tmp_path: Path) -> None:
    result = init_project(tmp_path / "site")

    assert result.config_path.is_file()
    assert (tmp_path / "site" / "themes").is_dir()
    assert (tmp_path / "site" / "output").is_dir()
    text = result.config_path.read_text(encoding="utf-8")
    assert text.startswith("# genkan site configuration"), "starter file is commented"

    config = load_config(result.config_path)
    assert config.profile.name == "Your Name"
    assert config.dark_mode.mode == "auto"
    assert [link.link_type for link in config.links] == [None, "space", None]
    assert config.theme.typography.header.size == "2rem"
    assert tomllib.loads(text)["image"]["avatar_size"] == 512


def test_init_refuses_to_overwrite(tmp_path: Path) -> None:
    existing = tmp_path / "config.toml"
    existing.write_text("# mine\n", encoding="utf-8")
    with pytest.raises(FileExistsError, match="Refusing to overwrite"):
        init_project(tmp_path)
    assert existing.read_text(encoding="utf-8") == "# mine\n"


def test_init_command_reports_paths(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.init(tmp_path)
    out = capsys.readouterr().out
    assert "wrote" in out
    assert "config.toml" in out
    assert out.count("created") == 2


def test_validate_command_makes_no_requests(
    write_config: cabc.Callable[..., Path],
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    get = mocker.patch("requests.Session.get")
    path = write_config(
        """
        [profile]
        name = "Ada"
        avatar = "https://cdn.example.com/avatar.png"

        [meta]
        title = "t"
        description = "d"

        [[links]]
        title = "a"
        icon = "https://cdn.example.com/a.png"
        """
    )
    cli.validate(config=path)
    get.assert_not_called()
    assert "ok: 1 link(s)" in capsys.readouterr().out


def test_validate_reports_missing_theme(
    write_config: cabc.Callable[..., Path],
) -> None:
    path = write_config(
        """
        [profile]
        name = "Ada"

        [theme]
        name = "does-not-exist"

        [meta]
        title = "t"
        description = "d"

        [[links]]
        title = "a"
        """
    )
    with pytest.raises(ThemeError, match="does-not-exist"):
        cli.validate(config=path)


def test_validate_reports_space_with_url(
    write_config: cabc.Callable[..., Path],
) -> None:
    path = write_config(
        """
        [profile]
        name = "Ada"

        [meta]
        title = "t"
        description = "d"

        [[links]]
        link_type = "space"
        height = "8px"
        url = "https://example.com"
        """
    )
    with pytest.raises(ConfigError, match=r"links\[0\]\.url"):
        cli.validate(config=path)


def test_build_command_writes_index(
    write_config: cabc.Callable[..., Path],
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    output = tmp_path / "public"
    cli.build(config=write_config(), output=output)
    assert (output / "index.html").is_file()
    assert "wrote" in capsys.readouterr().out


def test_build_leaves_no_output_on_local_corrupt_image(
    write_config: cabc.Callable[..., Path], tmp_path: Path
) -> None:
    (tmp_path / "avatar.png").write_bytes(b"\x89PNG\r\n\x1a\ngarbage")
    path = write_config(
        """
        [profile]
        name = "Ada"
        avatar = "avatar.png"

        [meta]
        title = "t"
        description = "d"

        [[links]]
        title = "a"
        """
    )
    output = tmp_path / "public"
    with pytest.raises(AssetCorruptError, match="could not be decoded"):
        cli.build(config=path, output=output)
    assert not (output / "index.html").exists()


def test_format_path_is_cwd_relative(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert cli._format_path(tmp_path / "output" / "index.html") == "output/index.html"
