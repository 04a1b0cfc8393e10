from pathlib import Path

import pytest

from cyoa.presentation.cli.config import CliConfig, config_path, load_config, save_config


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "config.json") == CliConfig()


def test_corrupt_config_returns_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_config(path) == CliConfig()

    path.write_text("[1, 2]", encoding="utf-8")
    assert load_config(path) == CliConfig()


def test_config_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.json"

    written = save_config(CliConfig(stories_dir="/srv/stories", show_state=True), path)

    assert written == path
    assert load_config(path) == CliConfig(stories_dir="/srv/stories", show_state=True)
    assert [entry.name for entry in path.parent.iterdir()] == ["config.json"]


def test_invalid_values_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"stories_dir": 5, "show_state": "yes", "unknown": 1}', encoding="utf-8")

    assert load_config(path) == CliConfig()


def test_blank_stories_dir_is_dropped_on_save(tmp_path: Path) -> None:
    path = tmp_path / "config.json"

    save_config(CliConfig(stories_dir="   "), path)

    assert load_config(path).stories_dir is None


def test_config_path_prefers_environment_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CYOA_CONFIG", str(tmp_path / "custom.json"))
    assert config_path() == tmp_path / "custom.json"


def test_config_path_uses_xdg_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CYOA_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config_path() == tmp_path / "cyoa" / "config.json"

    monkeypatch.delenv("XDG_CONFIG_HOME")
    assert config_path() == Path.home() / ".config" / "cyoa" / "config.json"
