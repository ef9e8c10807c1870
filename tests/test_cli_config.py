from __future__ import annotations

from pathlib import Path

import pytest

from ethershift.presentation.cli import config


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv(config.HOME_ENV_VAR, str(tmp_path))
    return tmp_path


def test_paths_follow_the_home_override(home: Path) -> None:
    assert config.get_user_data_dir() == home
    assert config.get_default_config_path() == home / "config.json"
    assert config.get_save_dir() == home / "saves"


def test_missing_config_returns_defaults(home: Path) -> None:
    assert config.load_config() == {"seed": None, "log_level": "WARNING"}


def test_save_then_load_normalizes_values(home: Path) -> None:
    config.save_config({"seed": 1234, "log_level": "debug"})

    assert config.load_config() == {"seed": 1234, "log_level": "DEBUG"}


def test_invalid_values_fall_back_to_defaults(home: Path) -> None:
    (home / "config.json").write_text('{"seed": "abc", "log_level": "LOUD"}', encoding="utf-8")

    assert config.load_config() == {"seed": None, "log_level": "WARNING"}


def test_unreadable_config_is_ignored(home: Path) -> None:
    (home / "config.json").write_text("{ nope", encoding="utf-8")

    assert config.load_config() == {"seed": None, "log_level": "WARNING"}
