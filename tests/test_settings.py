from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from richinput import settings as richinput_settings


def test_defaults() -> None:
    settings = richinput_settings.InputSettings()
    assert settings.enable_mentions
    assert settings.enable_emojis
    assert settings.enable_auto_links
    assert settings.mention_trigger == "@"
    assert settings.emoji_trigger == ":"
    assert settings.max_visible_items == 5
    assert settings.log_level is richinput_settings.LogLevel.info
    assert settings.log_file is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"mention_trigger": "@@"},
        {"mention_trigger": "a"},
        {"emoji_trigger": "-"},
        {"emoji_trigger": " "},
        {"mention_trigger": ":", "emoji_trigger": ":"},
        {"max_visible_items": 0},
    ],
)
def test_invalid_settings(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        richinput_settings.InputSettings(**overrides)
    with pytest.raises(richinput_settings.SettingsError):
        richinput_settings.parse_settings(overrides)


def test_load_yaml_with_section_and_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("RICHINPUT_LOG_DIR", "/var/log/app")
    path = tmp_path / "settings.yaml"
    path.write_text(
        "variables:\n"
        "  VISIBLE: 3\n"
        "richinput:\n"
        "  enable_emojis: false\n"
        "  max_visible_items: ${VISIBLE}\n"
        "  log_level: debug\n"
        "  log_file: ${env:RICHINPUT_LOG_DIR}/input.log\n",
        encoding="utf-8",
    )
    settings = richinput_settings.load_settings(path)
    assert settings.enable_emojis is False
    assert settings.max_visible_items == 3
    assert settings.log_level is richinput_settings.LogLevel.debug
    assert settings.log_file == "/var/log/app/input.log"


def test_load_json_without_section(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"mention_trigger": "#"}), encoding="utf-8")
    settings = richinput_settings.load_settings(path)
    assert settings.mention_trigger == "#"


def test_escaped_and_unknown_placeholders_are_kept() -> None:
    settings = richinput_settings.parse_settings(
        {"log_file": "$${HOME}/${RICHINPUT_SURELY_UNSET_VAR}.log"}
    )
    assert settings.log_file == "${HOME}/${RICHINPUT_SURELY_UNSET_VAR}.log"


def test_load_none_and_empty_documents(tmp_path: Path) -> None:
    assert richinput_settings.load_settings(None) == richinput_settings.InputSettings()
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert richinput_settings.load_settings(path) == richinput_settings.InputSettings()


def test_load_errors(tmp_path: Path) -> None:
    with pytest.raises(richinput_settings.SettingsError):
        richinput_settings.load_settings(tmp_path / "missing.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("richinput: [unclosed\n", encoding="utf-8")
    with pytest.raises(richinput_settings.SettingsError):
        richinput_settings.load_settings(bad)
    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(richinput_settings.SettingsError):
        richinput_settings.load_settings(not_mapping)
