from __future__ import annotations

import json

from clipshelf.settings import AppSettings, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(str(tmp_path / "missing.json")) == AppSettings()


def test_unreadable_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")
    assert load_settings(str(path)) == AppSettings()


def test_non_object_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(str(path)) == AppSettings()


def test_values_are_read_and_normalized(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"log_level": "debug", "show_panel_on_start": False, "tray_enabled": False}),
        encoding="utf-8",
    )
    assert load_settings(str(path)) == AppSettings(
        log_level="DEBUG",
        show_panel_on_start=False,
        tray_enabled=False,
    )


def test_unknown_log_level_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "verbose"}), encoding="utf-8")
    assert load_settings(str(path)).log_level == "WARNING"


def test_save_then_load(tmp_path):
    path = str(tmp_path / "nested" / "config.json")
    settings = AppSettings(log_level="INFO", show_panel_on_start=False, tray_enabled=True)
    save_settings(settings, path)
    assert load_settings(path) == settings


def test_non_boolean_flags_fall_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"show_panel_on_start": "false", "tray_enabled": 0}),
        encoding="utf-8",
    )
    settings = load_settings(str(path))
    assert settings.show_panel_on_start is True
    assert settings.tray_enabled is True
