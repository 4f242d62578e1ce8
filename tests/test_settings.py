from __future__ import annotations

import pytest

from infrastructure.settings import DEFAULT_SETTINGS, JsonSettings


def test_partial_file_is_layered_over_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"catalog": {"limit": 50}, "logging": {"level": "DEBUG"}}', encoding="utf-8")
    s = JsonSettings(path)
    assert s.get("catalog.limit") == 50
    assert s.get("catalog.recursive") is True
    assert s.get("logging.level") == "DEBUG"
    assert s.get("preview.max_side") == 2048
    assert s.path == path


def test_missing_keys_return_default(tmp_path) -> None:
    s = JsonSettings(tmp_path / "absent.json", required=False)
    assert s.get("catalog.limit") == DEFAULT_SETTINGS["catalog"]["limit"]
    assert s.get("nope.key", "fallback") == "fallback"
    assert s.get("catalog.limit.deeper") is None


def test_missing_file_when_required(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "absent.json")


def test_non_object_file_is_rejected(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonSettings(path)


def test_defaults_are_not_mutated(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"gesture": {"min_velocity": 1}}', encoding="utf-8")
    JsonSettings(path)
    assert DEFAULT_SETTINGS["gesture"]["min_velocity"] == 500
