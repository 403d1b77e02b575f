import json

import pytest

from config import LANGUAGE_ENV, load_settings
from pathfinder import MAX_DEPTH


def _write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv(LANGUAGE_ENV, raising=False)
    settings = load_settings()
    assert settings.language == "kn"
    assert settings.default_language == "te"
    assert settings.max_depth == MAX_DEPTH
    assert settings.persons_file is None
    assert settings.normalization_rules is None


def test_paths_resolve_against_config_dir(tmp_path, monkeypatch):
    monkeypatch.delenv(LANGUAGE_ENV, raising=False)
    path = _write_config(
        tmp_path,
        {
            "data_files": {
                "persons": "data/persons.json",
                "relationshipDictionary": "/abs/relationships.json",
            },
            "language": "en",
            "home_person_id": "P001",
            "max_depth": 12,
        },
    )
    settings = load_settings(path)
    assert settings.persons_file == tmp_path / "data" / "persons.json"
    assert str(settings.dictionary_file).endswith("relationships.json")
    assert settings.dictionary_file.is_absolute()
    assert settings.families_file is None
    assert settings.language == "en"
    assert settings.home_person_id == "P001"
    assert settings.max_depth == 12


def test_environment_overrides_language(tmp_path, monkeypatch):
    monkeypatch.setenv(LANGUAGE_ENV, "te")
    settings = load_settings(_write_config(tmp_path, {"language": "en"}))
    assert settings.language == "te"


def test_normalization_rules(tmp_path):
    settings = load_settings(_write_config(tmp_path, {"normalization_rules": [["FS", "B"]]}))
    assert settings.normalization_rules == [("FS", "B")]


def test_malformed_normalization_rules(tmp_path):
    with pytest.raises(ValueError):
        load_settings(_write_config(tmp_path, {"normalization_rules": [["FS"]]}))


def test_empty_normalization_pattern(tmp_path):
    with pytest.raises(ValueError):
        load_settings(_write_config(tmp_path, {"normalization_rules": [["", "X"]]}))
