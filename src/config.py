"""
Settings loaded from a JSON config file.

Example::

    {
        "data_files": {
            "persons": "data/persons.json",
            "families": "data/families.json",
            "relationshipDictionary": "data/relationships.json"
        },
        "language": "kn",
        "default_language": "te",
        "home_person_id": "P001",
        "normalization_rules": [["FS", "B"], ["FD", "Z"]]
    }

Relative paths are resolved against the config file's directory. The
``VAMSHA_LANGUAGE`` environment variable overrides ``language``.
"""

from dataclasses import dataclass
import json
import os
from pathlib import Path

from dictionary import DEFAULT_LANGUAGE
from graph import MAX_GENDER_PASSES
from images import REDRAW_DELAY
from normalization import CodeNormalizer
from pathfinder import MAX_DEPTH

LANGUAGE_ENV = "VAMSHA_LANGUAGE"


@dataclass
class Settings:
    persons_file: Path | None = None
    families_file: Path | None = None
    dictionary_file: Path | None = None
    gedcom_file: Path | None = None
    language: str = "kn"
    default_language: str = DEFAULT_LANGUAGE
    home_person_id: str | None = None
    max_depth: int = MAX_DEPTH
    max_gender_passes: int = MAX_GENDER_PASSES
    normalization_rules: list[tuple[str, str]] | None = None
    image_base_dir: Path | None = None
    redraw_delay: float = REDRAW_DELAY


def _path(base: Path, value) -> Path | None:
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else base / path


def load_settings(config_path: Path | None = None) -> Settings:
    """Read settings from ``config_path``; defaults when no file is given."""
    raw: dict = {}
    base = Path.cwd()
    if config_path is not None:
        config_path = Path(config_path)
        with config_path.open(encoding="utf-8") as f:
            raw = json.load(f)
        base = config_path.parent

    files = raw.get("data_files", {})
    rules = raw.get("normalization_rules")
    if rules is not None:
        if not all(isinstance(r, (list, tuple)) and len(r) == 2 for r in rules):
            raise ValueError("normalization_rules must be a list of [pattern, replacement] pairs")
        rules = [(str(p), str(r)) for p, r in rules]
        CodeNormalizer(rules)  # rejects empty patterns

    settings = Settings(
        persons_file=_path(base, files.get("persons")),
        families_file=_path(base, files.get("families")),
        dictionary_file=_path(base, files.get("relationshipDictionary")),
        gedcom_file=_path(base, files.get("gedcom")),
        language=raw.get("language", Settings.language),
        default_language=raw.get("default_language", Settings.default_language),
        home_person_id=raw.get("home_person_id"),
        max_depth=int(raw.get("max_depth", MAX_DEPTH)),
        max_gender_passes=int(raw.get("max_gender_passes", MAX_GENDER_PASSES)),
        normalization_rules=rules,
        image_base_dir=_path(base, raw.get("image_base_dir")),
        redraw_delay=float(raw.get("redraw_delay", REDRAW_DELAY)),
    )

    if os.environ.get(LANGUAGE_ENV):
        settings.language = os.environ[LANGUAGE_ENV]

    return settings
