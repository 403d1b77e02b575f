"""
Relationship dictionary: relation code -> term-resolution rule.

Entries arrive as JSON objects of one of three shapes::

    {"name": {"en": "Father", "te": "..."}}
    {"male": {...}, "female": {...}}
    {"ageRule": "direct_age", "elder": {...}, "younger": {...}, "default": {...}}

Every textual value is a per-language map (a bare string is accepted as a
language-neutral term). Entries are parsed once into the rule classes below
and never mutated afterwards.
"""

from dataclasses import dataclass
from enum import Enum
import json
import logging
from pathlib import Path
from typing import Mapping, Union

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "te"

Term = Mapping[str, str]


class DictionaryError(ValueError):
    """A dictionary entry does not match any known rule shape."""


class AgeRuleKind(str, Enum):
    PEDDA_CHINNA = "pedda_chinna"
    SIBLING_CHILD = "sibling_child"
    VADINA_MARADALU = "vadina_maradalu"
    DIRECT_AGE = "direct_age"
    PARENT_AGE_COMPARE = "parent_age_compare"


@dataclass(frozen=True)
class NameRule:
    name: Term


@dataclass(frozen=True)
class GenderRule:
    male: Term | None
    female: Term | None


@dataclass(frozen=True)
class AgeRule:
    kind: AgeRuleKind
    elder: Term | None
    younger: Term | None
    default: Term | None = None


Rule = Union[NameRule, GenderRule, AgeRule]
RelationshipDictionary = dict[str, Rule]


def _term(value) -> Term | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return {"*": value}
    if isinstance(value, Mapping):
        return {str(k): str(v) for k, v in value.items() if v}
    raise DictionaryError(f"Term must be a string or a language map, got {value!r}")


def parse_entry(code: str, entry: Mapping) -> Rule:
    """Classify one raw entry; ``name`` wins over gender terms, which win over age rules."""
    if not isinstance(entry, Mapping):
        raise DictionaryError(f"Entry for {code!r} must be an object")

    if entry.get("name"):
        return NameRule(_term(entry["name"]))

    if entry.get("male") or entry.get("female"):
        return GenderRule(_term(entry.get("male")), _term(entry.get("female")))

    if entry.get("ageRule"):
        try:
            kind = AgeRuleKind(entry["ageRule"])
        except ValueError:
            raise DictionaryError(f"Unknown ageRule {entry['ageRule']!r} for {code!r}") from None
        return AgeRule(
            kind=kind,
            elder=_term(entry.get("pedda") or entry.get("elder")),
            younger=_term(entry.get("chinna") or entry.get("younger")),
            default=_term(entry.get("default")),
        )

    raise DictionaryError(f"Entry for {code!r} has no name, gender or age rule")


def parse_dictionary(raw: Mapping[str, Mapping]) -> RelationshipDictionary:
    return {code: parse_entry(code, entry) for code, entry in raw.items()}


def load_dictionary(path: Path) -> RelationshipDictionary:
    """
    Load the dictionary JSON file. A missing file yields an empty dictionary,
    so every relation surfaces as its raw code.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Relationship dictionary not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    dictionary = parse_dictionary(raw)
    logger.info("Loaded %d relationship terms from %s", len(dictionary), path)
    return dictionary


def localize(term: Term | None, language: str, default_language: str = DEFAULT_LANGUAGE) -> str | None:
    """Pick the active language, then the default language, then a neutral term."""
    if not term:
        return None
    return term.get(language) or term.get(default_language) or term.get("*")
