"""Relation code to localized kinship term."""

from enum import Enum
from typing import Sequence

from dictionary import (
    DEFAULT_LANGUAGE,
    AgeRule,
    AgeRuleKind,
    GenderRule,
    NameRule,
    RelationshipDictionary,
    localize,
)
from graph import GraphIndex, IndexNotBuiltError
from models import Gender, Person
from parsing import parse_date

# Uncles/aunts compared against the querying person's parent
DIRECT_UNCLE_CODES = {"FB", "MB", "FZ", "MZ"}
# Spouse's uncles/aunts compared against the spouse's parent
SPOUSE_UNCLE_CODES = {"HFB", "HFZ", "HMB", "HMZ", "WFB", "WFZ", "WMB", "WMZ"}


class AgeOrder(str, Enum):
    OLDER = "older"
    YOUNGER = "younger"
    SAME = "same"


def compare_age(first: Person | None, second: Person | None) -> AgeOrder | None:
    """
    Whether ``first`` is older or younger than ``second`` by birth date.
    None when either date is missing or unparseable.
    """
    if first is None or second is None:
        return None
    first_born = parse_date(first.birth_date)
    second_born = parse_date(second.birth_date)
    if first_born is None or second_born is None:
        return None
    if first_born < second_born:
        return AgeOrder.OLDER
    if first_born > second_born:
        return AgeOrder.YOUNGER
    return AgeOrder.SAME


class TermResolver:
    def __init__(
        self,
        index: GraphIndex,
        dictionary: RelationshipDictionary,
        language: str = DEFAULT_LANGUAGE,
        default_language: str = DEFAULT_LANGUAGE,
    ):
        if not index.built:
            raise IndexNotBuiltError("TermResolver needs a built GraphIndex")
        self.index = index
        self.dictionary = dictionary
        self.language = language
        self.default_language = default_language

    def _text(self, term) -> str | None:
        return localize(term, self.language, self.default_language)

    def resolve(self, code: str, source: Person, target: Person, path: Sequence[str]) -> str:
        rule = self.dictionary.get(code)
        if rule is None:
            return code

        if isinstance(rule, NameRule):
            return self._text(rule.name) or code
        if isinstance(rule, GenderRule):
            gender = self.index.gender_of(target.id)
            if gender is Gender.MALE:
                return self._text(rule.male) or code
            if gender is Gender.FEMALE:
                return self._text(rule.female) or code
            return code
        if isinstance(rule, AgeRule):
            return self._resolve_age(rule, code, source, target, path)
        raise TypeError(f"Unsupported rule for {code!r}: {rule!r}")

    def _resolve_age(
        self, rule: AgeRule, code: str, source: Person, target: Person, path: Sequence[str]
    ) -> str:
        kind = rule.kind
        if kind is AgeRuleKind.PEDDA_CHINNA:
            reference_id = None
            if code in DIRECT_UNCLE_CODES and len(path) >= 2:
                reference_id = path[1]
            elif code in SPOUSE_UNCLE_CODES and len(path) >= 3:
                reference_id = path[2]
            elif len(path) >= 3:
                reference_id = path[-2]
            if reference_id is None:
                return code
            order = compare_age(target, self.index.get_person(reference_id))
            return self._pick(rule, order, code, use_default=False)

        if kind in (AgeRuleKind.SIBLING_CHILD, AgeRuleKind.VADINA_MARADALU):
            if len(path) < 3:
                return code
            order = compare_age(self.index.get_person(path[-2]), source)
            return self._pick(rule, order, code, use_default=False)

        if kind is AgeRuleKind.DIRECT_AGE:
            return self._pick(rule, compare_age(target, source), code, use_default=True)

        if kind is AgeRuleKind.PARENT_AGE_COMPARE:
            if len(path) < 2:
                return code
            order = compare_age(self.index.get_person(path[-2]), source)
            return self._pick(rule, order, code, use_default=True)

        return code

    def _pick(self, rule: AgeRule, order: AgeOrder | None, code: str, use_default: bool) -> str:
        elder = self._text(rule.elder)
        younger = self._text(rule.younger)
        if order is AgeOrder.OLDER:
            return elder or code
        if order is AgeOrder.YOUNGER:
            return younger or code

        # Unknown or equal ages: present both possibilities
        if use_default:
            fallback = self._text(rule.default)
            if fallback:
                return fallback
        if elder and younger:
            return f"{elder}/{younger}"
        return code


def resolve(
    code: str,
    source: Person,
    target: Person,
    path: Sequence[str],
    dictionary: RelationshipDictionary,
    language: str,
    index: GraphIndex,
    default_language: str = DEFAULT_LANGUAGE,
) -> str:
    return TermResolver(index, dictionary, language, default_language).resolve(
        code, source, target, path
    )
