"""Rewriting raw relation codes into their canonical shorthand."""

import re
from typing import Iterable, Sequence

from models import SELF_CODE, Step

# Applied in this order on every pass, until a pass changes nothing.
PARENT_CHILD_RULES = [
    ("FS", "B"),
    ("FD", "Z"),
    ("MS", "B"),
    ("MD", "Z"),
]

# Classificatory kinship: father's brother's and mother's sister's children
# are named as siblings.
PARALLEL_COUSIN_RULES = [
    ("FBS", "B"),
    ("FBD", "Z"),
    ("MZS", "B"),
    ("MZD", "Z"),
]

PARALLEL_GRANDPARENT_RULES = [
    ("FFB", "FF"),
    ("MMZ", "MM"),
    ("MFB", "MF"),
    ("FMZ", "FM"),
]

MAX_PASSES = 1000

DEFAULT_RULES = PARENT_CHILD_RULES + PARALLEL_COUSIN_RULES + PARALLEL_GRANDPARENT_RULES

_TOKEN = re.compile("|".join(sorted((s.value for s in Step), key=len, reverse=True)) + "|.")


def tokenize(code: str) -> list[str]:
    """Split a code into step tokens; 'Sib' stays a single token."""
    return _TOKEN.findall(code)


def _replace_all(tokens: list[str], pattern: Sequence[str], replacement: Sequence[str]) -> list[str]:
    """Non-overlapping left-to-right replacement, like str.replace."""
    out: list[str] = []
    n = len(pattern)
    i = 0
    while i < len(tokens):
        if tokens[i : i + n] == list(pattern):
            out.extend(replacement)
            i += n
        else:
            out.append(tokens[i])
            i += 1
    return out


class CodeNormalizer:
    """
    Collapses parent+child and parallel-sibling patterns in a relation code.

    ``rules`` is an ordered sequence of (pattern, replacement) code pairs; the
    default set models one classificatory kinship convention and can be
    swapped for deployments that name cousins differently.
    """

    def __init__(self, rules: Iterable[tuple[str, str]] | None = None):
        pairs = DEFAULT_RULES if rules is None else list(rules)
        self.rules = [(tokenize(p), tokenize(r)) for p, r in pairs]
        for pattern, _ in self.rules:
            if not pattern:
                raise ValueError("Normalization rule patterns must not be empty")

    def normalize(self, raw_code: str) -> str:
        if not raw_code:
            return ""
        if raw_code == SELF_CODE:
            return raw_code

        tokens = tokenize(raw_code)
        # Default rules only shorten codes; the cap guards custom rule sets
        for _ in range(MAX_PASSES):
            previous = tokens
            for pattern, replacement in self.rules:
                tokens = _replace_all(tokens, pattern, replacement)
            if tokens == previous:
                break
        return "".join(tokens)


_default = CodeNormalizer()


def normalize(raw_code: str) -> str:
    return _default.normalize(raw_code)
