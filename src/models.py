"""Data classes for family tree entities."""

from dataclasses import dataclass, field
from enum import Enum


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
    UNKNOWN = "U"


class Step(str, Enum):
    """Elementary relation taken on one hop of a kinship path."""

    FATHER = "F"
    MOTHER = "M"
    SON = "S"
    DAUGHTER = "D"
    CHILD = "C"
    BROTHER = "B"
    SISTER = "Z"
    SIBLING = "Sib"
    HUSBAND = "H"
    WIFE = "W"
    PARTNER = "P"


SELF_CODE = "SELF"


@dataclass
class Person:
    id: str
    name: str
    fid: str | None = None
    mid: str | None = None
    pids: list[str] = field(default_factory=list)
    birth_date: str | None = None  # raw, possibly unparseable
    death_date: str | None = None
    deceased: bool = False
    sex: str | None = None  # explicit M/F when supplied
    image_url: str | None = None
    custom: dict = field(default_factory=dict)


@dataclass
class FamilyRecord:
    husband_id: str | None = None
    wife_id: str | None = None
    children: list[str] = field(default_factory=list)


@dataclass
class RelationPath:
    ids: list[str]
    steps: list[Step]

    @property
    def raw_code(self) -> str:
        if len(self.ids) == 1:
            return SELF_CODE
        return "".join(step.value for step in self.steps)


@dataclass
class RelationResult:
    code: str
    path: list[str]
