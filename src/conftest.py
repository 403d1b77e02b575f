"""Shared fixture families and dictionaries."""

import pytest

from dictionary import parse_dictionary
from graph import GraphIndex
from models import FamilyRecord, Person
from relationship import KinshipEngine

#   gf ── gm                         stranger
#    ┌────┼──────┐
#   dad  aunt   uncle
#   (+mom)        │
#   ┌─┴──┐      cousin
#   me  sis
FAMILY_PERSONS = [
    Person(id="gf", name="Narayana Rao Dharmavaram", birth_date="1920-03-04", death_date="1988"),
    Person(id="gm", name="Sita Devi", birth_date="1925-06-12"),
    Person(id="dad", name="Ramesh Kumar", birth_date="1950-07-15"),
    Person(id="aunt", name="Lakshmi", birth_date="1952-01-01", sex="F"),
    Person(id="uncle", name="Suresh Kumar", birth_date="1955-01-20"),
    Person(id="mom", name="Padma Rani", birth_date="1953-09-09"),
    Person(id="me", name="Anand Kumar", birth_date="1980-05-02", sex="M"),
    Person(id="sis", name="Kavya", birth_date="1984-11-30", sex="F"),
    Person(id="cousin", name="Kiran Kumar", birth_date="1982-02-14", sex="M"),
    Person(id="stranger", name="John Smith", sex="M"),
]

FAMILY_RECORDS = [
    FamilyRecord(husband_id="gf", wife_id="gm", children=["dad", "aunt", "uncle"]),
    FamilyRecord(husband_id="dad", wife_id="mom", children=["me", "sis"]),
    FamilyRecord(husband_id="uncle", children=["cousin"]),
]

RAW_DICTIONARY = {
    "F": {"name": {"en": "Father", "te": "నాన్న", "kn": "ಅಪ್ಪ"}},
    "M": {"name": {"en": "Mother", "te": "అమ్మ"}},
    "FF": {"name": {"en": "Grandfather"}},
    "FM": {"name": {"en": "Grandmother"}},
    "S": {"name": {"en": "Son"}},
    "D": {"name": {"en": "Daughter"}},
    "SS": {"name": {"en": "Grandson"}},
    "B": {
        "ageRule": "direct_age",
        "elder": {"en": "Elder Brother", "te": "అన్న"},
        "younger": {"en": "Younger Brother", "te": "తమ్ముడు"},
        "default": {"en": "Brother"},
    },
    "Z": {
        "ageRule": "direct_age",
        "elder": {"en": "Elder Sister", "te": "అక్క", "kn": "ಅಕ್ಕ"},
        "younger": {"en": "Younger Sister", "te": "చెల్లి", "kn": "ತಂಗಿ"},
    },
    "FB": {
        "ageRule": "pedda_chinna",
        "pedda": {"en": "Elder Uncle", "te": "పెదనాన్న"},
        "chinna": {"en": "Younger Uncle", "te": "బాబాయి"},
    },
    "FZ": {"male": {"en": "Uncle"}, "female": {"en": "Aunt"}},
}


@pytest.fixture
def family_index() -> GraphIndex:
    return GraphIndex.build(FAMILY_PERSONS, FAMILY_RECORDS)


@pytest.fixture
def dictionary():
    return parse_dictionary(RAW_DICTIONARY)


@pytest.fixture
def engine(family_index, dictionary) -> KinshipEngine:
    return KinshipEngine(family_index, dictionary, language="en", home_id="me")


@pytest.fixture
def abc_index() -> GraphIndex:
    """A (father) and B (mother) married, with one child C."""
    return GraphIndex.build(
        [
            Person(id="A", name="Arjun Rao"),
            Person(id="B", name="Bhavani Rao"),
            Person(id="C", name="Chaitanya Rao"),
        ],
        [FamilyRecord(husband_id="A", wife_id="B", children=["C"])],
    )
