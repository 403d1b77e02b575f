"""Input record adapters, GEDCOM import and date handling utilities."""

from datetime import date
from pathlib import Path
import re

from ged4py import GedcomReader

from models import FamilyRecord, Person


# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

TRUTHY = {"true", "1", "yes", "y"}

_QUALIFIERS = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*"
)
_ISO = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})$")
_DAY_MONTH_NAME_YEAR = re.compile(r"^(\d{1,2})[-/.\s]*([A-Z]+)\.?[-/.,\s]*(\d{4}|\d{2})$")
_NUMERIC = re.compile(r"^(\d{1,2})[-/.\s]+(\d{1,2})[-/.\s]+(\d{4}|\d{2})$")
_MONTH_NAME_YEAR = re.compile(r"^([A-Z]+)\.?,?\s*(\d{4})$")
_MONTH_NAME_DAY_YEAR = re.compile(r"^([A-Z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$")


def _expand_year(raw: str) -> int:
    """Two-digit years pivot ten years past the current year."""
    year = int(raw)
    if len(raw) > 2:
        return year
    pivot = date.today().year % 100 + 10
    return 1900 + year if year > pivot else 2000 + year


def _safe_date(year: int, month: int | None, day: int) -> date | None:
    if not month:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(date_str: str | None) -> date | None:
    """
    Parse a free-form birth/death date string into a date.
    Returns None if the date cannot be parsed.

    Handles formats like:
    - "1980-01-01", "1980-1-1", "1980/01/01", "1746-00-00"
    - "01-JAN-1980", "01-JAN-80", "25 NOV 1954", "02 May1838", "11 Aug. 1968"
    - "15-08-1947", "15/08/1947" (day first, month first when the day is > 12)
    - "NOV 1954", "May, 1837"
    - "April 17, 1850", "SEPT. 17,1910"
    - "1698", "ABOUT 1905", "(Abt.  1798)", "(1789?)"
    """
    if not date_str:
        return None

    s = str(date_str).strip().upper()
    s = s.strip("()")
    s = s.rstrip("?")
    s = _QUALIFIERS.sub("", s).strip()

    if not s:
        return None

    match = _ISO.match(s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        # 00 month/day are placeholders for "unknown"
        return _safe_date(year, month or 1, day or 1)

    if re.match(r"^\d{4}$", s):
        return date(int(s), 1, 1)

    match = _DAY_MONTH_NAME_YEAR.match(s)
    if match:
        return _safe_date(
            _expand_year(match.group(3)), MONTH_MAP.get(match.group(2)), int(match.group(1))
        )

    match = _NUMERIC.match(s)
    if match:
        first, second = int(match.group(1)), int(match.group(2))
        year = _expand_year(match.group(3))
        if second > 12 and first <= 12:
            first, second = second, first
        return _safe_date(year, second if 1 <= second <= 12 else None, first)

    match = _MONTH_NAME_YEAR.match(s)
    if match:
        return _safe_date(int(match.group(2)), MONTH_MAP.get(match.group(1)), 1)

    match = _MONTH_NAME_DAY_YEAR.match(s)
    if match:
        return _safe_date(
            int(match.group(3)), MONTH_MAP.get(match.group(1)), int(match.group(2))
        )

    return None


def is_truthy(value) -> bool:
    if value is True:
        return True
    return str(value or "").strip().lower() in TRUTHY


def normalize_sex(value) -> str | None:
    """Map free-form sex values onto M/F, anything else is unknown."""
    text = str(value or "").strip().upper()
    if text in ("M", "MALE"):
        return "M"
    if text in ("F", "FEMALE"):
        return "F"
    return None


def _clean_id(value) -> str | None:
    text = str(value).strip() if value is not None else ""
    return text or None


def person_from_record(record: dict) -> Person:
    """
    Build a Person from a raw record.

    Accepts both the ``father_id``/``mother_id``/``spouse_ids`` shape and the
    ``fid``/``mid``/``pids`` shape used by the tree renderer.
    """
    person_id = _clean_id(record.get("id") or record.get("person_id"))
    if person_id is None:
        raise ValueError(f"Record has no id: {record!r}")

    name = (record.get("name") or "").strip()
    if not name:
        given = (record.get("given_name") or "").strip()
        surname = (record.get("surname") or "").strip()
        name = f"{given} {surname}".strip() or person_id

    death_date = record.get("death_date") or record.get("Death") or None
    deceased = is_truthy(record.get("deceased")) or bool(str(death_date or "").strip())

    custom = record.get("custom")
    if not isinstance(custom, dict):
        custom = {}

    spouses = record.get("spouse_ids") or record.get("pids") or []
    pids = list(dict.fromkeys(s for s in (_clean_id(p) for p in spouses) if s))

    return Person(
        id=person_id,
        name=name,
        fid=_clean_id(record.get("father_id") or record.get("fid")),
        mid=_clean_id(record.get("mother_id") or record.get("mid")),
        pids=pids,
        birth_date=record.get("birth_date") or record.get("Birth") or None,
        death_date=death_date,
        deceased=deceased,
        sex=normalize_sex(record.get("sex")),
        image_url=(record.get("image_url") or "").strip() or None,
        custom=custom,
    )


def persons_from_records(records: list[dict]) -> list[Person]:
    """Convert raw records, skipping archived persons."""
    return [person_from_record(r) for r in records if not is_truthy(r.get("archived"))]


def family_from_record(record: dict) -> FamilyRecord:
    children = [c for c in (_clean_id(c) for c in record.get("children") or []) if c]
    return FamilyRecord(
        husband_id=_clean_id(record.get("husband_id")),
        wife_id=_clean_id(record.get("wife_id")),
        children=children,
    )


# ============================================================================
# GEDCOM import
# ============================================================================


def xref_to_id(xref_id: str) -> str:
    """Turn a GEDCOM xref like '@I_347421849@' into the opaque id 'I_347421849'."""
    return xref_id.strip().strip("@")


def extract_name(indi) -> str | None:
    """Extract the display name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return None

    name_value = name_rec.value

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        parts = [p for p in name_value if p]
        return " ".join(parts) if parts else None

    # Fallback: string format "Given /Surname/"
    return " ".join(str(name_value).replace("/", " ").split()) or None


def extract_event_date(indi, tag: str) -> str | None:
    """Extract the raw date string of an event tag (BIRT, DEAT, etc.)."""
    event = indi.sub_tag(tag)
    if event is None:
        return None

    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return str(date_rec.value)
    return None


def read_gedcom(filepath: Path) -> tuple[list[Person], list[FamilyRecord]]:
    """
    Read persons and family records from a GEDCOM file.
    Ignores non-standard Ancestry-specific tags (starting with _).
    """
    persons: list[Person] = []
    families: list[FamilyRecord] = []

    with GedcomReader(str(filepath)) as reader:
        for rec in reader.records0("INDI"):
            if rec.xref_id is None:
                continue

            person_id = xref_to_id(rec.xref_id)
            sex_rec = rec.sub_tag("SEX")
            death_date = extract_event_date(rec, "DEAT")

            persons.append(
                Person(
                    id=person_id,
                    name=extract_name(rec) or person_id,
                    birth_date=extract_event_date(rec, "BIRT"),
                    death_date=death_date,
                    deceased=death_date is not None or rec.sub_tag("DEAT") is not None,
                    sex=normalize_sex(sex_rec.value if sex_rec else None),
                )
            )

        for rec in reader.records0("FAM"):
            if rec.xref_id is None:
                continue

            husb = rec.sub_tag("HUSB")
            wife = rec.sub_tag("WIFE")

            families.append(
                FamilyRecord(
                    husband_id=xref_to_id(husb.xref_id) if husb and husb.xref_id else None,
                    wife_id=xref_to_id(wife.xref_id) if wife and wife.xref_id else None,
                    children=[
                        xref_to_id(child.xref_id)
                        for child in rec.sub_tags("CHIL")
                        if child.xref_id
                    ],
                )
            )

    return persons, families
