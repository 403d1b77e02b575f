"""Ancestor, descendant and relationship summary reports."""

from dataclasses import dataclass, field

from models import Gender
from relationship import KinshipEngine

MAX_GENERATIONS = 20


@dataclass
class ReportEntry:
    person_id: str
    name: str
    role: str


@dataclass
class ReportSection:
    title: str
    entries: list[ReportEntry] = field(default_factory=list)
    subsections: list["ReportSection"] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.entries and all(s.is_empty() for s in self.subsections)


def _greats(generation: int) -> str:
    return "Great-" * (generation - 2)


def generation_title(generation: int, ancestors: bool) -> str:
    """Parents, Grandparents, Great-Grandparents, Great-Great-Grandparents... (or Children...)."""
    if generation == 1:
        return "Parents" if ancestors else "Children"
    noun = "Grandparents" if ancestors else "Grandchildren"
    return f"{_greats(generation)}{noun}"


def ancestor_role(generation: int, gender: Gender) -> str:
    if generation == 1:
        return {Gender.MALE: "Father", Gender.FEMALE: "Mother"}.get(gender, "Parent")
    noun = {Gender.MALE: "Grandfather", Gender.FEMALE: "Grandmother"}.get(gender, "Grandparent")
    return f"{_greats(generation)}{noun}"


def descendant_role(generation: int, gender: Gender) -> str:
    if generation == 1:
        return {Gender.MALE: "Son", Gender.FEMALE: "Daughter"}.get(gender, "Child")
    noun = {Gender.MALE: "Grandson", Gender.FEMALE: "Granddaughter"}.get(gender, "Grandchild")
    return f"{_greats(generation)}{noun}"


def safe_name(engine: KinshipEngine, person_id: str) -> str:
    person = engine.index.get_person(person_id)
    return person.name if person else "Unknown"


def _ladder_role(engine: KinshipEngine, root_id: str, person_id: str, base_role: str) -> str:
    """Generation role with the resolved kinship term appended in parentheses."""
    result = engine.relationship_code(root_id, person_id)
    if result is None:
        return base_role
    term = engine.resolve(result, root_id, person_id)
    return f"{base_role} ({term})" if term else base_role


def ancestors_report(engine: KinshipEngine, person_id: str) -> list[ReportSection]:
    """One section per generation above ``person_id``; empty when unknown or no ancestors."""
    index = engine.index
    person = index.get_person(person_id)
    if person is None:
        return []

    sections = []
    current = index.parents_of(person_id)
    generation = 1
    while current and generation <= MAX_GENERATIONS:
        section = ReportSection(generation_title(generation, ancestors=True))
        following: list[str] = []
        for ancestor_id in current:
            role = ancestor_role(generation, index.gender_of(ancestor_id))
            section.entries.append(
                ReportEntry(
                    ancestor_id,
                    safe_name(engine, ancestor_id),
                    _ladder_role(engine, person_id, ancestor_id, role),
                )
            )
            following.extend(index.parents_of(ancestor_id))
        sections.append(section)
        current = following
        generation += 1
    return sections


def descendants_report(engine: KinshipEngine, person_id: str) -> list[ReportSection]:
    """One section per generation below ``person_id``; empty when unknown or childless."""
    index = engine.index
    if index.get_person(person_id) is None:
        return []

    sections = []
    current = index.children_of(person_id)
    generation = 1
    while current and generation <= MAX_GENERATIONS:
        section = ReportSection(generation_title(generation, ancestors=False))
        following: list[str] = []
        for descendant_id in current:
            role = descendant_role(generation, index.gender_of(descendant_id))
            section.entries.append(
                ReportEntry(
                    descendant_id,
                    safe_name(engine, descendant_id),
                    _ladder_role(engine, person_id, descendant_id, role),
                )
            )
            following.extend(index.children_of(descendant_id))
        sections.append(section)
        current = following
        generation += 1
    return sections


def _entries(engine: KinshipEngine, home_id: str, ids) -> list[ReportEntry]:
    return [
        ReportEntry(pid, safe_name(engine, pid), engine.find_relationship(home_id, pid))
        for pid in ids
    ]


def _children_groups(engine: KinshipEngine, home_id: str, parent_ids) -> list[ReportSection]:
    groups = []
    for parent_id in parent_ids:
        kids = engine.index.children_of(parent_id)
        if kids:
            groups.append(
                ReportSection(
                    f"Children of {safe_name(engine, parent_id)}",
                    _entries(engine, home_id, kids),
                )
            )
    return groups


def relationship_summary(engine: KinshipEngine, home_id: str) -> list[ReportSection]:
    """
    Immediate family of ``home_id`` grouped the way the relationship report
    shows it, each member labelled with their term relative to ``home_id``.
    Empty sections are left out.
    """
    index = engine.index
    home = index.get_person(home_id)
    if home is None:
        return []

    siblings = index.siblings_of(home_id)
    children = index.children_of(home_id)

    sections = [
        ReportSection("SELF", _entries(engine, home_id, [home_id])),
        ReportSection(
            "PARENTS",
            _entries(engine, home_id, [pid for pid, _ in engine.parents_with_roles(home_id)]),
        ),
        ReportSection(
            "GRANDPARENTS",
            _entries(engine, home_id, [pid for pid, _ in engine.grandparents_with_roles(home_id)]),
        ),
        ReportSection("SIBLINGS", _entries(engine, home_id, siblings)),
        ReportSection("SIBLINGS' CHILDREN", subsections=_children_groups(engine, home_id, siblings)),
        ReportSection("CHILDREN", _entries(engine, home_id, children)),
        ReportSection("GRANDCHILDREN", subsections=_children_groups(engine, home_id, children)),
    ]

    spouse_side = ReportSection("SPOUSE SIDE")
    for spouse_id in index.spouses_of(home_id):
        spouse_siblings = index.siblings_of(spouse_id)
        spouse_side.subsections.append(
            ReportSection(
                f"Spouse: {safe_name(engine, spouse_id)} - "
                f"{engine.find_relationship(home_id, spouse_id)}",
                subsections=[
                    ReportSection(
                        "Parents",
                        _entries(
                            engine, home_id, [p for p, _ in engine.parents_with_roles(spouse_id)]
                        ),
                    ),
                    ReportSection(
                        "Grandparents",
                        _entries(
                            engine,
                            home_id,
                            [p for p, _ in engine.grandparents_with_roles(spouse_id)],
                        ),
                    ),
                    ReportSection("Siblings", _entries(engine, home_id, spouse_siblings)),
                    ReportSection(
                        "Siblings' Children",
                        subsections=_children_groups(engine, home_id, spouse_siblings),
                    ),
                ],
            )
        )
    sections.append(spouse_side)

    return [s for s in sections if not s.is_empty()]


def format_report(title: str, sections: list[ReportSection], empty_message: str = "") -> str:
    """Plain-text rendering for the terminal."""
    lines = [title, "=" * len(title)]
    if not sections and empty_message:
        lines.append(empty_message)

    def emit(section: ReportSection, depth: int):
        if section.is_empty():
            return
        indent = "  " * depth
        lines.append(f"{indent}{section.title}")
        for entry in section.entries:
            lines.append(f"{indent}  - {entry.name} - {entry.role}")
        for sub in section.subsections:
            emit(sub, depth + 1)

    for section in sections:
        lines.append("")
        emit(section, 0)
    return "\n".join(lines)
