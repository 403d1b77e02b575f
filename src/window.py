"""
Lazy family window: the small subset of persons drawn around a focal person.

Only the focal person, their parents, spouses and children are included, so
the window stays small no matter how large the tree is. Every member is a
private copy whose links are pruned to ids inside the window, because the
tree renderer mutates its input and fails on links to absent nodes.
"""

from copy import deepcopy
from dataclasses import asdict, dataclass
import logging

from graph import GraphIndex
from models import Gender, Person

logger = logging.getLogger(__name__)

DECEASED_MARKER = "●"
HOME_RELATION = "ME"
ICONS = {Gender.MALE: "male", Gender.FEMALE: "female"}


@dataclass
class WindowNode:
    person: Person
    gender: Gender = Gender.UNKNOWN
    initials: str = ""
    icon: str = ""
    label: str = ""
    relation: str = ""

    @property
    def id(self) -> str:
        return self.person.id

    def as_record(self) -> dict:
        """Flat record for the tree renderer."""
        record = asdict(self.person)
        record.update(
            gender=self.gender.value,
            initials=self.initials,
            icon=self.icon,
            label=self.label,
            relation=self.relation,
        )
        return record


def get_initials(name: str | None) -> str:
    parts = (name or "").split()
    if not parts:
        return "?"
    if len(parts) == 1:
        return parts[0][0].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def format_name_for_node(name: str | None) -> str:
    """Keep all given names, reduce the surname to its initial: "NARAYANA RAO DHARMAVARAM" -> "NARAYANA RAO.D"."""
    parts = (name or "").split()
    if len(parts) <= 1:
        return (name or "").strip()
    return f"{' '.join(parts[:-1])}.{parts[-1][0].upper()}"


def is_deceased(person: Person) -> bool:
    return bool(person.deceased) or bool((person.death_date or "").strip())


def collect_window_ids(index: GraphIndex, focal_id: str) -> list[str]:
    """Focal person, father, mother, spouses, children; in that order, without repeats."""
    focal = index.get_person(focal_id)
    if focal is None:
        return []
    ids = [focal_id, focal.fid, focal.mid, *focal.pids, *index.children_of(focal_id)]
    return [pid for pid in dict.fromkeys(ids) if pid and pid in index]


def extract_family_window(
    index: GraphIndex,
    focal_id: str,
    engine=None,
    home_id: str | None = None,
    image_probe=None,
) -> list[WindowNode]:
    """
    Build the window around ``focal_id``.

    ``engine`` (a KinshipEngine) and ``home_id`` enable the relation
    annotation; ``image_probe`` (an ImageProbe) is notified of every image url
    and never blocks.
    """
    ids = collect_window_ids(index, focal_id)
    if not ids:
        logger.warning("Person with ID %s not found.", focal_id)
        return []

    members = set(ids)
    nodes: list[WindowNode] = []

    for person_id in ids:
        person = deepcopy(index.get_person(person_id))

        person.pids = [pid for pid in person.pids if pid in members]
        if person.fid not in members:
            person.fid = None
        if person.mid not in members:
            person.mid = None

        if person.image_url and image_probe is not None:
            person.image_url = image_probe.resolve(person.id, person.image_url)
            if person.image_url:
                image_probe.probe(person.image_url, person.id)

        gender = index.gender_of(person_id)
        node = WindowNode(person=person, gender=gender)
        if not person.image_url:
            if gender in ICONS:
                node.icon = ICONS[gender]
            else:
                node.initials = get_initials(person.name)

        node.label = format_name_for_node(person.name)
        if is_deceased(person):
            node.label = f"{DECEASED_MARKER} {node.label}"

        node.relation = relation_annotation(engine, home_id, person_id)
        nodes.append(node)

    return nodes


def relation_annotation(engine, home_id: str | None, person_id: str) -> str:
    if engine is None or not home_id:
        return ""
    if person_id == home_id:
        return HOME_RELATION
    relation = engine.find_relationship(home_id, person_id)
    if not relation or relation == "Unknown":
        return ""
    return f"({relation})"
