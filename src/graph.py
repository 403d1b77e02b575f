"""Kinship graph index and NetworkX graph operations."""

from dataclasses import replace
from datetime import date
import itertools
import logging
from typing import Iterable

import networkx as nx

from models import FamilyRecord, Gender, Person
from parsing import parse_date

logger = logging.getLogger(__name__)

# Safety cap for partner propagation; a full pass without changes ends it sooner.
MAX_GENDER_PASSES = 50


class IndexNotBuiltError(RuntimeError):
    """Raised when a GraphIndex is queried before ``build`` populated it."""


def _opposite(gender: Gender) -> Gender:
    return Gender.FEMALE if gender is Gender.MALE else Gender.MALE


class GraphIndex:
    """
    O(1) lookups over a set of persons: person by id, children by parent and
    inferred gender.

    The index copies the records it is built from and is treated as immutable
    afterwards. Rebuild it whenever the underlying records change.
    """

    def __init__(self):
        self._people: dict[str, Person] | None = None
        self._children: dict[str, list[str]] = {}
        self._genders: dict[str, Gender] = {}

    @classmethod
    def build(
        cls,
        persons: Iterable[Person],
        families: Iterable[FamilyRecord] = (),
        max_gender_passes: int = MAX_GENDER_PASSES,
    ) -> "GraphIndex":
        index = cls()
        people: dict[str, Person] = {}
        for person in persons:
            people[person.id] = replace(person, pids=list(person.pids), custom=dict(person.custom))

        _apply_families(people, families)
        _symmetrize_partners(people)

        index._people = people
        index._children = _build_children(people)
        index._genders = _infer_genders(people, max_gender_passes)
        logger.debug(
            "Built index with %d persons and %d parents", len(people), len(index._children)
        )
        return index

    @property
    def built(self) -> bool:
        return self._people is not None

    def _require_built(self) -> dict[str, Person]:
        if self._people is None:
            raise IndexNotBuiltError("GraphIndex.build() must be called before querying")
        return self._people

    def __contains__(self, person_id) -> bool:
        return person_id in self._require_built()

    def __len__(self) -> int:
        return len(self._require_built())

    def persons(self) -> list[Person]:
        return list(self._require_built().values())

    def get_person(self, person_id: str | None) -> Person | None:
        if person_id is None:
            return None
        return self._require_built().get(person_id)

    def children_of(self, person_id: str) -> list[str]:
        self._require_built()
        return list(self._children.get(person_id, ()))

    def gender_of(self, person_id: str) -> Gender:
        self._require_built()
        return self._genders.get(person_id, Gender.UNKNOWN)

    def parents_of(self, person_id: str) -> list[str]:
        """Father then mother, limited to parents present in the index."""
        people = self._require_built()
        person = people.get(person_id)
        if person is None:
            return []
        return [pid for pid in (person.fid, person.mid) if pid and pid in people]

    def spouses_of(self, person_id: str) -> list[str]:
        people = self._require_built()
        person = people.get(person_id)
        if person is None:
            return []
        return [pid for pid in person.pids if pid in people and pid != person_id]

    def siblings_of(self, person_id: str) -> list[str]:
        """Other children of either parent; father's children first."""
        people = self._require_built()
        person = people.get(person_id)
        if person is None:
            return []
        siblings: dict[str, None] = {}
        for parent_id in (person.fid, person.mid):
            if parent_id:
                siblings.update(dict.fromkeys(self._children.get(parent_id, ())))
        siblings.pop(person_id, None)
        return list(siblings)

    def birth_date_of(self, person_id: str) -> date | None:
        person = self.get_person(person_id)
        return parse_date(person.birth_date) if person else None

    def to_networkx(self) -> nx.DiGraph:
        return build_graph(self.persons(), self._genders)


def _apply_families(people: dict[str, Person], families: Iterable[FamilyRecord]):
    """Fold family records into the (already copied) person records."""
    for family in families:
        husband_id = family.husband_id
        wife_id = family.wife_id

        if husband_id in people and wife_id in people:
            husband = people[husband_id]
            wife = people[wife_id]
            if wife_id not in husband.pids:
                husband.pids.append(wife_id)
            if husband_id not in wife.pids:
                wife.pids.append(husband_id)

        for child_id in family.children:
            child = people.get(child_id)
            if child is None:
                continue
            if husband_id:
                child.fid = husband_id
            if wife_id:
                child.mid = wife_id


def _symmetrize_partners(people: dict[str, Person]):
    """A marriage listed on one side only is added to the other partner too."""
    for person in people.values():
        for partner_id in person.pids:
            partner = people.get(partner_id)
            if partner is not None and partner_id != person.id and person.id not in partner.pids:
                partner.pids.append(person.id)


def _build_children(people: dict[str, Person]) -> dict[str, list[str]]:
    children: dict[str, list[str]] = {}
    for person in people.values():
        for parent_id in (person.fid, person.mid):
            # Dangling parents never get an entry
            if parent_id and parent_id in people and parent_id != person.id:
                children.setdefault(parent_id, []).append(person.id)

    def birth_key(child_id: str):
        born = parse_date(people[child_id].birth_date)
        return (born is None, born or date.min)

    # sorted() is stable, so undated children keep insertion order
    return {parent: sorted(kids, key=birth_key) for parent, kids in children.items()}


def _infer_genders(people: dict[str, Person], max_passes: int) -> dict[str, Gender]:
    genders: dict[str, Gender] = {}

    for person in people.values():
        if person.sex in ("M", "F"):
            genders[person.id] = Gender(person.sex)

    # Pass 1: parental role, never overwriting explicit sex
    for person in people.values():
        if person.fid in people:
            genders.setdefault(person.fid, Gender.MALE)
        if person.mid in people:
            genders.setdefault(person.mid, Gender.FEMALE)

    # Pass 2: partner symmetry until a full pass changes nothing
    for _ in range(max_passes):
        changed = False
        for person in people.values():
            for partner_id in person.pids:
                if partner_id not in people:
                    continue
                mine = genders.get(person.id)
                theirs = genders.get(partner_id)
                if mine and not theirs:
                    genders[partner_id] = _opposite(mine)
                    changed = True
                elif theirs and not mine:
                    genders[person.id] = _opposite(theirs)
                    changed = True
        if not changed:
            break

    return genders


def build_graph(persons: Iterable[Person], genders: dict[str, Gender] | None = None) -> nx.DiGraph:
    """
    Build a NetworkX directed graph from person records.

    Only links whose endpoints are both present become edges.
    """
    G = nx.DiGraph()
    persons = list(persons)
    genders = genders or {}

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for p in persons:
        sex = genders.get(p.id)
        G.add_node(
            p.id,
            person_name=p.name,
            sex=sex.value if sex else p.sex,
            birth_date=p.birth_date,
            death_date=p.death_date,
        )

    for p in persons:
        for parent_id in (p.fid, p.mid):
            if parent_id and parent_id in G:
                G.add_edge(parent_id, p.id, relationship_type="PARENT_OF")
        for partner_id in p.pids:
            if partner_id in G and not G.has_edge(partner_id, p.id):
                G.add_edge(p.id, partner_id, relationship_type="SPOUSE_OF")

    return G


def build_union_layout_graph(G: nx.DiGraph) -> nx.DiGraph:
    """
    Build a layout graph using the union-node model.

    Creates "family nodes" (union nodes) that connect spouse pairs to their
    children, so spouses sit on the same generation and siblings hang from a
    shared point.

    Args:
        G: Graph with PARENT_OF and SPOUSE_OF edges

    Returns:
        A new graph with family nodes suitable for hierarchical layout
    """
    H = nx.DiGraph()

    for n, data in G.nodes(data=True):
        H.add_node(n, node_type="person", **data)

    # Collect spouse pairs (avoid duplicates by sorting)
    spouse_pairs: set[tuple] = set()
    for u, v, edata in G.edges(data=True):
        if edata.get("relationship_type") == "SPOUSE_OF":
            spouse_pairs.add(tuple(sorted([u, v], key=str)))

    fam_for_pair: dict[tuple, str] = {}
    for a, b in sorted(spouse_pairs):
        fam_id = f"FAM_{a}_{b}"
        fam_for_pair[(a, b)] = fam_id
        H.add_node(fam_id, node_type="family", spouses=(a, b))
        H.add_edge(a, fam_id, edge_type="spouse_to_family")
        H.add_edge(b, fam_id, edge_type="spouse_to_family")

    parents_by_child: dict[str, list[str]] = {}
    for u, v, edata in G.edges(data=True):
        if edata.get("relationship_type") == "PARENT_OF":
            parents_by_child.setdefault(v, []).append(u)

    for child, parents in parents_by_child.items():
        parents = list(dict.fromkeys(parents))

        fam_id = None
        if len(parents) >= 2:
            for p1, p2 in itertools.combinations(parents, 2):
                pair = tuple(sorted([p1, p2], key=str))
                if pair in fam_for_pair:
                    fam_id = fam_for_pair[pair]
                    break

        # Single parent (or unmarried parents): a family node of their own
        if fam_id is None:
            fam_id = f"FAM_{'_'.join(sorted(parents, key=str))}"
            if fam_id not in H:
                H.add_node(fam_id, node_type="family", spouses=tuple(parents))
                for p in parents:
                    H.add_edge(p, fam_id, edge_type="spouse_to_family")

        H.add_edge(fam_id, child, edge_type="family_to_child")

    return H
