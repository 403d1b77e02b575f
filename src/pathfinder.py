"""Breadth-first shortest kinship path search."""

from collections import deque

from graph import GraphIndex
from models import Gender, RelationPath, Step

# Limit depth to keep pathological data from running away
MAX_DEPTH = 100

CHILD_STEPS = {Gender.MALE: Step.SON, Gender.FEMALE: Step.DAUGHTER, Gender.UNKNOWN: Step.CHILD}
SPOUSE_STEPS = {Gender.MALE: Step.HUSBAND, Gender.FEMALE: Step.WIFE, Gender.UNKNOWN: Step.PARTNER}
SIBLING_STEPS = {Gender.MALE: Step.BROTHER, Gender.FEMALE: Step.SISTER, Gender.UNKNOWN: Step.SIBLING}


def neighbors(index: GraphIndex, person_id: str) -> list[tuple[str, Step]]:
    """
    One-hop relatives of a person in search priority order: father, mother,
    children, spouses, then full siblings.
    """
    person = index.get_person(person_id)
    if person is None:
        return []

    out: list[tuple[str, Step]] = []
    if person.fid and person.fid in index:
        out.append((person.fid, Step.FATHER))
    if person.mid and person.mid in index:
        out.append((person.mid, Step.MOTHER))
    for child_id in index.children_of(person_id):
        out.append((child_id, CHILD_STEPS[index.gender_of(child_id)]))
    for spouse_id in index.spouses_of(person_id):
        out.append((spouse_id, SPOUSE_STEPS[index.gender_of(spouse_id)]))
    for sibling_id in index.siblings_of(person_id):
        out.append((sibling_id, SIBLING_STEPS[index.gender_of(sibling_id)]))
    return out


def shortest_path(
    index: GraphIndex, source_id: str, target_id: str, max_depth: int = MAX_DEPTH
) -> RelationPath | None:
    """
    Minimum-hop path from source to target, or None when either id is unknown
    or the target is unreachable within ``max_depth`` hops.

    A person's path to themselves is the single-id path whose code is SELF.
    """
    if source_id not in index or target_id not in index:
        return None
    if source_id == target_id:
        return RelationPath(ids=[source_id], steps=[])

    queue = deque([RelationPath(ids=[source_id], steps=[])])
    visited = {source_id}

    while queue:
        current = queue.popleft()
        if len(current.ids) > max_depth:
            continue

        for next_id, step in neighbors(index, current.ids[-1]):
            if next_id in visited:
                continue
            visited.add(next_id)
            candidate = RelationPath(ids=current.ids + [next_id], steps=current.steps + [step])
            if next_id == target_id:
                return candidate
            queue.append(candidate)

    return None
