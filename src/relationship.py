"""
Relationship engine: shortest kinship path, canonical code and localized term
between any two persons of a GraphIndex.
"""

from dataclasses import dataclass, field
import logging

from dictionary import DEFAULT_LANGUAGE, RelationshipDictionary
from graph import GraphIndex, IndexNotBuiltError
from models import SELF_CODE, Gender, RelationResult
from normalization import CodeNormalizer, tokenize
from pathfinder import MAX_DEPTH, shortest_path
from resolver import TermResolver
from window import WindowNode, extract_family_window

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

CODE_NAMES = {
    "F": "Father",
    "M": "Mother",
    "S": "Son",
    "D": "Daughter",
    "B": "Brother",
    "Z": "Sister",
    "H": "Husband",
    "W": "Wife",
    "C": "Child",
    "Sib": "Sibling",
    "P": "Partner",
}


def expand_code(code: str) -> str:
    """
    Spell out a relation code, e.g. SSWB -> Son's-Son's-Wife's-Brother.
    Steps without a name are kept as they are.
    """
    if not code:
        return ""
    if code == SELF_CODE:
        return "Self"
    parts = [CODE_NAMES.get(token, token) for token in tokenize(code)]
    if len(parts) == 1:
        return parts[0]
    return "-".join(f"{p}'s" for p in parts[:-1]) + f"-{parts[-1]}"


@dataclass
class Diagram:
    """
    A relationship path split for drawing.

    ``pivot`` holds the common ancestor, or both persons of the sibling pair
    when the path crosses between siblings. ``left`` runs from the pivot down
    to the source person and ``right`` from the pivot down to the target.
    """

    source_id: str
    target_id: str
    code: str
    term: str
    path: list[str]
    pivot: list[str]
    left: list[str]
    right: list[str]
    sibling_bridge: bool
    labels: dict[str, str] = field(default_factory=dict)


class KinshipEngine:
    def __init__(
        self,
        index: GraphIndex,
        dictionary: RelationshipDictionary | None = None,
        language: str = DEFAULT_LANGUAGE,
        default_language: str = DEFAULT_LANGUAGE,
        normalizer: CodeNormalizer | None = None,
        max_depth: int = MAX_DEPTH,
        home_id: str | None = None,
    ):
        if not index.built:
            raise IndexNotBuiltError("KinshipEngine needs a built GraphIndex")
        self.index = index
        self.dictionary = dictionary or {}
        self.normalizer = normalizer or CodeNormalizer()
        self.resolver = TermResolver(index, self.dictionary, language, default_language)
        self.max_depth = max_depth
        self.home_id = home_id
        # The index is immutable, so path results never go stale
        self._codes: dict[tuple[str, str], RelationResult | None] = {}

    @property
    def language(self) -> str:
        return self.resolver.language

    @language.setter
    def language(self, value: str):
        self.resolver.language = value

    def relationship_code(self, source_id: str, target_id: str) -> RelationResult | None:
        if not source_id or not target_id:
            return None
        key = (source_id, target_id)
        if key not in self._codes:
            path = shortest_path(self.index, source_id, target_id, self.max_depth)
            if path is None:
                logger.debug("No path from %s to %s", source_id, target_id)
                self._codes[key] = None
            else:
                code = self.normalizer.normalize(path.raw_code)
                self._codes[key] = RelationResult(code=code, path=path.ids)
        return self._codes[key]

    def resolve(self, result: RelationResult | None, source_id: str, target_id: str) -> str:
        if result is None:
            return UNKNOWN
        source = self.index.get_person(source_id)
        target = self.index.get_person(target_id)
        return self.resolver.resolve(result.code, source, target, result.path)

    def find_relationship(self, source_id: str, target_id: str) -> str:
        """Localized term for target as seen from source, or "Unknown"."""
        if source_id not in self.index or target_id not in self.index:
            return UNKNOWN
        return self.resolve(self.relationship_code(source_id, target_id), source_id, target_id)

    def family_window(self, focal_id: str, image_probe=None) -> list[WindowNode]:
        return extract_family_window(
            self.index, focal_id, engine=self, home_id=self.home_id, image_probe=image_probe
        )

    # ------------------------------------------------------------------
    # Helpers for reports and diagrams
    # ------------------------------------------------------------------

    def step_label(self, from_id: str, to_id: str) -> str:
        """Plain English name of a single hop between two persons."""
        index = self.index
        source = index.get_person(from_id)
        target = index.get_person(to_id)
        if source is None or target is None:
            return "Related"

        if source.fid == to_id:
            return "Father"
        if source.mid == to_id:
            return "Mother"

        gender = index.gender_of(to_id)
        if from_id in (target.fid, target.mid):
            return {Gender.MALE: "Son", Gender.FEMALE: "Daughter"}.get(gender, "Child")
        if to_id in source.pids:
            return "Spouse"
        if to_id in index.siblings_of(from_id):
            return {Gender.MALE: "Brother", Gender.FEMALE: "Sister"}.get(gender, "Sibling")
        return "Related"

    def parents_with_roles(self, person_id: str) -> list[tuple[str, str]]:
        person = self.index.get_person(person_id)
        if person is None:
            return []
        roles = []
        if person.fid in self.index:
            roles.append((person.fid, "Father"))
        if person.mid in self.index:
            roles.append((person.mid, "Mother"))
        return roles

    def grandparents_with_roles(self, person_id: str) -> list[tuple[str, str]]:
        person = self.index.get_person(person_id)
        if person is None:
            return []
        roles = []
        for parent_id, side in ((person.fid, "Paternal"), (person.mid, "Maternal")):
            parent = self.index.get_person(parent_id)
            if parent is None:
                continue
            if parent.fid in self.index:
                roles.append((parent.fid, f"{side} Grandfather"))
            if parent.mid in self.index:
                roles.append((parent.mid, f"{side} Grandmother"))
        return roles

    def diagram_label(self, source_id: str, target_id: str) -> str:
        """Term for dictionary codes and single steps, raw code otherwise (it fits in a box)."""
        result = self.relationship_code(source_id, target_id)
        if result is None:
            return ""
        if result.code == SELF_CODE:
            return "Self"
        if result.code in self.dictionary or len(result.code) <= 1:
            return self.resolve(result, source_id, target_id)
        return result.code

    def diagram(self, source_id: str, target_id: str) -> Diagram | None:
        """Lay the path out around a sibling bridge or the common ancestor."""
        if source_id not in self.index or target_id not in self.index:
            return None
        result = self.relationship_code(source_id, target_id)
        if result is None:
            return None

        path = result.path
        bridge = next(
            (
                i
                for i in range(len(path) - 1)
                if path[i + 1] in self.index.siblings_of(path[i])
            ),
            None,
        )

        if bridge is not None:
            pivot = [path[bridge], path[bridge + 1]]
            left = list(reversed(path[:bridge]))
            right = path[bridge + 2 :]
        else:
            pivot_index = self._highest_generation(path)
            pivot = [path[pivot_index]]
            left = list(reversed(path[:pivot_index]))
            right = path[pivot_index + 1 :]

        return Diagram(
            source_id=source_id,
            target_id=target_id,
            code=result.code,
            term=self.resolve(result, source_id, target_id),
            path=list(path),
            pivot=pivot,
            left=left,
            right=right,
            sibling_bridge=bridge is not None,
            labels={pid: self.diagram_label(source_id, pid) for pid in path},
        )

    def _highest_generation(self, path: list[str]) -> int:
        """Index of the first path member with the highest generation (parent = +1)."""
        generation = 0
        best, best_index = 0, 0
        for i in range(len(path) - 1):
            current = self.index.get_person(path[i])
            following = self.index.get_person(path[i + 1])
            if path[i] in (following.fid, following.mid):
                generation -= 1
            elif path[i + 1] in (current.fid, current.mid):
                generation += 1
            if generation > best:
                best, best_index = generation, i + 1
        return best_index
