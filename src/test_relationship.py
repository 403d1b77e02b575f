import pytest

from graph import GraphIndex, IndexNotBuiltError
from normalization import CodeNormalizer
from relationship import UNKNOWN, KinshipEngine, expand_code


def test_relationship_code_self(engine):
    result = engine.relationship_code("me", "me")
    assert result.code == "SELF"
    assert result.path == ["me"]


def test_relationship_code_normalizes(engine):
    result = engine.relationship_code("me", "cousin")
    assert result.code == "B"
    assert result.path == ["me", "dad", "uncle", "cousin"]


def test_relationship_code_without_path(engine):
    assert engine.relationship_code("me", "stranger") is None
    assert engine.relationship_code("me", "") is None


def test_relationship_code_is_cached(engine):
    assert engine.relationship_code("me", "gf") is engine.relationship_code("me", "gf")


@pytest.mark.parametrize(
    "source, target, term",
    [
        ("me", "dad", "Father"),
        ("me", "mom", "Mother"),
        ("me", "gf", "Grandfather"),
        ("gf", "me", "Grandson"),
        ("me", "sis", "Younger Sister"),
        ("sis", "me", "Elder Brother"),
        ("me", "uncle", "Younger Uncle"),
        ("me", "aunt", "Aunt"),
        ("me", "cousin", "Younger Brother"),
    ],
)
def test_find_relationship(engine, source, target, term):
    assert engine.find_relationship(source, target) == term


def test_find_relationship_unknown(engine):
    assert engine.find_relationship("me", "stranger") == UNKNOWN
    assert engine.find_relationship("me", "nobody") == UNKNOWN
    assert engine.find_relationship("nobody", "me") == UNKNOWN


def test_self_without_dictionary_entry(engine):
    assert engine.find_relationship("me", "me") == "SELF"


def test_undictionaried_code_is_returned_raw(engine):
    assert engine.find_relationship("dad", "mom") == "W"


def test_language_switch(engine):
    engine.language = "te"
    assert engine.find_relationship("me", "dad") == "నాన్న"
    assert engine.resolver.language == "te"


def test_custom_normalizer(family_index, dictionary):
    engine = KinshipEngine(family_index, dictionary, normalizer=CodeNormalizer([]))
    assert engine.relationship_code("me", "cousin").code == "FBS"


def test_engine_requires_built_index():
    with pytest.raises(IndexNotBuiltError):
        KinshipEngine(GraphIndex())


def test_expand_code():
    assert expand_code("SSWB") == "Son's-Son's-Wife's-Brother"
    assert expand_code("F") == "Father"
    assert expand_code("SELF") == "Self"
    assert expand_code("FC") == "Father's-Child"
    assert expand_code("FSibP") == "Father's-Sibling's-Partner"
    assert expand_code("") == ""


def test_step_label(engine):
    assert engine.step_label("me", "dad") == "Father"
    assert engine.step_label("me", "mom") == "Mother"
    assert engine.step_label("dad", "sis") == "Daughter"
    assert engine.step_label("dad", "mom") == "Spouse"
    assert engine.step_label("dad", "uncle") == "Brother"
    assert engine.step_label("me", "gf") == "Related"
    assert engine.step_label("me", "nobody") == "Related"


def test_parents_and_grandparents_with_roles(engine):
    assert engine.parents_with_roles("me") == [("dad", "Father"), ("mom", "Mother")]
    assert engine.grandparents_with_roles("me") == [
        ("gf", "Paternal Grandfather"),
        ("gm", "Paternal Grandmother"),
    ]
    assert engine.grandparents_with_roles("nobody") == []


def test_diagram_sibling_bridge(engine):
    diagram = engine.diagram("me", "cousin")
    assert diagram.sibling_bridge
    assert diagram.pivot == ["dad", "uncle"]
    assert diagram.left == ["me"]
    assert diagram.right == ["cousin"]
    assert diagram.term == "Younger Brother"
    assert diagram.labels["dad"] == "Father"
    assert diagram.labels["me"] == "Self"


def test_diagram_common_ancestor(engine):
    diagram = engine.diagram("me", "gf")
    assert not diagram.sibling_bridge
    assert diagram.pivot == ["gf"]
    assert diagram.left == ["dad", "me"]
    assert diagram.right == []


def test_diagram_without_path(engine):
    assert engine.diagram("me", "stranger") is None
    assert engine.diagram("me", "nobody") is None


def test_family_window_annotates_relations(engine):
    nodes = {n.id: n for n in engine.family_window("dad")}
    assert nodes["me"].relation == "ME"
    assert nodes["dad"].relation == "(Father)"
    assert nodes["mom"].relation == "(Mother)"
