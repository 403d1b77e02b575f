import pytest

from dictionary import parse_dictionary
from graph import GraphIndex, IndexNotBuiltError
from models import Person
from resolver import AgeOrder, TermResolver, compare_age, resolve


def _resolver(index, raw, language="en"):
    return TermResolver(index, parse_dictionary(raw), language=language)


def test_compare_age():
    old = Person(id="a", name="A", birth_date="1950")
    young = Person(id="b", name="B", birth_date="1960")
    undated = Person(id="c", name="C")
    assert compare_age(old, young) is AgeOrder.OLDER
    assert compare_age(young, old) is AgeOrder.YOUNGER
    assert compare_age(old, old) is AgeOrder.SAME
    assert compare_age(old, undated) is None
    assert compare_age(None, old) is None


def test_dictionary_miss_returns_code(family_index):
    resolver = _resolver(family_index, {})
    me = family_index.get_person("me")
    dad = family_index.get_person("dad")
    assert resolver.resolve("F", me, dad, ["me", "dad"]) == "F"


def test_gendered_term_for_female_target():
    index = GraphIndex.build(
        [
            Person(id="x", name="X", fid="f"),
            Person(id="f", name="F"),
            Person(id="g", name="G", sex="F"),
        ]
    )
    resolver = _resolver(index, {"FB": {"male": "Uncle", "female": "Aunt"}})
    term = resolver.resolve(
        "FB", index.get_person("x"), index.get_person("g"), ["x", "f", "g"]
    )
    assert term == "Aunt"


def test_gendered_term_needs_known_gender():
    index = GraphIndex.build([Person(id="x", name="X"), Person(id="y", name="Y")])
    resolver = _resolver(index, {"P": {"male": "Husband", "female": "Wife"}})
    assert resolver.resolve("P", index.get_person("x"), index.get_person("y"), ["x", "y"]) == "P"


def test_direct_age_elder():
    index = GraphIndex.build(
        [
            Person(id="src", name="Source", birth_date="1990-01-01"),
            Person(id="tgt", name="Target", sex="M", birth_date="1985-01-01"),
        ]
    )
    resolver = _resolver(
        index, {"B": {"ageRule": "direct_age", "elder": "Anna", "younger": "Tammudu"}}
    )
    term = resolver.resolve("B", index.get_person("src"), index.get_person("tgt"), ["src", "tgt"])
    assert term == "Anna"


def test_direct_age_unknown_uses_default_then_disjunction():
    index = GraphIndex.build([Person(id="a", name="A"), Person(id="b", name="B")])
    a, b = index.get_person("a"), index.get_person("b")

    with_default = _resolver(
        index,
        {"B": {"ageRule": "direct_age", "elder": "Anna", "younger": "Tammudu", "default": "Brother"}},
    )
    assert with_default.resolve("B", a, b, ["a", "b"]) == "Brother"

    without_default = _resolver(
        index, {"B": {"ageRule": "direct_age", "elder": "Anna", "younger": "Tammudu"}}
    )
    assert without_default.resolve("B", a, b, ["a", "b"]) == "Anna/Tammudu"


def test_pedda_chinna_compares_with_parent(family_index, dictionary):
    resolver = TermResolver(family_index, dictionary, language="en")
    me = family_index.get_person("me")
    uncle = family_index.get_person("uncle")
    assert resolver.resolve("FB", me, uncle, ["me", "dad", "uncle"]) == "Younger Uncle"


def test_pedda_chinna_spouse_uncle_uses_spouse_parent():
    index = GraphIndex.build(
        [
            Person(id="me", name="Me", sex="M", pids=["wife"]),
            Person(id="wife", name="Wife", fid="wf", pids=["me"]),
            Person(id="wf", name="Wife Father", birth_date="1950"),
            Person(id="wfb", name="Wife Uncle", birth_date="1945"),
        ]
    )
    resolver = _resolver(
        index, {"WFB": {"ageRule": "pedda_chinna", "pedda": "Pedda", "chinna": "Chinna"}}
    )
    term = resolver.resolve(
        "WFB", index.get_person("me"), index.get_person("wfb"), ["me", "wife", "wf", "wfb"]
    )
    assert term == "Pedda"


def test_sibling_child_compares_sibling_with_source():
    index = GraphIndex.build(
        [
            Person(id="me", name="Me", birth_date="1980"),
            Person(id="bro", name="Brother", birth_date="1975"),
            Person(id="kid", name="Nephew"),
        ]
    )
    resolver = _resolver(
        index, {"BS": {"ageRule": "sibling_child", "elder": "Anna Koduku", "younger": "Tammudi Koduku"}}
    )
    me, kid = index.get_person("me"), index.get_person("kid")
    assert resolver.resolve("BS", me, kid, ["me", "bro", "kid"]) == "Anna Koduku"
    assert resolver.resolve("BS", me, kid, ["me", "kid"]) == "BS"


def test_same_birth_date_gives_disjunction():
    index = GraphIndex.build(
        [
            Person(id="me", name="Me", birth_date="1980-01-01"),
            Person(id="twin", name="Twin", birth_date="1980-01-01"),
            Person(id="w", name="Twin Wife"),
        ]
    )
    resolver = _resolver(
        index, {"BW": {"ageRule": "vadina_maradalu", "elder": "Vadina", "younger": "Maradalu"}}
    )
    term = resolver.resolve("BW", index.get_person("me"), index.get_person("w"), ["me", "twin", "w"])
    assert term == "Vadina/Maradalu"


def test_parent_age_compare():
    index = GraphIndex.build(
        [
            Person(id="me", name="Me", birth_date="1985"),
            Person(id="h", name="Husband", birth_date="1980"),
            Person(id="hb", name="Husband Brother"),
        ]
    )
    resolver = _resolver(
        index,
        {"HB": {"ageRule": "parent_age_compare", "elder": "Bava", "younger": "Maridi"}},
    )
    assert (
        resolver.resolve("HB", index.get_person("me"), index.get_person("hb"), ["me", "h", "hb"])
        == "Bava"
    )


def test_language_falls_back_to_default(family_index, dictionary):
    resolver = TermResolver(family_index, dictionary, language="kn", default_language="te")
    me = family_index.get_person("me")
    assert resolver.resolve("F", me, family_index.get_person("dad"), ["me", "dad"]) == "ಅಪ್ಪ"
    assert resolver.resolve("M", me, family_index.get_person("mom"), ["me", "mom"]) == "అమ్మ"


def test_missing_language_falls_back_to_code(family_index, dictionary):
    resolver = TermResolver(family_index, dictionary, language="ta", default_language="fr")
    me = family_index.get_person("me")
    assert resolver.resolve("FF", me, family_index.get_person("gf"), ["me", "dad", "gf"]) == "FF"


def test_module_level_resolve(family_index, dictionary):
    me = family_index.get_person("me")
    dad = family_index.get_person("dad")
    assert resolve("F", me, dad, ["me", "dad"], dictionary, "en", family_index) == "Father"


def test_unbuilt_index_is_rejected(dictionary):
    with pytest.raises(IndexNotBuiltError):
        TermResolver(GraphIndex(), dictionary)
