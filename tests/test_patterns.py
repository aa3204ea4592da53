import pytest

from depdm.categories import Category, Relation
from depdm.patterns import (
    DEFAULT_PATTERNS,
    DOBJ,
    DOWN,
    LEXICAL_PREPOSITIONS,
    NO_DOBJ,
    NOUN,
    NSUBJ,
    UP,
    VERB,
    CatalogError,
    Direction,
    EdgeTest,
    NodeTest,
    Pattern,
    export_patterns,
    load_patterns,
)


def test_default_catalog_contents():
    names = [p.name for p in DEFAULT_PATTERNS]
    assert len(DEFAULT_PATTERNS) == 15 + len(LEXICAL_PREPOSITIONS)
    assert names[:2] == ["sbj_intr", "sbj_tr"]
    for name in ("obj", "iobj", "nmod", "coord", "prd", "verb", "with", "of"):
        assert name in names


def test_edge_test_exclusion():
    active = EdgeTest(Relation.NSUBJ, excluding=Relation.NSUBJPASS)
    assert active.accepts(Relation.NSUBJ)
    assert not active.accepts(Relation.NSUBJPASS)
    assert not active.accepts(Relation.DOBJ)


def test_node_test_any_and_family():
    assert NodeTest().to_string() == "ANY"
    preposition = NodeTest(Category.PREPOSITION)
    assert preposition.accepts(type("N", (), {"category": Category.WITH})())
    assert not preposition.accepts(type("N", (), {"category": Category.TO})())


def test_to_string():
    pattern = Pattern("obj", (NOUN, UP, DOBJ, VERB), 0, 1)
    assert pattern.to_string() == "obj: NOUN <-dobj- VERB"
    assert pattern.node_count == 2
    assert DEFAULT_PATTERNS[0].to_string() == "sbj_intr: NOUN <-nsubj\\nsubjpass- VERB -!dobj->"


@pytest.mark.parametrize("steps, slots", [
    ((), (0, 0)),
    ((UP, NSUBJ, VERB), (0, 0)),
    ((NOUN, UP), (0, 0)),
    ((NOUN, UP, NSUBJ, VERB, VERB), (0, 1)),
    ((NOUN, NSUBJ, UP, VERB), (0, 1)),
    ((NOUN, DOWN, NO_DOBJ, VERB), (0, 1)),
    ((NOUN, UP, NO_DOBJ), (0, 0)),
    ((NOUN, UP, DOBJ, VERB), (0, 2)),
    ((NOUN, UP, DOBJ, VERB), (-1, 1)),
])
def test_rejects_malformed_templates(steps, slots):
    with pytest.raises(CatalogError):
        Pattern("bad", steps, *slots)


def test_accepts_final_pair_without_node():
    pattern = Pattern("has_subject", (NOUN, UP, NSUBJ), 0, 0)
    assert pattern.node_count == 1
    assert pattern.last_step == 2


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "patterns.yaml"
    export_patterns(DEFAULT_PATTERNS, path)
    assert load_patterns(path) == DEFAULT_PATTERNS


def test_load_handwritten_catalog(tmp_path):
    path = tmp_path / "patterns.yaml"
    path.write_text(
        "patterns:\n"
        "  - name: lonely\n"
        "    first_slot: 0\n"
        "    second_slot: 1\n"
        "    steps:\n"
        "      - {node: noun}\n"
        "      - {to: governor, edge: NSUBJ, excluding: nsubjpass}\n"
        "      - {node: verb}\n"
        "      - {to: dependent, edge: dobj, negated: true}\n",
        encoding="utf-8",
    )
    (pattern,) = load_patterns(path)

    assert pattern.name == "lonely"
    assert pattern.steps == DEFAULT_PATTERNS[0].steps
    assert pattern.steps[1] is Direction.TO_GOVERNOR


@pytest.mark.parametrize("document", [
    "",
    "patterns: []\n",
    "patterns:\n  - {name: x, first_slot: 0, second_slot: 0, steps: [{node: animal}]}\n",
    "patterns:\n  - {name: x, first_slot: 0, second_slot: 0, steps: [{node: noun}, {to: up, edge: dobj}]}\n",
    "patterns:\n  - {name: x, first_slot: 0, second_slot: 0, steps: [{node: noun}, {to: governor, edge: eats}]}\n",
    "patterns:\n  - {name: x, steps: [{node: noun}]}\n",
    "patterns:\n  - {first_slot: 0, second_slot: 0, steps: [{node: noun}]}\n",
    "patterns:\n  - {name: x, first_slot: 0, second_slot: 0, steps: [{word: noun}]}\n",
    "patterns: [\n",
    "patterns:\n  - obj\n",
    "patterns: {obj: noun}\n",
])
def test_load_rejects_bad_catalogs(tmp_path, document):
    path = tmp_path / "patterns.yaml"
    path.write_text(document, encoding="utf-8")
    with pytest.raises(CatalogError):
        load_patterns(path)
