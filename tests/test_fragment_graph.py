import pytest

from depdm.categories import Category, Relation
from depdm.fragment_graph import FragmentGraphBuilder, is_valid_word


def test_builds_tree(builder):
    soldier, read, book = builder.parse("soldier/NN/nsubj/2 read/VBP/root/0 book/NN/dobj/2")

    assert read.governor_edge is None
    assert soldier.governor is read
    assert book.governor is read
    assert soldier.governor_edge.relation is Relation.NSUBJ
    assert [e.dependent for e in read.dependent_edges] == [soldier, book]
    assert [n.index for n in (soldier, read, book)] == [0, 1, 2]
    assert read.category is Category.VERB
    assert read.tag == "VBP"


def test_every_edge_is_owned_by_its_governor(builder):
    graph = builder.parse(
        "soldier/NN/nsubj/2 fought/VBD/root/0 with/IN/prep/2 sword/NN/pobj/3"
    )
    edges = [n.governor_edge for n in graph if n.governor_edge is not None]

    assert len(edges) == len(graph) - 1
    for edge in edges:
        assert edge in edge.governor.dependent_edges
        assert edge.dependent.governor_edge is edge


def test_start_flags(builder):
    soldier, read, book = builder.parse("soldier/NN/nsubj/2 read/VBP/root/0 book/NN/dobj/2")
    assert soldier.is_start and book.is_start
    assert not read.is_start

    verb_builder = FragmentGraphBuilder(start_categories=frozenset({Category.VERB}))
    soldier, read, book = verb_builder.parse("soldier/NN/nsubj/2 read/VBP/root/0 book/NN/dobj/2")
    assert read.is_start and not soldier.is_start


def test_labels_are_case_insensitive(builder):
    graph = builder.parse("teacher/NN/NSUBJ/2 sing/VBG/ROOT/0")
    assert graph[0].governor_edge.relation is Relation.NSUBJ


def test_preposition_category_comes_from_word(builder):
    graph = builder.parse("soldier/NN/pobj/2 with/IN/prep/3 fought/VBD/root/0")
    assert graph[1].category is Category.WITH


@pytest.mark.parametrize("ngram", [
    "x/NN/nsubj/2 y/VBZ/root/0",
    "soldier/NN/nsubj/2 read/VBP",
    "soldier/NN/nsubj/2/extra read/VBP/root/0",
    "soldier/NN/nsubj/two read/VBP/root/0",
    "soldier/NN/nsubj/5 read/VBP/root/0",
    "soldier/NN/nsubj/1 read/VBP/root/0",
    "cats/NNS/conj/2 dogs/NNS/conj/1",
    "cats/XYZ/nsubj/2 ran/VBD/root/0",
    "cats/NNS/blah/2 ran/VBD/root/0",
    "cats/NNS/pobj/2 foo/IN/root/0",
    "don't/VB/root/0",
    "",
])
def test_rejects_malformed_fragments(builder, ngram):
    assert builder.parse(ngram) is None


def test_build_from_fields_accepts_int_indices(builder):
    graph = builder.build_from_fields([
        ("teacher", "NN", "nsubj", 2),
        ("sing", "VBG", "root", 0),
    ])
    assert graph[0].governor is graph[1]


def test_build_from_fields_rejects_empty_input(builder):
    assert builder.build_from_fields([]) is None
    assert builder.build_from_fields([("teacher", "NN", "nsubj", None)]) is None


@pytest.mark.parametrize("word, expected", [
    ("soldier", True),
    ("1984", True),
    ("a", True),
    ("x", False),
    ("7", False),
    ("abc123", False),
    ("", False),
    ("*", False),
    ("dog\n", False),
    ("1984\n", False),
])
def test_is_valid_word(word, expected):
    assert is_valid_word(word) is expected
