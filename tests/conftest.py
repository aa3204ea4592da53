"""Shared fixtures for the depdm test suite."""

import pytest

from depdm.fragment_graph import FragmentGraphBuilder
from depdm.path_extractor import PathExtractor
from depdm.tensor import CooccurrenceTensor


SCENARIO_A = "soldier/NN/nsubj/2 read/VBP/root/0 book/NN/dobj/2"
SCENARIO_B = "teacher/NN/nsubj/2 sing/VBG/root/0"
SCENARIO_C = "x/NN/nsubj/2 y/VBZ/root/0"

NGRAM_LINES = [
    f"read\t{SCENARIO_A}\t5\t1990,2\t2000,3",
    f"sing\t{SCENARIO_B}\t4\t1995,4",
    f"y\t{SCENARIO_C}\t7\t1999,7",
    "read\tsoldier/NN/nsubj/2 read/VBP/root/0\t0",
    "broken line without tabs",
    f"read\t{SCENARIO_A}\t3",
]


@pytest.fixture
def builder():
    return FragmentGraphBuilder()


@pytest.fixture
def extractor():
    return PathExtractor()


@pytest.fixture
def tensor():
    return CooccurrenceTensor()


@pytest.fixture
def extract(builder, extractor):
    """Return (first_word, relation, second_word) triples for an n-gram string."""
    def _extract(ngram):
        graph = builder.parse(ngram)
        assert graph is not None, f"fragment did not build: {ngram}"
        return {(p.first_word, p.pattern_name, p.second_word) for p in extractor.extract(graph)}
    return _extract


@pytest.fixture
def ngram_corpus(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("\n".join(NGRAM_LINES) + "\n", encoding="utf-8")
    return path
