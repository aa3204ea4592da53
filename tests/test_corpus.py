import pytest

from depdm.corpus import iter_conllu_fragments, iter_ngram_lines, parse_ngram_line

CONLLU = """# text = Soldiers read books.
1\tSoldiers\tsoldier\tNOUN\tNNS\t_\t2\tnsubj\t_\t_
2\tread\tread\tVERB\tVBD\t_\t0\troot\t_\t_
2.1\tread\tread\tVERB\tVBD\t_\t_\t_\t2:conj\t_
3\tbooks\tbook\tNOUN\tNNS\t_\t2\tdobj\t_\t_
4\t.\t.\tPUNCT\t.\t_\t2\tpunct\t_\t_

# text = Teachers, sing
1\tTeachers\tteacher\tNOUN\tNNS\t_\t3\tnsubj\t_\t_
2\t,\t,\tPUNCT\t,\t_\t3\tpunct\t_\t_
3\tsing\tsing\tVERB\tVBP\t_\t0\troot\t_\t_

# text = read; books
1\tread\tread\tVERB\tVBD\t_\t0\troot\t_\t_
2\t;\t;\tPUNCT\t:\t_\t1\tpunct\t_\t_
3\tbooks\tbook\tNOUN\tNNS\t_\t2\tdobj\t_\t_

"""


def test_parse_ngram_line():
    record = parse_ngram_line(
        "read\tsoldier/NN/nsubj/2 read/VBP/root/0\t12\t1990,5\t2000,7\n"
    )
    assert record.head_word == "read"
    assert record.ngram == "soldier/NN/nsubj/2 read/VBP/root/0"
    assert record.total_count == 12
    assert record.counts_by_year == {1990: 5, 2000: 7}


def test_parse_ngram_line_ignores_bad_year_pairs():
    record = parse_ngram_line("read\tsoldier/NN/root/0\t3\t1990\tyear,2\t2001,3")
    assert record.total_count == 3
    assert record.counts_by_year == {2001: 3}


@pytest.mark.parametrize("line", [
    "",
    "read",
    "read\tsoldier/NN/root/0",
    "read\tsoldier/NN/root/0\tmany",
])
def test_parse_ngram_line_rejects_malformed_lines(line):
    assert parse_ngram_line(line) is None


def test_iter_ngram_lines_strips_newlines(ngram_corpus):
    lines = list(iter_ngram_lines(ngram_corpus))
    assert len(lines) == 6
    assert not any(line.endswith("\n") for line in lines)


def test_iter_ngram_lines_missing_file(tmp_path):
    with pytest.raises(OSError):
        list(iter_ngram_lines(tmp_path / "missing.txt"))


def test_iter_conllu_fragments_drops_punctuation(tmp_path):
    path = tmp_path / "corpus.conllu"
    path.write_text(CONLLU, encoding="utf-8")

    fragments = list(iter_conllu_fragments(path))

    assert fragments == [
        ([
            ("Soldiers", "NNS", "nsubj", 2),
            ("read", "VBD", "root", 0),
            ("books", "NNS", "dobj", 2),
        ], 1),
        ([
            ("Teachers", "NNS", "nsubj", 2),
            ("sing", "VBP", "root", 0),
        ], 1),
        (None, 1),
    ]
