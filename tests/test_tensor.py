import pytest

from depdm.tensor import IdTable


def test_id_table_assigns_consecutive_ids():
    table = IdTable()
    assert table.intern("soldier") == 0
    assert table.intern("read") == 1
    assert table.intern("soldier") == 0
    assert table.id_of("book") is None
    assert table.key_of(1) == "read"
    assert "read" in table and "book" not in table
    assert len(table) == 2


def test_counts_accumulate(tensor):
    tensor.add("A", "R", "B", 5)
    tensor.add("A", "R", "B", 3)
    assert tensor.count("A", "R", "B") == 8
    assert tensor.count("B", "R", "A") == 0
    assert tensor.count("A", "missing", "B") == 0
    assert len(tensor) == 1


def test_ids_are_stable(tensor):
    tensor.add("soldier", "sbj_tr", "read")
    tensor.add("book", "obj", "read")
    tensor.add("soldier", "sbj_tr", "read")

    assert tensor.word_ids.id_of("soldier") == 0
    assert tensor.word_ids.id_of("read") == 1
    assert tensor.word_ids.id_of("book") == 2
    assert tensor.word_count == 3


def test_relations_reserve_reverse_id(tensor):
    tensor.add("soldier", "sbj_tr", "read")
    tensor.add("book", "obj", "read")

    assert tensor.relation_ids.id_of("sbj_tr") == 0
    assert tensor.relation_ids.id_of("sbj_tr_rev") == 1
    assert tensor.relation_ids.id_of("obj") == 2
    assert tensor.count("read", "sbj_tr_rev", "soldier") == 0


@pytest.mark.parametrize("amount", [0, -2, 1.5, True])
def test_rejects_bad_amounts(tensor, amount):
    with pytest.raises(ValueError):
        tensor.add("A", "R", "B", amount)
    assert len(tensor) == 0


def test_matricize(tensor):
    tensor.add("soldier", "sbj_tr", "read", 5)
    tensor.add("soldier", "verb", "book", 2)
    tensor.add("book", "obj", "read", 1)

    assert tensor.matricize() == {
        "soldier": {"sbj_tr_read": 5, "verb_book": 2},
        "book": {"obj_read": 1},
    }
    assert tensor.matricize((0, 2)) == tensor.matricize()


def test_export_writes_three_files(tensor, tmp_path):
    tensor.add("soldier", "sbj_tr", "read", 5)
    tensor.add("book", "obj", "read", 2)
    tensor.add("soldier", "sbj_tr", "read", 1)

    result = tensor.export(tmp_path / "out", timestamp=123)

    assert result.rows_path.name == "row123.rows"
    assert result.cols_path.name == "col123.cols"
    assert result.matrix_path.name == "tensor123.sm"
    assert result.rows_path.read_text().splitlines() == ["soldier", "book"]
    assert sorted(result.cols_path.read_text().splitlines()) == ["obj_read", "sbj_tr_read"]
    assert result.matrix_path.read_text().splitlines() == [
        "soldier sbj_tr_read 6",
        "book obj_read 2",
    ]
    assert (result.n_rows, result.n_cols, result.n_cells) == (2, 2, 2)


def test_export_round_trip(tensor, tmp_path):
    tensor.add("soldier", "sbj_tr", "read", 5)
    tensor.add("teacher", "sbj_intr", "sing", 4)
    tensor.add("book", "obj", "read", 2)

    result = tensor.export(tmp_path, timestamp=1)
    reread = {}
    for line in result.matrix_path.read_text().splitlines():
        word, column, value = line.split(" ")
        reread.setdefault(word, {})[column] = int(value)

    assert reread == tensor.matricize()
    assert set(result.rows_path.read_text().split()) == set(reread)


def test_export_failure_returns_none(tensor, tmp_path, caplog):
    tensor.add("A", "R", "B")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    assert tensor.export(blocker / "out", timestamp=1) is None
    assert "Export" in caplog.text
