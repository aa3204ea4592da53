"""Sparse (word, relation, word) co-occurrence tensor.

Words and relations are interned into integer ids; counts live in nested
dictionaries ``word1_id -> relation_id -> word2_id -> count``. At the end of a
run the tensor is matricized to ``word1 x relation_word2`` and written as the
three plain-text files read by DISSECT-style tools::

    row<ts>.rows     one row label (word1) per line
    col<ts>.cols     one column label (relation_word2) per line
    tensor<ts>.sm    "word1 relation_word2 count" per non-zero cell
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from . import config

logger = logging.getLogger(__name__)

REVERSE_SUFFIX = "_rev"


class IdTable:
    """Bijective mapping between strings and consecutive integer ids."""

    def __init__(self):
        self._ids: Dict[str, int] = {}
        self._keys: List[str] = []

    def intern(self, key: str) -> int:
        """Return the id of ``key``, assigning the next free id if new."""
        if key not in self._ids:
            self._ids[key] = len(self._keys)
            self._keys.append(key)
        return self._ids[key]

    def id_of(self, key: str) -> Optional[int]:
        return self._ids.get(key)

    def key_of(self, key_id: int) -> str:
        return self._keys[key_id]

    def __contains__(self, key: str) -> bool:
        return key in self._ids

    def __len__(self) -> int:
        return len(self._keys)


@dataclass
class ExportResult:
    """Paths and sizes of one export."""

    rows_path: Path
    cols_path: Path
    matrix_path: Path
    n_rows: int
    n_cols: int
    n_cells: int


class CooccurrenceTensor:
    """Accumulate co-occurrence counts keyed by (word1, relation, word2)."""

    def __init__(self):
        self.word_ids = IdTable()
        self.relation_ids = IdTable()
        self._counts: Dict[int, Dict[int, Dict[int, int]]] = defaultdict(
            lambda: defaultdict(dict)
        )

    def add(self, word1: str, relation: str, word2: str, amount: int = 1) -> None:
        """Add ``amount`` to the count of ``(word1, relation, word2)``.

        Raises
        ------
        ValueError
            If ``amount`` is not a positive integer
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError(f"amount must be a positive integer, got {amount!r}")

        word1_id = self.word_ids.intern(word1)
        word2_id = self.word_ids.intern(word2)
        relation_id = self._intern_relation(relation)

        cells = self._counts[word1_id][relation_id]
        cells[word2_id] = cells.get(word2_id, 0) + amount

    def _intern_relation(self, relation: str) -> int:
        if relation in self.relation_ids:
            return self.relation_ids.id_of(relation)
        relation_id = self.relation_ids.intern(relation)
        # Reserved for the inverse link; never populated
        self.relation_ids.intern(relation + REVERSE_SUFFIX)
        return relation_id

    def count(self, word1: str, relation: str, word2: str) -> int:
        """Return the stored count, 0 when the cell is empty."""
        word1_id = self.word_ids.id_of(word1)
        relation_id = self.relation_ids.id_of(relation)
        word2_id = self.word_ids.id_of(word2)
        if word1_id is None or relation_id is None or word2_id is None:
            return 0
        return self._counts.get(word1_id, {}).get(relation_id, {}).get(word2_id, 0)

    def triples(self) -> Iterator[Tuple[str, str, str, int]]:
        """Yield ``(word1, relation, word2, count)`` for every non-zero cell."""
        for word1_id, links in self._counts.items():
            word1 = self.word_ids.key_of(word1_id)
            for relation_id, cells in links.items():
                relation = self.relation_ids.key_of(relation_id)
                for word2_id, value in cells.items():
                    yield word1, relation, self.word_ids.key_of(word2_id), value

    @property
    def word_count(self) -> int:
        """Number of distinct words seen in either word position."""
        return len(self.word_ids)

    def __len__(self) -> int:
        return sum(len(cells) for links in self._counts.values() for cells in links.values())

    def matricize(
        self, dims: Sequence[int] = config.DEFAULT_MATRICIZE_DIMS
    ) -> Dict[str, Dict[str, int]]:
        """Flatten the tensor to ``{word1: {relation_word2: count}}``.

        ``dims`` is accepted for interface compatibility and ignored: rows are
        always word1 and columns always relation x word2.
        """
        matrix: Dict[str, Dict[str, int]] = {}
        for word1, relation, word2, value in self.triples():
            matrix.setdefault(word1, {})[f"{relation}_{word2}"] = value
        return matrix

    def export(
        self,
        output_dir: Union[str, Path] = config.DEFAULT_OUTPUT_DIR,
        timestamp: Optional[int] = None,
        dims: Sequence[int] = config.DEFAULT_MATRICIZE_DIMS,
    ) -> Optional[ExportResult]:
        """Write the matricized tensor as rows, cols and sparse matrix files.

        Parameters
        ----------
        output_dir : Union[str, Path]
            Directory for the three output files
        timestamp : Optional[int]
            Suffix for the file names; defaults to the current time in ms
        dims : Sequence[int]
            Passed on to :meth:`matricize`

        Returns
        -------
        Optional[ExportResult]
            Paths and sizes of the written files, or None if writing failed
        """
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        output_dir = Path(output_dir)
        rows_path = output_dir / f"{config.ROWS_PREFIX}{timestamp}{config.ROWS_SUFFIX}"
        cols_path = output_dir / f"{config.COLS_PREFIX}{timestamp}{config.COLS_SUFFIX}"
        matrix_path = output_dir / f"{config.MATRIX_PREFIX}{timestamp}{config.MATRIX_SUFFIX}"

        matrix = self.matricize(dims)
        columns: Dict[str, None] = {}
        n_cells = 0

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            with open(rows_path, "w", encoding="utf-8") as row_writer, \
                    open(cols_path, "w", encoding="utf-8") as col_writer, \
                    open(matrix_path, "w", encoding="utf-8") as matrix_writer:
                for word, row in matrix.items():
                    row_writer.write(word + "\n")
                    for column, value in row.items():
                        matrix_writer.write(f"{word} {column} {value}\n")
                        columns[column] = None
                        n_cells += 1
                # Column order is not meaningful
                for column in columns:
                    col_writer.write(column + "\n")
        except OSError as e:
            logger.error(f"Export to {output_dir} failed: {e}")
            return None

        logger.info(
            f"Exported {len(matrix):,} rows x {len(columns):,} cols "
            f"({n_cells:,} cells) to {output_dir}"
        )
        return ExportResult(
            rows_path=rows_path,
            cols_path=cols_path,
            matrix_path=matrix_path,
            n_rows=len(matrix),
            n_cols=len(columns),
            n_cells=n_cells,
        )
