"""Corpus readers.

Two on-disk inputs are supported:

- Syntactic N-Grams lines (Goldberg & Orwant, 2013)::

      head_word<TAB>syntactic-ngram<TAB>total_count<TAB>year,count<TAB>...

- CoNLL-U treebanks, read with the ``conllu`` library. Every sentence becomes
  one fragment with an amount of 1.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from conllu import parse_incr

from . import config
from .fragment_graph import FieldRow


@dataclass
class NGramRecord:
    """One line of a syntactic n-gram file."""

    head_word: str
    ngram: str
    total_count: int
    counts_by_year: Dict[int, int] = field(default_factory=dict)


def parse_ngram_line(line: str) -> Optional[NGramRecord]:
    """Parse a tab-separated n-gram line.

    Malformed ``year,count`` pairs are dropped; any other problem makes the
    whole line unusable.

    Parameters
    ----------
    line : str
        One corpus line, with or without its trailing newline

    Returns
    -------
    Optional[NGramRecord]
        The parsed record, or None if the line is malformed
    """
    fields = line.rstrip("\r\n").split(config.CORPUS_FIELD_SEPARATOR)
    if len(fields) < 3:
        return None

    head_word, ngram, raw_total = fields[0], fields[1], fields[2]
    try:
        total_count = int(raw_total)
    except ValueError:
        return None

    counts_by_year: Dict[int, int] = {}
    for pair in fields[3:]:
        year, _, count = pair.partition(",")
        try:
            counts_by_year[int(year)] = int(count)
        except ValueError:
            continue

    return NGramRecord(
        head_word=head_word,
        ngram=ngram,
        total_count=total_count,
        counts_by_year=counts_by_year,
    )


def iter_ngram_lines(path: Union[str, Path]) -> Iterator[str]:
    """Yield the lines of an n-gram file without trailing newlines.

    Raises
    ------
    OSError
        If the file cannot be opened or read
    """
    with open(path, "r", encoding=config.CORPUS_ENCODING) as f:
        for line in f:
            yield line.rstrip("\r\n")


def sentence_to_rows(sentence) -> Optional[List[FieldRow]]:
    """Convert a ``conllu.TokenList`` into ``(form, xpos, deprel, head)`` rows.

    Multi-word tokens (range ids), empty nodes (decimal ids) and punctuation
    are dropped and heads are renumbered over the kept tokens. Returns None
    if a dropped token governs a kept one.
    """
    kept = [
        token for token in sentence
        if isinstance(token["id"], int) and not _is_punctuation(token)
    ]
    positions = {token["id"]: position for position, token in enumerate(kept, start=1)}

    rows: List[FieldRow] = []
    for token in kept:
        head = token["head"]
        if isinstance(head, int) and head != 0:
            if head not in positions:
                return None
            head = positions[head]
        rows.append((
            token["form"],
            token["xpos"] or "",
            token["deprel"] or "",
            head,
        ))
    return rows


def _is_punctuation(token) -> bool:
    return token["upos"] == "PUNCT" or token["deprel"] == "punct"


def iter_conllu_fragments(
    path: Union[str, Path],
) -> Iterator[Tuple[Optional[List[FieldRow]], int]]:
    """Yield ``(rows, 1)`` for every sentence of a CoNLL-U file.

    ``rows`` is None for sentences that cannot be turned into a fragment.

    Raises
    ------
    OSError
        If the file cannot be opened or read
    """
    with open(path, "r", encoding=config.CORPUS_ENCODING) as f:
        for sentence in parse_incr(f):
            yield sentence_to_rows(sentence), 1
