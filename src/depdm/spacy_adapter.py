"""Fragments from raw text, parsed with spaCy."""

import logging
import warnings
from typing import Iterator, List, Optional

import spacy
from spacy.tokens import Doc, Span

from . import config
from .fragment_graph import FieldRow

logger = logging.getLogger(__name__)


def sentence_to_rows(sentence: Span) -> Optional[List[FieldRow]]:
    """Convert one parsed sentence into ``(text, tag, dep, head)`` rows.

    Punctuation and whitespace tokens are dropped and governor indices are
    renumbered over the kept tokens. Returns None if a dropped token governs
    a kept one.
    """
    kept = [t for t in sentence if not (t.is_punct or t.is_space)]
    positions = {t.i: position for position, t in enumerate(kept, start=1)}

    rows: List[FieldRow] = []
    for token in kept:
        if token.head.i == token.i:
            governor_index = 0
        elif token.head.i in positions:
            governor_index = positions[token.head.i]
        else:
            logger.debug(f"Dropped sentence: {token.text!r} hangs off {token.head.text!r}")
            return None
        rows.append((token.text, token.tag_, token.dep_, governor_index))
    return rows


def doc_to_fragments(doc: Doc) -> Iterator[List[FieldRow]]:
    """Yield one row list per sentence of ``doc``."""
    for sentence in doc.sents:
        rows = sentence_to_rows(sentence)
        if rows:
            yield rows


class SpacyFragmentParser:
    """Parse raw text lines into fragments with a spaCy pipeline."""

    def __init__(self, model_name: str = config.SPACY_MODEL):
        try:
            self.nlp = spacy.load(model_name)
        except OSError:
            warnings.warn(f"Model {model_name} not found. Run: python -m spacy download {model_name}")
            raise

    def parse(self, text: str) -> Iterator[List[FieldRow]]:
        return doc_to_fragments(self.nlp(text))
