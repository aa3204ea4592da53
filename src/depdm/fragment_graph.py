"""Graph construction for syntactic n-gram fragments.

A fragment is a space-separated list of tokens of the form
``word/POS-TAG/DEP-LABEL/governor-index`` where the governor index is 1-based
and ``0`` marks the root, e.g.::

    statistical/JJ/amod/2 efficiency/NN/pobj/0

Every token becomes a Node; every token with a non-zero governor index
becomes an Edge owned by its governor. Fragments that fail validation yield
no graph at all, never a partial one.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

from . import config
from .categories import (
    START_CATEGORIES,
    Category,
    Relation,
    is_start_category,
    resolve_edge_relation,
    resolve_node_category,
)

logger = logging.getLogger(__name__)

# (word, pos_tag, relation_label, governor_index)
FieldRow = Tuple[str, str, str, Union[str, int]]


@dataclass(eq=False)
class Node:
    """A word in a fragment, tagged with its category.

    Attributes
    ----------
    category : Category
        Category resolved from the POS tag (and word, for prepositions)
    word : str
        Surface form as found in the corpus
    tag : str
        POS tag as found in the corpus
    index : int
        0-based position in the fragment
    governor_edge : Optional[Edge]
        Edge to the governing node, None for the root
    dependent_edges : List[Edge]
        Edges from dependents, in token order
    is_start : bool
        Whether a path search may start here
    """

    category: Category
    word: str
    tag: str = ""
    index: int = 0
    governor_edge: Optional["Edge"] = field(default=None, repr=False)
    dependent_edges: List["Edge"] = field(default_factory=list, repr=False)
    is_start: bool = False

    @property
    def governor(self) -> Optional["Node"]:
        """The governing node, if any."""
        return self.governor_edge.governor if self.governor_edge else None

    def select_dependents(self, edge_test) -> List["Edge"]:
        """Return the dependent edges whose relation passes ``edge_test``."""
        return [e for e in self.dependent_edges if edge_test.accepts(e.relation)]


@dataclass(eq=False)
class Edge:
    """A typed dependency from ``dependent`` to its ``governor``."""

    relation: Relation
    dependent: Node = field(repr=False)
    governor: Node = field(repr=False)

    def __repr__(self) -> str:
        return (
            f"Edge({self.dependent.word} -{self.relation.value}-> "
            f"{self.governor.word})"
        )


class FragmentGraphBuilder:
    """Build fragment trees from serialized dependency-parse tokens.

    Parameters
    ----------
    start_categories : FrozenSet[Category]
        Categories whose nodes are flagged as search entry points
    """

    def __init__(self, start_categories: FrozenSet[Category] = START_CATEGORIES):
        self.start_categories = frozenset(start_categories)

    def parse(self, ngram: str) -> Optional[List[Node]]:
        """Build a graph from a whole space-separated fragment string."""
        return self.build(ngram.split(config.TOKEN_SEPARATOR))

    def build(self, tokens: Sequence[str]) -> Optional[List[Node]]:
        """Build a graph from ``word/TAG/label/index`` tokens.

        Parameters
        ----------
        tokens : Sequence[str]
            Serialized tokens, in fragment order

        Returns
        -------
        Optional[List[Node]]
            The nodes of the fragment tree, or None if any token is invalid
        """
        rows = []
        for token in tokens:
            parts = token.split(config.FIELD_SEPARATOR)
            # The word is checked before the field count
            if not is_valid_word(parts[0]):
                logger.debug(f"Rejected fragment: invalid word in {token!r}")
                return None
            if len(parts) != config.FIELDS_PER_TOKEN:
                logger.debug(f"Rejected fragment: {token!r} has {len(parts)} fields")
                return None
            rows.append(tuple(parts))
        return self.build_from_fields(rows)

    def build_from_fields(self, rows: Sequence[FieldRow]) -> Optional[List[Node]]:
        """Build a graph from pre-split ``(word, tag, label, index)`` rows.

        Parameters
        ----------
        rows : Sequence[FieldRow]
            One row per token; the governor index may be a str or an int

        Returns
        -------
        Optional[List[Node]]
            The nodes of the fragment tree, or None if any row is invalid
        """
        if not rows:
            return None

        nodes: List[Node] = []
        relations: List[Relation] = []
        governor_indices: List[int] = []

        for position, row in enumerate(rows):
            if len(row) != config.FIELDS_PER_TOKEN:
                logger.debug(f"Rejected fragment: row {row!r} has {len(row)} fields")
                return None
            word, tag, label, raw_index = row

            if not is_valid_word(word):
                logger.debug(f"Rejected fragment: invalid word {word!r}")
                return None

            try:
                governor_index = int(raw_index)
            except (TypeError, ValueError):
                logger.debug(f"Rejected fragment: governor index {raw_index!r}")
                return None
            if not 0 <= governor_index <= len(rows) or governor_index == position + 1:
                logger.debug(f"Rejected fragment: governor index {governor_index} out of range")
                return None

            category = resolve_node_category(tag, word)
            if category is None:
                logger.debug(f"Rejected fragment: unknown category for {word}/{tag}")
                return None
            relation = resolve_edge_relation(label)
            if relation is None:
                logger.debug(f"Rejected fragment: unknown relation {label!r}")
                return None

            nodes.append(Node(
                category=category,
                word=word,
                tag=tag,
                index=position,
                is_start=is_start_category(category, self.start_categories),
            ))
            relations.append(relation)
            governor_indices.append(governor_index)

        if _has_cycle(governor_indices):
            logger.debug("Rejected fragment: governor links form a cycle")
            return None

        for node, relation, governor_index in zip(nodes, relations, governor_indices):
            if governor_index == 0:
                continue
            governor = nodes[governor_index - 1]
            edge = Edge(relation=relation, dependent=node, governor=governor)
            governor.dependent_edges.append(edge)
            node.governor_edge = edge

        return nodes


def is_valid_word(word: str) -> bool:
    """Return True if ``word`` is all letters or all digits.

    Single characters are rejected, except for the article "a". The empty
    word is rejected too, so a token such as ``/NN/nsubj/2`` invalidates its
    fragment. A trailing newline is not part of a valid word.
    """
    if not (config.ONLY_LETTERS.fullmatch(word) or config.ONLY_DIGITS.fullmatch(word)):
        return False
    if len(word) == 1 and word not in config.ALLOWED_SINGLE_CHARACTER_WORDS:
        return False
    return True


def _has_cycle(governor_indices: Sequence[int]) -> bool:
    """Check whether following 1-based governor indices can loop."""
    limit = len(governor_indices)
    for start in range(limit):
        current, steps = start, 0
        while governor_indices[current] != 0:
            current = governor_indices[current] - 1
            steps += 1
            if steps > limit:
                return True
    return False
