"""Template-driven path search over fragment trees.

For every start node of a fragment and every template of the catalog, the
extractor runs an exhaustive depth-first search and collects the matched word
sequences. Results from all start nodes and all templates are pooled in one
set. Because path equality ignores the template name, two templates that match
the very same word sequence produce a single path, and the template inserted
first (start node order, then catalog order) keeps its name.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Sequence, Set, Tuple

from .fragment_graph import Node
from .patterns import DEFAULT_PATTERNS, Direction, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyPath:
    """A completed template match.

    Equality and hashing consider only the visited nodes (by identity), not
    the template name.

    Attributes
    ----------
    pattern_name : str
        Name of the template that produced the path
    words : Tuple[Node, ...]
        Nodes matched by the template's node tests, in order
    first_slot : int
        Index of the first output word in ``words``
    second_slot : int
        Index of the second output word in ``words``
    """

    pattern_name: str = field(compare=False)
    words: Tuple[Node, ...]
    first_slot: int = field(compare=False)
    second_slot: int = field(compare=False)

    @property
    def first_word(self) -> str:
        return self.words[self.first_slot].word

    @property
    def second_word(self) -> str:
        return self.words[self.second_slot].word

    def to_string(self) -> str:
        return f"{self.pattern_name}[{', '.join(n.word for n in self.words)}]"


class PathExtractor:
    """Match relation templates against fragment trees.

    Parameters
    ----------
    patterns : Sequence[Pattern]
        Template catalog, tried in order for every start node
    """

    def __init__(self, patterns: Sequence[Pattern] = DEFAULT_PATTERNS):
        self.patterns = tuple(patterns)

    def extract(self, graph: Sequence[Node]) -> Set[DependencyPath]:
        """Collect every template match starting at a start node of ``graph``.

        Parameters
        ----------
        graph : Sequence[Node]
            Nodes of one fragment

        Returns
        -------
        Set[DependencyPath]
            Distinct matched paths across all start nodes and templates
        """
        entries: Set[DependencyPath] = set()
        for node in graph:
            if not node.is_start:
                continue
            for pattern in self.patterns:
                entries |= self.search(node, 0, pattern, (), frozenset())
        if entries:
            logger.debug(
                f"Extracted {len(entries)} paths: "
                + ", ".join(p.to_string() for p in entries)
            )
        return entries

    def search(
        self,
        node: Node,
        step: int,
        pattern: Pattern,
        accumulated: Tuple[Node, ...],
        visited: FrozenSet[Node],
    ) -> Set[DependencyPath]:
        """Match ``pattern`` from ``step`` onwards, starting at ``node``.

        ``accumulated`` and ``visited`` are immutable, so every branch of the
        search works on its own copy.
        """
        node_test = pattern.steps[step]
        if node in visited or not node_test.accepts(node):
            return set()

        visited = visited | {node}
        accumulated = accumulated + (node,)

        if step == pattern.last_step:
            return {self._complete(pattern, accumulated)}

        direction = pattern.steps[step + 1]
        edge_test = pattern.steps[step + 2]
        final_pair = step + 2 == pattern.last_step

        paths: Set[DependencyPath] = set()

        if direction is Direction.TO_GOVERNOR:
            edge = node.governor_edge
            if edge is None or not edge_test.accepts(edge.relation):
                return paths
            if final_pair:
                paths.add(self._complete(pattern, accumulated))
            else:
                paths |= self.search(edge.governor, step + 3, pattern, accumulated, visited)
            return paths

        matches = node.select_dependents(edge_test)
        if edge_test.negated:
            if not matches and final_pair:
                paths.add(self._complete(pattern, accumulated))
            return paths

        for edge in matches:
            if final_pair:
                paths.add(self._complete(pattern, accumulated))
            else:
                paths |= self.search(edge.dependent, step + 3, pattern, accumulated, visited)
        return paths

    @staticmethod
    def _complete(pattern: Pattern, accumulated: Tuple[Node, ...]) -> DependencyPath:
        return DependencyPath(
            pattern_name=pattern.name,
            words=accumulated,
            first_slot=pattern.first_slot,
            second_slot=pattern.second_slot,
        )
