"""Relation templates for path extraction.

A template is a sequence of steps: a node test, followed by any number of
``(direction, edge test, node test)`` triples, optionally closed by a final
``(direction, edge test)`` pair that constrains the last node's surroundings
without consuming another word. Two slot indices select which of the matched
words become the tensor key.

The default catalog follows the DepDM link inventory (sbj_intr, sbj_tr, obj,
iobj, nmod, coord, prd, verb) plus one lexicalized link per preposition.
Catalogs can also be loaded from YAML::

    patterns:
      - name: obj
        first_slot: 0
        second_slot: 1
        steps:
          - {node: noun}
          - {to: governor, edge: dobj}
          - {node: verb}
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from .categories import Category, Relation, category_is_a, relation_is_a


class CatalogError(ValueError):
    """Raised when a template cannot be executed as written."""


class Direction(Enum):
    """Which way an edge is followed from the current node."""

    TO_GOVERNOR = "governor"
    TO_DEPENDENT = "dependent"


@dataclass(frozen=True)
class NodeTest:
    """Accept nodes of ``category`` (or any sub-category); None accepts all."""

    category: Optional[Category] = None

    def accepts(self, node) -> bool:
        if self.category is None:
            return True
        return category_is_a(node.category, self.category)

    def to_string(self) -> str:
        return "ANY" if self.category is None else self.category.value


@dataclass(frozen=True)
class EdgeTest:
    """Accept relations that are-a ``relation`` but not-a ``excluding``.

    A negated test succeeds when *no* dependent edge is accepted; it is only
    meaningful as the final pair of a template.
    """

    relation: Relation
    excluding: Optional[Relation] = None
    negated: bool = False

    def accepts(self, relation: Relation) -> bool:
        if not relation_is_a(relation, self.relation):
            return False
        return self.excluding is None or not relation_is_a(relation, self.excluding)

    def to_string(self) -> str:
        label = self.relation.value
        if self.excluding is not None:
            label += f"\\{self.excluding.value}"
        return f"!{label}" if self.negated else label


Step = Union[NodeTest, Direction, EdgeTest]


@dataclass(frozen=True)
class Pattern:
    """A named relation template.

    Attributes
    ----------
    name : str
        Relation name stored in the tensor (not required to be unique)
    steps : Tuple[Step, ...]
        Node tests, directions and edge tests, in traversal order
    first_slot : int
        Index of the first output word among the matched words
    second_slot : int
        Index of the second output word among the matched words
    """

    name: str
    steps: Tuple[Step, ...]
    first_slot: int
    second_slot: int

    def __post_init__(self):
        validate_pattern(self)

    @property
    def last_step(self) -> int:
        return len(self.steps) - 1

    @property
    def node_count(self) -> int:
        return sum(isinstance(s, NodeTest) for s in self.steps)

    def to_string(self) -> str:
        """Return a human-readable rendering, e.g. ``NOUN <-dobj- VERB``."""
        parts = []
        for i, step in enumerate(self.steps):
            if isinstance(step, NodeTest):
                parts.append(step.to_string())
            elif isinstance(step, EdgeTest):
                if self.steps[i - 1] is Direction.TO_GOVERNOR:
                    parts.append(f"<-{step.to_string()}-")
                else:
                    parts.append(f"-{step.to_string()}->")
        return f"{self.name}: " + " ".join(parts)


def validate_pattern(pattern: Pattern) -> None:
    """Check that ``pattern`` has a shape the extractor can execute.

    Raises
    ------
    CatalogError
        If the step sequence or the slot indices are malformed
    """
    steps = pattern.steps
    if not steps or not isinstance(steps[0], NodeTest):
        raise CatalogError(f"{pattern.name}: steps must start with a node test")

    position = 1
    while position < len(steps):
        direction = steps[position]
        edge_test = steps[position + 1] if position + 1 < len(steps) else None
        if not isinstance(direction, Direction) or not isinstance(edge_test, EdgeTest):
            raise CatalogError(
                f"{pattern.name}: expected a direction and an edge test at step {position}"
            )
        final_pair = position + 1 == len(steps) - 1
        if edge_test.negated:
            if not final_pair:
                raise CatalogError(
                    f"{pattern.name}: negated edge test must be the final step"
                )
            if direction is not Direction.TO_DEPENDENT:
                raise CatalogError(
                    f"{pattern.name}: negated edge test must point to dependents"
                )
        if final_pair:
            break
        if not isinstance(steps[position + 2], NodeTest):
            raise CatalogError(
                f"{pattern.name}: expected a node test at step {position + 2}"
            )
        position += 3

    for slot in (pattern.first_slot, pattern.second_slot):
        if not 0 <= slot < pattern.node_count:
            raise CatalogError(
                f"{pattern.name}: slot {slot} outside {pattern.node_count} matched words"
            )


# ============================================================================
# DEFAULT CATALOG
# ============================================================================

ANY = NodeTest()
NOUN = NodeTest(Category.NOUN)
VERB = NodeTest(Category.VERB)
ADJECTIVE = NodeTest(Category.ADJECTIVE)
PREPOSITION = NodeTest(Category.PREPOSITION)
TO = NodeTest(Category.TO)

UP = Direction.TO_GOVERNOR
DOWN = Direction.TO_DEPENDENT

NSUBJ = EdgeTest(Relation.NSUBJ)
NSUBJ_ACTIVE = EdgeTest(Relation.NSUBJ, excluding=Relation.NSUBJPASS)
NSUBJPASS = EdgeTest(Relation.NSUBJPASS)
DOBJ = EdgeTest(Relation.DOBJ)
NO_DOBJ = EdgeTest(Relation.DOBJ, negated=True)
IOBJ = EdgeTest(Relation.IOBJ)
POBJ = EdgeTest(Relation.POBJ)
AGENT = EdgeTest(Relation.AGENT)
AMOD = EdgeTest(Relation.AMOD)
CONJ = EdgeTest(Relation.CONJ)
CC = EdgeTest(Relation.CC)
COP = EdgeTest(Relation.COP)
PREP = EdgeTest(Relation.PREP)
XCOMP = EdgeTest(Relation.XCOMP)
NON_SUBJECT = EdgeTest(Relation.DEP, excluding=Relation.SUBJ)

LEXICAL_PREPOSITIONS = (
    "on", "upon", "at", "among", "between", "for", "of", "with", "by", "from",
    "within", "as", "into", "under", "than", "along", "throughout", "like",
    "up", "above", "if", "since", "without", "until", "beyond", "unlike",
    "notwithstanding", "amongst", "that", "against", "branch", "during",
    "before", "though", "after", "below", "over", "except", "out", "about",
    "per", "despite", "around", "so", "through", "till", "behind", "towards",
    "versus", "outside", "across", "toward", "besides", "off", "near",
    "inside", "round", "unto", "atop", "down",
)


def _preposition_pattern(word: str) -> Pattern:
    lexical = NodeTest(Category[word.upper()])
    return Pattern(word, (NOUN, UP, POBJ, lexical, UP, PREP, VERB), 0, 2)


DEFAULT_PATTERNS: Tuple[Pattern, ...] = (
    Pattern("sbj_intr", (NOUN, UP, NSUBJ_ACTIVE, VERB, DOWN, NO_DOBJ), 0, 1),
    Pattern("sbj_tr", (NOUN, UP, NSUBJ_ACTIVE, VERB, DOWN, DOBJ, ANY), 0, 1),
    Pattern("sbj_tr", (NOUN, UP, AGENT, VERB), 0, 1),
    Pattern("obj", (NOUN, UP, NSUBJPASS, VERB), 0, 1),
    Pattern("obj", (NOUN, UP, DOBJ, VERB), 0, 1),
    Pattern("iobj", (NOUN, UP, IOBJ, VERB), 0, 1),
    Pattern("iobj", (NOUN, UP, POBJ, TO, UP, PREP, VERB, DOWN, DOBJ, ANY), 0, 2),
    Pattern("iobj", (NOUN, UP, NSUBJ, NOUN, UP, XCOMP, VERB), 0, 2),
    Pattern("iobj", (NOUN, UP, NON_SUBJECT, VERB, DOWN, DOBJ, NOUN), 0, 1),
    Pattern("nmod", (NOUN, DOWN, AMOD, ADJECTIVE), 0, 1),
    Pattern("coord", (NOUN, UP, CONJ, NOUN, DOWN, CC), 0, 1),
    Pattern("prd", (NOUN, UP, NSUBJ, ADJECTIVE, DOWN, COP, VERB), 1, 2),
    Pattern("prd", (NOUN, UP, NSUBJ, NOUN, DOWN, COP, VERB), 1, 2),
    Pattern("verb", (NOUN, UP, NSUBJ, VERB, DOWN, PREP, PREPOSITION, DOWN, POBJ, NOUN), 0, 3),
    Pattern("verb", (NOUN, UP, NSUBJ, VERB, DOWN, DOBJ, NOUN), 0, 2),
) + tuple(_preposition_pattern(word) for word in LEXICAL_PREPOSITIONS)


# ============================================================================
# YAML CATALOGS
# ============================================================================

def _lookup(enum_cls, name: str, pattern_name: str):
    try:
        if enum_cls is Relation:
            return Relation(str(name).lower())
        return enum_cls[str(name).upper()]
    except (KeyError, ValueError):
        raise CatalogError(
            f"{pattern_name}: unknown {enum_cls.__name__.lower()} {name!r}"
        ) from None


def _step_from_dict(step: Dict[str, Any], pattern_name: str) -> List[Step]:
    if "node" in step:
        node = step["node"]
        if node is None or str(node).lower() == "any":
            return [ANY]
        return [NodeTest(_lookup(Category, node, pattern_name))]
    if "edge" in step:
        to = str(step.get("to", "")).lower()
        if to not in {d.value for d in Direction}:
            raise CatalogError(f"{pattern_name}: unknown direction {step.get('to')!r}")
        excluding = step.get("excluding")
        return [
            Direction(to),
            EdgeTest(
                relation=_lookup(Relation, step["edge"], pattern_name),
                excluding=_lookup(Relation, excluding, pattern_name) if excluding else None,
                negated=bool(step.get("negated", False)),
            ),
        ]
    raise CatalogError(f"{pattern_name}: step {step!r} is neither a node nor an edge")


def pattern_from_dict(entry: Dict[str, Any]) -> Pattern:
    """Build (and validate) a Pattern from its YAML mapping."""
    if not isinstance(entry, dict):
        raise CatalogError(f"pattern entry {entry!r} is not a mapping")
    name = entry.get("name")
    if not name:
        raise CatalogError(f"pattern without a name: {entry!r}")
    steps: List[Step] = []
    for step in entry.get("steps") or []:
        if not isinstance(step, dict):
            raise CatalogError(f"{name}: step {step!r} is not a mapping")
        steps.extend(_step_from_dict(step, name))
    try:
        first_slot, second_slot = int(entry["first_slot"]), int(entry["second_slot"])
    except (KeyError, TypeError, ValueError):
        raise CatalogError(f"{name}: first_slot and second_slot are required integers") from None
    return Pattern(name, tuple(steps), first_slot, second_slot)


def pattern_to_dict(pattern: Pattern) -> Dict[str, Any]:
    """Convert a Pattern to its YAML mapping."""
    steps: List[Dict[str, Any]] = []
    for step in pattern.steps:
        if isinstance(step, NodeTest):
            steps.append({"node": "any" if step.category is None else step.category.name.lower()})
        elif isinstance(step, Direction):
            steps.append({"to": step.value})
        else:
            entry = steps[-1]
            entry["edge"] = step.relation.value
            if step.excluding is not None:
                entry["excluding"] = step.excluding.value
            if step.negated:
                entry["negated"] = True
    return {
        "name": pattern.name,
        "first_slot": pattern.first_slot,
        "second_slot": pattern.second_slot,
        "steps": steps,
    }


def load_patterns(yaml_path: Union[str, Path]) -> Tuple[Pattern, ...]:
    """Load a template catalog from YAML.

    Parameters
    ----------
    yaml_path : Union[str, Path]
        Path to a file with a top-level ``patterns`` list

    Returns
    -------
    Tuple[Pattern, ...]
        Validated templates, in file order

    Raises
    ------
    CatalogError
        If any template is malformed
    """
    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CatalogError(f"{yaml_path}: invalid YAML: {e}") from e

    entries = document.get("patterns") if isinstance(document, dict) else None
    if not entries:
        raise CatalogError(f"{yaml_path}: no patterns found")
    if not isinstance(entries, list):
        raise CatalogError(f"{yaml_path}: patterns must be a list")
    return tuple(pattern_from_dict(entry) for entry in entries)


def export_patterns(patterns: Sequence[Pattern], yaml_path: Union[str, Path]) -> None:
    """Write a template catalog to YAML."""
    document = {"patterns": [pattern_to_dict(p) for p in patterns]}
    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(document, f, sort_keys=False, default_flow_style=None)
