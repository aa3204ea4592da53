"""Closed category and relation tables for dependency-parse fragments.

Part-of-speech tags follow the Penn Treebank tag set and relation labels follow
the Stanford typed dependencies (plus the ClearNLP labels emitted by spaCy's
English pipelines). Both are closed: a tag or label missing from these tables
is a recoverable miss that makes the whole fragment unusable.

Prepositions are lexicalized: a token tagged ``IN`` gets a category derived
from the word itself, so that templates can select ``on`` or ``with``
specifically while the generic preposition test still matches all of them.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional


class Category(Enum):
    """Node categories."""

    NOUN = "NOUN"
    VERB = "VERB"
    ADJECTIVE = "ADJECTIVE"
    TO = "TO"
    PREPOSITION = "PREPOSITION"
    GENERIC = "GENERIC"

    # Lexicalized prepositions (word under the IN tag, uppercased)
    ABOARD = "ABOARD"
    ABOUT = "ABOUT"
    ABOVE = "ABOVE"
    ACROSS = "ACROSS"
    AFTER = "AFTER"
    AGAINST = "AGAINST"
    ALONG = "ALONG"
    ALTHOUGH = "ALTHOUGH"
    AMID = "AMID"
    AMONG = "AMONG"
    AMONGST = "AMONGST"
    AROUND = "AROUND"
    AS = "AS"
    AT = "AT"
    ATOP = "ATOP"
    BECAUSE = "BECAUSE"
    BEFORE = "BEFORE"
    BEHIND = "BEHIND"
    BELOW = "BELOW"
    BENEATH = "BENEATH"
    BESIDE = "BESIDE"
    BESIDES = "BESIDES"
    BETWEEN = "BETWEEN"
    BEYOND = "BEYOND"
    BRANCH = "BRANCH"
    BY = "BY"
    DESPITE = "DESPITE"
    DOWN = "DOWN"
    DURING = "DURING"
    EXCEPT = "EXCEPT"
    FOR = "FOR"
    FROM = "FROM"
    IF = "IF"
    INSIDE = "INSIDE"
    INTO = "INTO"
    LIKE = "LIKE"
    NEAR = "NEAR"
    NOTWITHSTANDING = "NOTWITHSTANDING"
    OF = "OF"
    OFF = "OFF"
    ON = "ON"
    ONTO = "ONTO"
    OUT = "OUT"
    OUTSIDE = "OUTSIDE"
    OVER = "OVER"
    PAST = "PAST"
    PER = "PER"
    ROUND = "ROUND"
    SINCE = "SINCE"
    SO = "SO"
    THAN = "THAN"
    THAT = "THAT"
    THOUGH = "THOUGH"
    THROUGH = "THROUGH"
    THROUGHOUT = "THROUGHOUT"
    TILL = "TILL"
    TOWARD = "TOWARD"
    TOWARDS = "TOWARDS"
    UNDER = "UNDER"
    UNDERNEATH = "UNDERNEATH"
    UNLESS = "UNLESS"
    UNLIKE = "UNLIKE"
    UNTIL = "UNTIL"
    UNTO = "UNTO"
    UP = "UP"
    UPON = "UPON"
    VERSUS = "VERSUS"
    VIA = "VIA"
    WHETHER = "WHETHER"
    WHILE = "WHILE"
    WITH = "WITH"
    WITHIN = "WITHIN"
    WITHOUT = "WITHOUT"


class Relation(Enum):
    """Dependency relations; the value is the lowercase label."""

    DEP = "dep"
    ROOT = "root"
    AUX = "aux"
    AUXPASS = "auxpass"
    COP = "cop"
    ARG = "arg"
    AGENT = "agent"
    COMP = "comp"
    ACOMP = "acomp"
    ATTR = "attr"
    CCOMP = "ccomp"
    XCOMP = "xcomp"
    COMPLM = "complm"
    MARK = "mark"
    REL = "rel"
    PCOMP = "pcomp"
    OPRD = "oprd"
    OBJ = "obj"
    DOBJ = "dobj"
    IOBJ = "iobj"
    POBJ = "pobj"
    DATIVE = "dative"
    SUBJ = "subj"
    NSUBJ = "nsubj"
    NSUBJPASS = "nsubjpass"
    CSUBJ = "csubj"
    CSUBJPASS = "csubjpass"
    CC = "cc"
    CONJ = "conj"
    EXPL = "expl"
    MOD = "mod"
    AMOD = "amod"
    APPOS = "appos"
    ADVCL = "advcl"
    PURPCL = "purpcl"
    DET = "det"
    PREDET = "predet"
    PRECONJ = "preconj"
    INFMOD = "infmod"
    PARTMOD = "partmod"
    VMOD = "vmod"
    ACL = "acl"
    RELCL = "relcl"
    MWE = "mwe"
    ADVMOD = "advmod"
    NEG = "neg"
    RCMOD = "rcmod"
    QUANTMOD = "quantmod"
    NN = "nn"
    COMPOUND = "compound"
    NPADVMOD = "npadvmod"
    TMOD = "tmod"
    NUM = "num"
    NUMMOD = "nummod"
    NUMBER = "number"
    NMOD = "nmod"
    PREP = "prep"
    POSS = "poss"
    POSSESSIVE = "possessive"
    PRT = "prt"
    CASE = "case"
    PARATAXIS = "parataxis"
    PUNCT = "punct"
    REF = "ref"
    SDEP = "sdep"
    XSUBJ = "xsubj"
    GOESWITH = "goeswith"
    DISCOURSE = "discourse"
    INTJ = "intj"
    META = "meta"


# ============================================================================
# HIERARCHIES
# ============================================================================

PREPOSITION_CATEGORIES: FrozenSet[Category] = frozenset(
    c for c in Category
    if c not in {
        Category.NOUN, Category.VERB, Category.ADJECTIVE, Category.TO,
        Category.PREPOSITION, Category.GENERIC,
    }
)

CATEGORY_PARENTS: Dict[Category, Category] = {
    c: Category.PREPOSITION for c in PREPOSITION_CATEGORIES
}

# Stanford typed dependency hierarchy (child -> parent). DEP is the root.
RELATION_PARENTS: Dict[Relation, Relation] = {
    Relation.ROOT: Relation.DEP,
    Relation.AUX: Relation.DEP,
    Relation.AUXPASS: Relation.AUX,
    Relation.COP: Relation.AUX,
    Relation.ARG: Relation.DEP,
    Relation.AGENT: Relation.ARG,
    Relation.COMP: Relation.ARG,
    Relation.ACOMP: Relation.COMP,
    Relation.ATTR: Relation.COMP,
    Relation.CCOMP: Relation.COMP,
    Relation.XCOMP: Relation.COMP,
    Relation.COMPLM: Relation.COMP,
    Relation.MARK: Relation.COMP,
    Relation.REL: Relation.COMP,
    Relation.PCOMP: Relation.COMP,
    Relation.OPRD: Relation.COMP,
    Relation.OBJ: Relation.COMP,
    Relation.DOBJ: Relation.OBJ,
    Relation.IOBJ: Relation.OBJ,
    Relation.POBJ: Relation.OBJ,
    Relation.DATIVE: Relation.OBJ,
    Relation.SUBJ: Relation.ARG,
    Relation.NSUBJ: Relation.SUBJ,
    Relation.NSUBJPASS: Relation.NSUBJ,
    Relation.CSUBJ: Relation.SUBJ,
    Relation.CSUBJPASS: Relation.CSUBJ,
    Relation.CC: Relation.DEP,
    Relation.CONJ: Relation.DEP,
    Relation.EXPL: Relation.DEP,
    Relation.MOD: Relation.DEP,
    Relation.AMOD: Relation.MOD,
    Relation.APPOS: Relation.MOD,
    Relation.ADVCL: Relation.MOD,
    Relation.PURPCL: Relation.MOD,
    Relation.DET: Relation.MOD,
    Relation.PREDET: Relation.MOD,
    Relation.PRECONJ: Relation.MOD,
    Relation.INFMOD: Relation.MOD,
    Relation.PARTMOD: Relation.MOD,
    Relation.VMOD: Relation.MOD,
    Relation.ACL: Relation.MOD,
    Relation.RELCL: Relation.MOD,
    Relation.MWE: Relation.MOD,
    Relation.ADVMOD: Relation.MOD,
    Relation.NEG: Relation.ADVMOD,
    Relation.RCMOD: Relation.MOD,
    Relation.QUANTMOD: Relation.MOD,
    Relation.NN: Relation.MOD,
    Relation.COMPOUND: Relation.MOD,
    Relation.NPADVMOD: Relation.MOD,
    Relation.TMOD: Relation.NPADVMOD,
    Relation.NUM: Relation.MOD,
    Relation.NUMMOD: Relation.MOD,
    Relation.NUMBER: Relation.MOD,
    Relation.NMOD: Relation.MOD,
    Relation.PREP: Relation.MOD,
    Relation.POSS: Relation.MOD,
    Relation.POSSESSIVE: Relation.MOD,
    Relation.PRT: Relation.MOD,
    Relation.CASE: Relation.DEP,
    Relation.PARATAXIS: Relation.DEP,
    Relation.PUNCT: Relation.DEP,
    Relation.REF: Relation.DEP,
    Relation.SDEP: Relation.DEP,
    Relation.XSUBJ: Relation.SDEP,
    Relation.GOESWITH: Relation.DEP,
    Relation.DISCOURSE: Relation.DEP,
    Relation.INTJ: Relation.DEP,
    Relation.META: Relation.DEP,
}


def category_is_a(category: Category, ancestor: Category) -> bool:
    """Return True if ``category`` equals ``ancestor`` or descends from it."""
    current: Optional[Category] = category
    while current is not None:
        if current is ancestor:
            return True
        current = CATEGORY_PARENTS.get(current)
    return False


def relation_is_a(relation: Relation, ancestor: Relation) -> bool:
    """Return True if ``relation`` equals ``ancestor`` or descends from it."""
    current: Optional[Relation] = relation
    while current is not None:
        if current is ancestor:
            return True
        current = RELATION_PARENTS.get(current)
    return False


# ============================================================================
# LOOKUP TABLES
# ============================================================================

PREPOSITION_TAG = "IN"

POS_TAG_CATEGORIES: Dict[str, Category] = {
    "NN": Category.NOUN,
    "NNS": Category.NOUN,
    "NNP": Category.NOUN,
    "NNPS": Category.NOUN,
    "VB": Category.VERB,
    "VBD": Category.VERB,
    "VBG": Category.VERB,
    "VBN": Category.VERB,
    "VBP": Category.VERB,
    "VBZ": Category.VERB,
    "JJ": Category.ADJECTIVE,
    "JJR": Category.ADJECTIVE,
    "JJS": Category.ADJECTIVE,
    "TO": Category.TO,
    **{
        tag: Category.GENERIC
        for tag in (
            "CC", "CD", "DT", "EX", "FW", "LS", "MD", "PDT", "POS", "PRP",
            "PRP$", "RB", "RBR", "RBS", "RP", "SYM", "UH", "WDT", "WP", "WP$",
            "WRB",
        )
    },
}

# Words under the IN tag. "in" is the generic introducer, "to" behaves like TO.
PREPOSITION_WORDS: Dict[str, Category] = {
    "IN": Category.PREPOSITION,
    "TO": Category.TO,
    **{c.value: c for c in PREPOSITION_CATEGORIES},
}

RELATION_LABELS: Dict[str, Relation] = {r.value: r for r in Relation}

# Categories whose nodes may start a path search.
START_CATEGORIES: FrozenSet[Category] = frozenset({Category.NOUN})


def resolve_node_category(pos_tag: str, word: str) -> Optional[Category]:
    """Map a POS tag (and, for prepositions, the word) to a category.

    Returns None when the tag or the preposition is not in the tables.
    """
    if pos_tag == PREPOSITION_TAG:
        return PREPOSITION_WORDS.get(word.upper())
    return POS_TAG_CATEGORIES.get(pos_tag)


def resolve_edge_relation(label: str) -> Optional[Relation]:
    """Map a dependency label to a relation, ignoring case."""
    return RELATION_LABELS.get(label.lower())


def is_start_category(
    category: Category,
    start_categories: Iterable[Category] = START_CATEGORIES,
) -> bool:
    """Return True if nodes of ``category`` qualify as search entry points."""
    return any(category_is_a(category, start) for start in start_categories)


def is_start(node, start_categories: Iterable[Category] = START_CATEGORIES) -> bool:
    """Return True if ``node`` qualifies as a search entry point."""
    return is_start_category(node.category, start_categories)
