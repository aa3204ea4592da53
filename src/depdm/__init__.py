"""Dependency-path co-occurrence tensor extraction.

This package turns dependency-parsed text into a sparse
(word, link, word) count tensor in the style of Distributional Memory.

The pipeline:
1. Build a typed tree from each dependency fragment
2. Match the fragment against a catalog of relation templates
3. Add every matched (word, template name, word) triple to the tensor
4. Export the tensor, flattened to word x link_word, as plain-text files
"""

__version__ = "1.0.0"

from .categories import Category, Relation
from .fragment_graph import Edge, FragmentGraphBuilder, Node
from .patterns import (
    DEFAULT_PATTERNS,
    CatalogError,
    Direction,
    EdgeTest,
    NodeTest,
    Pattern,
    export_patterns,
    load_patterns,
)
from .path_extractor import DependencyPath, PathExtractor
from .tensor import CooccurrenceTensor, ExportResult, IdTable
from .corpus import NGramRecord, parse_ngram_line
from .model import DistributionalModel, RunStatistics

__all__ = [
    # Categories
    "Category",
    "Relation",
    # Fragment graphs
    "Node",
    "Edge",
    "FragmentGraphBuilder",
    # Templates
    "Pattern",
    "NodeTest",
    "EdgeTest",
    "Direction",
    "CatalogError",
    "DEFAULT_PATTERNS",
    "load_patterns",
    "export_patterns",
    # Extraction & tensor
    "PathExtractor",
    "DependencyPath",
    "CooccurrenceTensor",
    "ExportResult",
    "IdTable",
    # Driver
    "NGramRecord",
    "parse_ngram_line",
    "DistributionalModel",
    "RunStatistics",
]
