"""Configuration for the co-occurrence tensor pipeline."""

import re
from pathlib import Path


# Output
DEFAULT_OUTPUT_DIR = Path(".")
ROWS_PREFIX, ROWS_SUFFIX = "row", ".rows"
COLS_PREFIX, COLS_SUFFIX = "col", ".cols"
MATRIX_PREFIX, MATRIX_SUFFIX = "tensor", ".sm"

# Matricization keeps word1 as rows; the dims argument is accepted but unused
DEFAULT_MATRICIZE_DIMS = (1,)

# Fragment tokens: word/POS-TAG/DEP-LABEL/governor-index
# Word patterns are applied with fullmatch
TOKEN_SEPARATOR = " "
FIELD_SEPARATOR = "/"
FIELDS_PER_TOKEN = 4
ONLY_LETTERS = re.compile(r"[a-zA-Z]+")
ONLY_DIGITS = re.compile(r"[0-9]+")
ALLOWED_SINGLE_CHARACTER_WORDS = frozenset({"a"})

# Corpus lines: head_word \t syntactic-ngram \t total_count \t counts_by_year...
CORPUS_FIELD_SEPARATOR = "\t"
CORPUS_ENCODING = "utf-8"

# Input formats understood by the driver
INPUT_FORMATS = ("ngrams", "conllu", "text")

# spaCy configuration (raw text input only)
SPACY_MODEL = "en_core_web_sm"

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
