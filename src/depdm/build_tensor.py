"""Build a co-occurrence tensor from a dependency-parsed corpus."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import config
from .model import DistributionalModel
from .patterns import CatalogError, load_patterns

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Extract dependency paths from a corpus and export a word x link-word matrix'
    )
    parser.add_argument('corpus', type=Path, help='Corpus file')
    parser.add_argument(
        '--format',
        dest='input_format',
        choices=config.INPUT_FORMATS,
        default='ngrams',
        help='Corpus format: syntactic n-grams, CoNLL-U or raw text (default: ngrams)'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=config.DEFAULT_OUTPUT_DIR,
        help='Directory for the .rows, .cols and .sm files'
    )
    parser.add_argument('--patterns', type=Path, help='YAML template catalog (default: built-in)')
    parser.add_argument(
        '--spacy-model',
        default=config.SPACY_MODEL,
        help=f'spaCy pipeline for --format text (default: {config.SPACY_MODEL})'
    )
    parser.add_argument('--no-progress', action='store_true', help='Disable the progress bar')
    parser.add_argument('--verbose', action='store_true', help='Log at DEBUG level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run extraction and export; return the process exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=config.LOG_FORMAT,
    )

    patterns = None
    if args.patterns:
        try:
            patterns = load_patterns(args.patterns)
        except (OSError, CatalogError) as e:
            logger.error(f"Cannot load patterns from {args.patterns}: {e}")
            return 1
        print(f"Loaded {len(patterns)} patterns from {args.patterns}")

    model = DistributionalModel(patterns=patterns)

    start = time.time()
    try:
        model.run(
            args.corpus,
            input_format=args.input_format,
            show_progress=not args.no_progress,
            spacy_model=args.spacy_model,
        )
    except OSError as e:
        logger.error(f"Cannot read corpus {args.corpus}: {e}")
        return 1
    extraction_ms = int((time.time() - start) * 1000)

    print("\nDone with extraction!")
    print(f"Extraction time: {extraction_ms} ms")
    print(f"Unique words: {model.tensor.word_count:,}")

    result = model.export(args.output_dir)
    if result is None:
        print(f"Export to {args.output_dir} failed, see log")
    else:
        print(f"Matrix: {result.n_rows:,} rows x {result.n_cols:,} cols, {result.n_cells:,} cells")
        print(f"  Rows: {result.rows_path}")
        print(f"  Cols: {result.cols_path}")
        print(f"  Matrix: {result.matrix_path}")

    total_ms = int((time.time() - start) * 1000)
    print(f"Total time: {total_ms} ms")
    return 0


if __name__ == '__main__':
    sys.exit(main())
