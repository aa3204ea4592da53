"""Distributional model: corpus in, co-occurrence tensor out."""

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from . import config
from .corpus import iter_conllu_fragments, iter_ngram_lines, parse_ngram_line
from .fragment_graph import FieldRow, FragmentGraphBuilder
from .path_extractor import DependencyPath, PathExtractor
from .patterns import DEFAULT_PATTERNS, Pattern
from .tensor import CooccurrenceTensor, ExportResult

logger = logging.getLogger(__name__)


@dataclass
class RunStatistics:
    """Counters collected while reading a corpus.

    ``lines_read`` counts input records: corpus lines for n-gram and raw text
    input, sentences for CoNLL-U.
    """

    lines_read: int = 0
    fragments_built: int = 0
    fragments_skipped: int = 0
    paths_extracted: int = 0
    tensor_additions: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class DistributionalModel:
    """Build a (word, relation, word) tensor from dependency fragments.

    Parameters
    ----------
    patterns : Optional[Sequence[Pattern]]
        Template catalog; the default catalog when None
    builder : Optional[FragmentGraphBuilder]
        Fragment graph builder; a default builder when None
    """

    def __init__(
        self,
        patterns: Optional[Sequence[Pattern]] = None,
        builder: Optional[FragmentGraphBuilder] = None,
    ):
        self.builder = builder or FragmentGraphBuilder()
        self.extractor = PathExtractor(patterns if patterns is not None else DEFAULT_PATTERNS)
        self.tensor = CooccurrenceTensor()
        self.stats = RunStatistics()

    def process_line(self, line: str) -> int:
        """Fold one n-gram corpus line into the tensor.

        Malformed lines, non-positive counts and fragments that do not build
        are skipped.

        Returns
        -------
        int
            Number of tensor additions made for this line
        """
        self.stats.lines_read += 1
        record = parse_ngram_line(line)
        if record is None or record.total_count <= 0:
            logger.debug(f"Skipped line: {line!r}")
            self.stats.fragments_skipped += 1
            return 0
        return self._process_graph(self.builder.parse(record.ngram), record.total_count)

    def process_fragment(
        self, fragment: Union[str, Sequence[FieldRow], None], amount: int = 1
    ) -> int:
        """Fold one fragment into the tensor.

        ``fragment`` is either a serialized n-gram string or a sequence of
        ``(word, tag, label, governor_index)`` rows. None counts as a skipped
        fragment.
        """
        if fragment is None or amount <= 0:
            self.stats.fragments_skipped += 1
            return 0
        if isinstance(fragment, str):
            graph = self.builder.parse(fragment)
        else:
            graph = self.builder.build_from_fields(fragment)
        return self._process_graph(graph, amount)

    def _process_graph(self, graph, amount: int) -> int:
        if graph is None:
            self.stats.fragments_skipped += 1
            return 0
        self.stats.fragments_built += 1

        paths = self.extractor.extract(graph)
        self.stats.paths_extracted += len(paths)
        for path in paths:
            self.add_path(path, amount)
        return len(paths)

    def add_path(self, path: DependencyPath, amount: int) -> None:
        self.tensor.add(path.first_word, path.pattern_name, path.second_word, amount)
        self.stats.tensor_additions += 1

    def run(
        self,
        path: Union[str, Path],
        input_format: str = "ngrams",
        show_progress: bool = True,
        spacy_model: str = config.SPACY_MODEL,
    ) -> RunStatistics:
        """Read a whole corpus into the tensor.

        Parameters
        ----------
        path : Union[str, Path]
            Corpus file
        input_format : str
            One of ``config.INPUT_FORMATS``
        show_progress : bool
            Show a tqdm progress bar
        spacy_model : str
            Pipeline used for the ``text`` format

        Returns
        -------
        RunStatistics
            Counters accumulated over the run

        Raises
        ------
        OSError
            If the corpus cannot be read
        ValueError
            If ``input_format`` is not supported
        """
        if input_format not in config.INPUT_FORMATS:
            raise ValueError(
                f"Unknown input format {input_format!r}; expected one of {config.INPUT_FORMATS}"
            )

        logger.info(f"Reading {input_format} corpus from {path}")
        if input_format == "ngrams":
            for line in tqdm(iter_ngram_lines(path), desc="Lines", unit="line",
                             disable=not show_progress):
                self.process_line(line)
        else:
            for fragment, amount in tqdm(self._iter_fragments(path, input_format, spacy_model),
                                         desc="Sentences", unit="sent",
                                         disable=not show_progress):
                self.process_fragment(fragment, amount)

        logger.info(
            f"Built {self.stats.fragments_built:,} fragments, "
            f"skipped {self.stats.fragments_skipped:,}, "
            f"added {self.stats.tensor_additions:,} paths"
        )
        return self.stats

    def _iter_fragments(
        self, path: Union[str, Path], input_format: str, spacy_model: str
    ) -> Iterator[Tuple[Optional[List[FieldRow]], int]]:
        if input_format == "conllu":
            for rows, amount in iter_conllu_fragments(path):
                self.stats.lines_read += 1
                yield rows, amount
            return

        # Imported here so that spaCy is only loaded for raw text
        from .spacy_adapter import SpacyFragmentParser, sentence_to_rows

        parser = SpacyFragmentParser(spacy_model)
        for line in iter_ngram_lines(path):
            self.stats.lines_read += 1
            if not line.strip():
                continue
            for sentence in parser.nlp(line).sents:
                yield sentence_to_rows(sentence), 1

    def export(
        self, output_dir: Union[str, Path] = config.DEFAULT_OUTPUT_DIR
    ) -> Optional[ExportResult]:
        return self.tensor.export(output_dir)
