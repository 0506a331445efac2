# regionalise/pipeline.py

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterator, List, Mapping, Optional, Tuple

import regex as re

from .codeaware import SegmentKind, segment
from .config import (
    UnitConfig,
    WordConfig,
    load_unit_config,
    load_user_dictionary,
    load_word_config,
)
from .detect_units import find_unit_spans
from .detect_words import find_word_spans
from .dictionary import DictionaryLookup
from .errors import UnsupportedUnitError
from .ignore import IgnoreScan, line_starts, scan_ignores
from .markdown import convert_markdown
from .models import ConversionResult, Span, UnitMatch, WordMatch
from .resolve import combine_layers, drop_protected
from .textutils import normalise_smart_quotes as normalise_quotes
from .textutils import protected_ranges
from .transform import splice
from .unit_convert import UnitConverter
from .unit_patterns import compile_unit_rules
from .word_patterns import compile_word_rules


logger = logging.getLogger(__name__)

# whitespace after terminal punctuation that is followed by a capitalised word
SENTENCE_BREAK_RE = re.compile(r"(?<=[.!?])\s+(?=[\"'(\[]?[A-Z])")
SENTENCE_MIN_LENGTH = 100


class Converter:
    """
    American-to-British text conversion.

    Rule sets are compiled once here and never change; build a new Converter
    (or use `with_config`) to change settings.
    """

    def __init__(
        self,
        unit_config: Optional[UnitConfig] = None,
        word_config: Optional[WordConfig] = None,
        user_dictionary: Optional[Mapping[str, str]] = None,
        dictionary: Optional[DictionaryLookup] = None,
        detect_raw_code: bool = False,
    ):
        self.unit_config = unit_config or UnitConfig()
        self.word_config = word_config or WordConfig()
        self.user_dictionary = dict(user_dictionary or {})
        self.detect_raw_code = detect_raw_code

        self.unit_rules = compile_unit_rules(self.unit_config)
        self.word_rules = compile_word_rules(self.word_config)
        self.unit_converter = UnitConverter(self.unit_config)
        if dictionary is None:
            dictionary = DictionaryLookup(
                user_table=self.user_dictionary,
                excluded=self.word_config.words.keys(),
            )
        self.dictionary = dictionary

    def with_config(
        self,
        unit_config: Optional[UnitConfig] = None,
        word_config: Optional[WordConfig] = None,
    ) -> "Converter":
        return Converter(
            unit_config=unit_config or self.unit_config,
            word_config=word_config or self.word_config,
            user_dictionary=self.user_dictionary,
            detect_raw_code=self.detect_raw_code,
        )

    # --- detection ---

    def detect_unit_spans(self, text: str) -> List[UnitMatch]:
        return find_unit_spans(text, self.unit_rules)

    def convert_unit_span(self, match: UnitMatch) -> ConversionResult:
        return self.unit_converter.convert(match)

    def detect_word_spans(self, text: str) -> List[WordMatch]:
        return find_word_spans(text, self.word_rules)

    def _converted_unit_spans(self, text: str) -> List[UnitMatch]:
        spans = []
        for match in self.detect_unit_spans(text):
            try:
                match.replacement = self.convert_unit_span(match).formatted
            except UnsupportedUnitError as e:
                logger.warning("Skipping %r: %s", text[match.start:match.end], e)
                continue
            spans.append(match)
        return spans

    def collect_spans(self, text: str) -> List[Span]:
        """
        All replacements for a plain fragment, resolved across detectors.

        Units beat contextual words, which beat the dictionary; nothing inside
        a URL or e-mail address is touched.
        """
        protected = protected_ranges(text)
        units = drop_protected(self._converted_unit_spans(text), protected)
        words = drop_protected(self.detect_word_spans(text), protected)
        lexical = drop_protected(self.dictionary.find_spans(text), protected)
        return combine_layers(units, words, lexical)

    def sentence_spans(self, text: str) -> List[Span]:
        """The replacements `convert_by_sentence` makes, at offsets in `text`."""
        spans: List[Span] = []
        for start, end in _sentence_bounds(text):
            spans += _shifted(self.collect_spans(text[start:end]), start)
        return spans

    def report_spans(
        self,
        text: str,
        normalise_smart_quotes: bool = False,
        ignore_directives: bool = True,
    ) -> List[Span]:
        """
        Replacements `convert_to_regional` would make, at offsets in `text`.

        Code, skipped lines and files marked m2e-ignore-file yield nothing.
        Prose fragments are reported as written, without markdown masking.
        """
        scan = None
        if ignore_directives:
            scan = scan_ignores(text)
            if scan.file_ignored:
                return []

        spans: List[Span] = []
        for start, end, _kind, frozen in self._pieces(text, scan):
            if frozen:
                continue
            chunk = text[start:end]
            if normalise_smart_quotes:
                chunk = normalise_quotes(chunk)
            spans += _shifted(self.collect_spans(chunk), start)
        return spans

    # --- conversion ---

    def convert_plain(self, text: str, normalise_smart_quotes: bool = False) -> str:
        """Dictionary, contextual and unit conversion without any segmentation."""
        if normalise_smart_quotes:
            text = normalise_quotes(text)
        if not text:
            return text
        return splice(text, self.collect_spans(text))

    def convert_by_sentence(self, text: str, normalise_smart_quotes: bool = False) -> str:
        """
        Plain conversion one sentence at a time, so contextual cues never
        reach across a sentence boundary. Short texts convert in one piece.
        """
        out_parts = []
        cursor = 0
        for start, end in _sentence_bounds(text):
            out_parts.append(text[cursor:start])
            out_parts.append(self.convert_plain(text[start:end], normalise_smart_quotes))
            cursor = end
        out_parts.append(text[cursor:])
        return "".join(out_parts)

    def convert_ignoring_directives(self, text: str, normalise_smart_quotes: bool = False) -> str:
        """Code- and markdown-aware conversion that disregards ignore markers."""
        return self._convert_segments(text, None, normalise_smart_quotes)

    def convert_to_regional(self, text: str, normalise_smart_quotes: bool = False) -> str:
        """
        Full conversion: ignore directives, then code awareness, then
        markdown preservation, then the detectors.
        """
        scan = scan_ignores(text)
        if scan.file_ignored:
            logger.debug("m2e-ignore-file present; returning input unchanged")
            return text
        return self._convert_segments(text, scan, normalise_smart_quotes)

    def _pieces(
        self, text: str, scan: Optional[IgnoreScan]
    ) -> Iterator[Tuple[int, int, SegmentKind, bool]]:
        """(start, end, kind, frozen) runs covering `text`; frozen runs are echoed."""
        starts = line_starts(text)
        for seg in segment(text, self.detect_raw_code):
            if seg.kind == SegmentKind.CODE:
                yield seg.start, seg.end, seg.kind, True
                continue
            for chunk_start, chunk_end, skipped in _line_runs(starts, seg.start, seg.end, scan):
                yield chunk_start, chunk_end, seg.kind, skipped

    def _convert_segments(self, text: str, scan: Optional[IgnoreScan], normalise: bool) -> str:
        out_parts = []
        for start, end, kind, frozen in self._pieces(text, scan):
            chunk = text[start:end]
            if frozen:
                out_parts.append(chunk)
            elif kind == SegmentKind.COMMENT:
                # comments carry code punctuation, not markdown
                out_parts.append(self.convert_plain(chunk, normalise))
            else:
                out_parts.append(self._convert_prose(chunk, normalise))
        return "".join(out_parts)

    def _convert_prose(self, text: str, normalise: bool) -> str:
        return convert_markdown(text, lambda inner: self.convert_plain(inner, normalise))


def _shifted(spans: List[Span], offset: int) -> List[Span]:
    return [replace(s, start=s.start + offset, end=s.end + offset) for s in spans]


def _sentence_bounds(text: str) -> List[Tuple[int, int]]:
    if len(text.strip()) < SENTENCE_MIN_LENGTH:
        return [(0, len(text))]
    bounds = []
    cursor = 0
    for m in SENTENCE_BREAK_RE.finditer(text):
        bounds.append((cursor, m.start()))
        cursor = m.end()
    bounds.append((cursor, len(text)))
    return bounds


def _line_runs(starts: List[int], start: int, end: int, scan: Optional[IgnoreScan]):
    """
    Yield (start, end, skipped) runs covering [start, end), split wherever
    the skipped state changes from one line to the next.
    """
    if scan is None or not scan.skipped_lines:
        yield start, end, False
        return

    run_start = start
    run_skipped = None
    for line_no, line_start in enumerate(starts):
        line_end = starts[line_no + 1] if line_no + 1 < len(starts) else None
        if line_end is not None and line_end <= start:
            continue
        if line_start >= end:
            break
        skipped = scan.is_skipped(line_no)
        piece_start = max(line_start, start)
        if run_skipped is None:
            run_skipped = skipped
        elif skipped != run_skipped:
            yield run_start, piece_start, run_skipped
            run_start, run_skipped = piece_start, skipped

    yield run_start, end, bool(run_skipped)


def build_converter(
    unit_config_path: Optional[str] = None,
    word_config_path: Optional[str] = None,
    dictionary_path: Optional[str] = None,
    detect_raw_code: bool = False,
) -> Converter:
    """Converter from optional YAML files; any missing path falls back to defaults."""
    unit_config = load_unit_config(unit_config_path) if unit_config_path else None
    word_config = load_word_config(word_config_path) if word_config_path else None
    user_dictionary = load_user_dictionary(dictionary_path) if dictionary_path else None
    return Converter(unit_config, word_config, user_dictionary, detect_raw_code=detect_raw_code)


def convert_to_regional(text: str, normalise_smart_quotes: bool = False) -> str:
    """One-off conversion with default settings."""
    return Converter().convert_to_regional(text, normalise_smart_quotes)
