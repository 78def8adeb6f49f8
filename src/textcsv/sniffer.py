"""Delimiter sniffing: classify a bounded prefix as delimited table or plain text.

For each candidate delimiter every sampled line is split (a delimiter between
double quotes does not split), the modal column count is found, and the
share of lines agreeing with the mode becomes the candidate's confidence.
Candidates whose mode is a single column carry no evidence of a delimiter and
are dropped.  The most confident candidate wins; equal confidences go to the
candidate declared first.  Below the minimum confidence the prefix is plain
text.

The source is always rewound to where sniffing started, so the caller can
parse the whole document afterwards.
"""

import logging
from collections import Counter

from textcsv.config import TextAndCSVConfig
from textcsv.errors import UnsupportedSourceError
from textcsv.media_type import CSV, PLAIN, TSV
from textcsv.patterns import QUOTE_CHAR
from textcsv.schema import DelimiterCandidateScore, SniffResult

logger = logging.getLogger(__name__)


# ─── Line Scoring ─────────────────────────────────────────────────────────────


def count_columns(line: str, delimiter: str, quote: str = QUOTE_CHAR) -> int:
    """Return the number of fields in *line*, ignoring delimiters inside quotes."""
    columns = 1
    in_quotes = False
    for char in line:
        if char == quote:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            columns += 1
    return columns


def modal_column_count(counts: list[int]) -> tuple[int, int]:
    """Return (mode, frequency) of *counts*; equally frequent modes go to the wider one."""
    if not counts:
        return 0, 0
    mode, frequency = max(Counter(counts).items(), key=lambda item: (item[1], item[0]))
    return mode, frequency


def score_candidate(lines: list[str], delimiter: str) -> DelimiterCandidateScore | None:
    """Score one delimiter over *lines*; None when its mode is a single column."""
    counts = [count_columns(line, delimiter) for line in lines]
    mode, frequency = modal_column_count(counts)
    if mode <= 1:
        return None
    return DelimiterCandidateScore(delimiter=delimiter, modal_columns=mode, confidence=frequency / len(lines))


# ─── Sniffer ──────────────────────────────────────────────────────────────────


class DelimiterSniffer:
    """Bounded-prefix classifier.  Holds only read-only settings; safe to share."""

    def __init__(
        self,
        mark_limit: int,
        candidates: tuple[str, ...],
        min_confidence: float,
    ) -> None:
        self.mark_limit = mark_limit
        self.candidates = tuple(candidates)
        self.min_confidence = min_confidence

    @classmethod
    def from_config(cls, config: TextAndCSVConfig) -> "DelimiterSniffer":
        return cls(config.mark_limit, config.candidates, config.min_confidence)

    def sample_lines(self, source) -> list[str]:
        """Read at most ``mark_limit`` characters and rewind the source."""
        if not getattr(source, "mark_supported", False):
            raise UnsupportedSourceError(f"{type(source).__name__} does not support mark/reset")
        source.mark(self.mark_limit)
        try:
            sample = source.read(self.mark_limit)
        finally:
            source.reset()

        lines = sample.splitlines()
        # A sample cut off by the limit ends in a partial line that would skew the counts
        if len(sample) >= self.mark_limit and len(lines) > 1 and not sample.endswith(("\n", "\r")):
            lines.pop()
        return [line for line in lines if line.strip()]

    def score(self, lines: list[str]) -> list[DelimiterCandidateScore]:
        """Score every candidate, in declaration order, dropping single-column ones."""
        scores = []
        for delimiter in self.candidates:
            candidate = score_candidate(lines, delimiter) if lines else None
            if candidate is None:
                logger.debug("Candidate %r rejected: no multi-column mode", delimiter)
                continue
            logger.debug(
                "Candidate %r: %d columns, confidence %.3f",
                delimiter,
                candidate.modal_columns,
                candidate.confidence,
            )
            scores.append(candidate)
        return scores

    def classify(self, lines: list[str]) -> SniffResult:
        """Pick the best candidate for already-sampled *lines*."""
        best: DelimiterCandidateScore | None = None
        for candidate in self.score(lines):
            # Strictly greater: an earlier candidate keeps the tie
            if best is None or candidate.confidence > best.confidence:
                best = candidate

        if best is None or best.confidence < self.min_confidence:
            confidence = best.confidence if best is not None else 0.0
            return SniffResult(media_type=PLAIN, delimiter=None, confidence=confidence)

        media_type = TSV if best.delimiter == "\t" else CSV
        return SniffResult(media_type=media_type, delimiter=best.delimiter, confidence=best.confidence)

    def sniff(self, source) -> SniffResult:
        """Classify the prefix of a mark/reset-capable *source*, leaving it rewound."""
        lines = self.sample_lines(source)
        result = self.classify(lines)
        logger.info(
            "Sniffed %d lines as %s (delimiter=%r, confidence=%.3f)",
            len(lines),
            result.media_type.base_type,
            result.delimiter,
            result.confidence,
        )
        return result
