"""Financial-statement locator: sliding-window indicator search.

Algorithm:
  1.  Build a normalized copy of the document (lowercase, NFD, combining
      accents stripped).  It is used only for matching; chunks are always
      sliced from the original-case text.
  2.  For each statement type slide a ``window_size`` window over the
      normalized text every ``overlap_stride`` characters and score it by the
      number of *distinct* indicators it contains.
  3.  Keep the five highest scores and the start of the single best window.
      Only a strictly higher score replaces the best window, so ties go to
      the earliest window.
  4.  English first.  If any of the three types scores below
      ``language_threshold``, all three are re-scanned with the Spanish sets.
  5.  Each chunk goes through the chunk cleaner for trimming / unit detection.

A locator holds only read-only configuration; one instance can serve
concurrent calls from several threads.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable, Mapping

from fs_locator.cleaner import ChunkCleaner, passthrough_cleaner
from fs_locator.config import Settings, get_config
from fs_locator.indicators import INDICATOR_SETS
from fs_locator.models import (
    ChunkMetrics,
    Language,
    PreprocessResult,
    ScanResult,
    StatementResult,
    StatementType,
)

log = logging.getLogger(__name__)

_COMBINING_MARKS_RE = re.compile(r"[\u0300-\u036f]")

_STATEMENT_ORDER = (StatementType.BALANCE, StatementType.INCOME, StatementType.CASH_FLOW)
_TOP_N = 5


class PreprocessingError(Exception):
    """Raised when ``preprocess`` fails for any reason."""


def normalize_text(content: str) -> str:
    """Lowercase and strip accents so 'Situación' matches 'situacion'."""
    decomposed = unicodedata.normalize("NFD", content.lower())
    return _COMBINING_MARKS_RE.sub("", decomposed)


class StatementLocator:
    """Finds balance sheet, income statement and cash-flow excerpts."""

    def __init__(
        self,
        settings: Settings | None = None,
        indicators: Mapping[tuple[StatementType, Language], Iterable[str]] | None = None,
        cleaner: ChunkCleaner | None = None,
    ):
        cfg = settings or get_config()
        self.window_size = cfg.window_size
        self.overlap_stride = cfg.overlap_stride
        self.buffer_size = cfg.buffer_size
        self.output_chunk_size = cfg.output_chunk_size
        self.language_threshold = cfg.language_threshold
        self._indicators = indicators if indicators is not None else INDICATOR_SETS
        self._cleaner = cleaner or passthrough_cleaner

    # ── Public API ────────────────────────────────────────────────────

    def preprocess(self, content: str, period: str) -> PreprocessResult:
        """Locate all three statements in *content* and clean each chunk.

        Raises :class:`PreprocessingError` on any internal failure.
        """
        try:
            content = content or ""
            normalized = normalize_text(content)

            language = Language.EN
            scans = self._scan_all(content, normalized, language)
            weak = [
                st.value for st, scan in scans.items()
                if scan.metrics.first_unique_hits < self.language_threshold
            ]
            if weak:
                log.info(
                    "English hits below %d for %s, rescanning all statements in Spanish",
                    self.language_threshold, ", ".join(weak),
                )
                language = Language.ES
                scans = self._scan_all(content, normalized, language)

            results: dict[StatementType, StatementResult] = {}
            for st in _STATEMENT_ORDER:
                scan = scans[st]
                cleaned = self._cleaner(st, scan.chunk, language, period)
                results[st] = StatementResult(
                    **scan.model_dump(),
                    statement_type=st,
                    language=language,
                    cleaned=cleaned.text,
                    units=cleaned.units,
                )

            return PreprocessResult(
                balance_result=results[StatementType.BALANCE],
                income_result=results[StatementType.INCOME],
                cash_flow_result=results[StatementType.CASH_FLOW],
                language=language,
            )
        except Exception as exc:
            log.exception("Error in StatementLocator.preprocess")
            raise PreprocessingError("Preprocessing failed") from exc

    def find_chunk(self, content: str, normalized: str, indicators: Iterable[str]) -> ScanResult:
        """Scan *normalized* for the window with the most distinct indicators.

        Returns the matching excerpt of *content*, the top-five hit counts and
        the indicators found in the best window.
        """
        indicator_list = list(indicators)
        counts = [0] * _TOP_N
        best_start = 0
        best_indicators: list[str] = []

        for start in range(0, len(normalized), self.overlap_stride):
            window = normalized[start:start + self.window_size]
            found = list(dict.fromkeys(ind for ind in indicator_list if ind in window))
            count = len(found)

            # Strict '>' at every rank: equal scores never displace earlier ones
            for rank in range(_TOP_N):
                if count > counts[rank]:
                    counts[rank + 1:] = counts[rank:_TOP_N - 1]
                    counts[rank] = count
                    if rank == 0:
                        best_start = start
                        best_indicators = found
                    break

        chunk_start = best_start - self.buffer_size if best_start > self.buffer_size else 0
        chunk_length = max(0, min(self.output_chunk_size, len(content) - chunk_start))
        chunk = content[chunk_start:chunk_start + chunk_length]

        return ScanResult(
            chunk=chunk,
            metrics=ChunkMetrics(
                first_unique_hits=counts[0],
                second_unique_hits=counts[1],
                third_unique_hits=counts[2],
                fourth_unique_hits=counts[3],
                fifth_unique_hits=counts[4],
            ),
            indicators=best_indicators,
            best_start=best_start,
        )

    # ── Internals ─────────────────────────────────────────────────────

    def _scan_all(
        self, content: str, normalized: str, language: Language,
    ) -> dict[StatementType, ScanResult]:
        scans: dict[StatementType, ScanResult] = {}
        for st in _STATEMENT_ORDER:
            scans[st] = self.find_chunk(content, normalized, self._indicator_set(st, language))
            log.info(
                "%s/%s: top hits %d at offset %d",
                st.value, language.value,
                scans[st].metrics.first_unique_hits, scans[st].best_start,
            )
        return scans

    def _indicator_set(self, statement_type: StatementType, language: Language) -> list[str]:
        try:
            raw = self._indicators[(statement_type, language)]
        except KeyError:
            raise ValueError(
                f"Missing indicator set for {statement_type.value}/{language.value}"
            ) from None
        patterns = list(raw)
        for p in patterns:
            if not isinstance(p, str) or not p:
                raise ValueError(
                    f"Malformed indicator {p!r} in {statement_type.value}/{language.value}"
                )
        return patterns


# ═══════════════════════════════════════════════════════════════════════════
#  Module-level convenience
# ═══════════════════════════════════════════════════════════════════════════

_locator: StatementLocator | None = None


def get_locator() -> StatementLocator:
    """Get or create the shared StatementLocator (default config + cleaner)."""
    global _locator
    if _locator is None:
        _locator = StatementLocator()
    return _locator


def preprocess(content: str, period: str) -> PreprocessResult:
    """Locate statements with the shared locator."""
    return get_locator().preprocess(content, period)
