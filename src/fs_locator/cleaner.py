"""Chunk-cleaner boundary.

The locator hands every located chunk to a cleaner that trims it to the
statement body and detects reporting units.  The real cleaner lives outside
this package; anything matching :class:`ChunkCleaner` can be plugged in.
"""

from __future__ import annotations

from typing import Protocol

from fs_locator.models import CleanedChunk, Language, StatementType


class ChunkCleaner(Protocol):
    def __call__(
        self,
        statement_type: StatementType,
        chunk_text: str,
        language: Language,
        period: str,
    ) -> CleanedChunk: ...


def passthrough_cleaner(
    statement_type: StatementType,
    chunk_text: str,
    language: Language,
    period: str,
) -> CleanedChunk:
    """Default cleaner: whitespace-trimmed chunk, no unit detection."""
    return CleanedChunk(text=chunk_text.strip(), units={})
