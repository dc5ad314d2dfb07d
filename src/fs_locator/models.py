"""Pydantic models for locator inputs and outputs."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class StatementType(str, Enum):
    BALANCE = "balance"
    INCOME = "income"
    CASH_FLOW = "cash_flow"


class Language(str, Enum):
    EN = "EN"
    ES = "ES"


class DocumentKind(str, Enum):
    MIME = "mime"
    HTML = "html"
    TEXT = "text"
    PDF = "pdf"


# ---------------------------------------------------------------------------
# Statement search results
# ---------------------------------------------------------------------------

class ChunkMetrics(BaseModel):
    """Top five distinct-indicator hit counts, highest first."""
    first_unique_hits: int = 0
    second_unique_hits: int = 0
    third_unique_hits: int = 0
    fourth_unique_hits: int = 0
    fifth_unique_hits: int = 0


class ScanResult(BaseModel):
    """Best window found for one (statement type, language) pair."""
    chunk: str = ""
    metrics: ChunkMetrics = ChunkMetrics()
    indicators: list[str] = []
    best_start: int = 0


class CleanedChunk(BaseModel):
    text: str
    units: dict[str, Any] = {}


class StatementResult(ScanResult):
    statement_type: StatementType
    language: Language
    cleaned: str = ""
    units: dict[str, Any] = {}


class PreprocessResult(BaseModel):
    balance_result: StatementResult
    income_result: StatementResult
    cash_flow_result: StatementResult
    language: Language

    def results(self) -> dict[StatementType, StatementResult]:
        return {
            StatementType.BALANCE: self.balance_result,
            StatementType.INCOME: self.income_result,
            StatementType.CASH_FLOW: self.cash_flow_result,
        }


# ---------------------------------------------------------------------------
# PDF extraction
# ---------------------------------------------------------------------------

class PageRange(BaseModel):
    """Inclusive, 1-based page span to extract."""
    first: int
    last: int

    @property
    def count(self) -> int:
        return max(0, self.last - self.first + 1)
