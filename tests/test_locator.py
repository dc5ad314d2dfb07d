"""Tests for the sliding-window statement locator."""

import pytest

from fs_locator.config import Settings
from fs_locator.indicators import (
    BALANCE_INDICATORS_EN,
    BALANCE_INDICATORS_ES,
    CASH_FLOW_INDICATORS_EN,
    CASH_FLOW_INDICATORS_ES,
    INCOME_INDICATORS_EN,
    INCOME_INDICATORS_ES,
    INDICATOR_SETS,
    get_indicators,
)
from fs_locator import locator as locator_module
from fs_locator.locator import PreprocessingError, StatementLocator, normalize_text
from fs_locator.models import CleanedChunk, Language, StatementType


B, I, C = StatementType.BALANCE, StatementType.INCOME, StatementType.CASH_FLOW
EN, ES = Language.EN, Language.ES

SMALL = dict(
    window_size=100, overlap_stride=50, buffer_size=20,
    output_chunk_size=200, language_threshold=1,
)

TINY_SETS = {
    (B, EN): ["total assets"],
    (I, EN): ["net income"],
    (C, EN): ["operating activities"],
    (B, ES): ["activo total"],
    (I, ES): ["resultado neto"],
    (C, ES): ["flujos de efectivo"],
}


class SpyIndicators(dict):
    """Indicator mapping that records which sets were looked up."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.accessed = []

    def __getitem__(self, key):
        self.accessed.append(key)
        return super().__getitem__(key)


def _locator(indicators=None, cleaner=None, **overrides):
    return StatementLocator(Settings(**{**SMALL, **overrides}), indicators, cleaner)


def _metrics(scan):
    m = scan.metrics
    return [
        m.first_unique_hits, m.second_unique_hits, m.third_unique_hits,
        m.fourth_unique_hits, m.fifth_unique_hits,
    ]


# --- Normalization ---


@pytest.mark.parametrize("raw,expected", [
    ("Situación Financiera", "situacion financiera"),
    ("ESTADO DE RESULTADOS", "estado de resultados"),
    ("Año Básico", "ano basico"),
    ("", ""),
])
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


def test_normalize_text_idempotent():
    once = normalize_text("Depreciación y Amortización")
    assert normalize_text(once) == once


# --- Window search ---


def test_find_chunk_empty_content():
    scan = _locator().find_chunk("", "", ["alpha"])
    assert scan.chunk == ""
    assert scan.best_start == 0
    assert _metrics(scan) == [0, 0, 0, 0, 0]
    assert scan.indicators == []


def test_find_chunk_planted_window():
    content = "x" * 1000 + "alpha bravo charlie delta" + "y" * 1000
    indicators = ["alpha", "bravo", "charlie", "delta", "echo"]

    scan = _locator().find_chunk(content, normalize_text(content), indicators)

    # Windows at 950 and 1000 both hold all four; the earlier one wins
    assert scan.best_start == 950
    assert _metrics(scan) == [4, 4, 0, 0, 0]
    assert scan.indicators == ["alpha", "bravo", "charlie", "delta"]
    assert scan.chunk == content[930:1130]


def test_find_chunk_counts_distinct_indicators():
    content = "alpha alpha alpha alpha"
    scan = _locator().find_chunk(content, content, ["alpha", "alpha", "bravo"])
    assert scan.metrics.first_unique_hits == 1
    assert scan.indicators == ["alpha"]


def test_find_chunk_ties_go_to_earliest_window():
    block = "alpha bravo" + " " * 489
    content = block * 2
    scan = _locator().find_chunk(content, content, ["alpha", "bravo"])
    assert scan.best_start == 0
    assert _metrics(scan) == [2, 2, 2, 0, 0]
    # best_start within the buffer: chunk starts at 0
    assert scan.chunk == content[:200]


def test_find_chunk_chunk_clipped_to_content_end():
    content = "-" * 260 + "alpha"
    scan = _locator().find_chunk(content, content, ["alpha"])
    assert scan.best_start == 200
    assert scan.chunk == content[180:]


def test_find_chunk_metrics_non_increasing():
    content = (
        "alpha " + "-" * 300 + "alpha bravo " + "-" * 300
        + "alpha bravo charlie " + "-" * 300 + "bravo"
    )
    scan = _locator().find_chunk(content, content, ["alpha", "bravo", "charlie"])
    metrics = _metrics(scan)
    assert metrics[0] == 3
    assert metrics == sorted(metrics, reverse=True)


def test_find_chunk_keeps_original_case_and_matches_accents():
    content = "." * 300 + "Estado de Situación Financiera: Total Activos 1.000"
    scan = _locator().find_chunk(
        content, normalize_text(content), ["situacion financiera", "total activos"],
    )
    assert scan.metrics.first_unique_hits == 2
    assert "Situación Financiera: Total Activos" in scan.chunk


# --- preprocess ---


def test_preprocess_english_only_when_strong():
    spy = SpyIndicators(TINY_SETS)
    text = "Total assets 10. Net income 5. Operating activities 3."

    result = _locator(spy).preprocess(text, "2024")

    assert result.language is EN
    assert set(spy.accessed) == {(B, EN), (I, EN), (C, EN)}
    assert result.balance_result.indicators == ["total assets"]
    assert result.income_result.language is EN


def test_preprocess_falls_back_to_spanish_for_all_types():
    spy = SpyIndicators(TINY_SETS)
    # Balance and cash flow are found in English, income is not
    text = (
        "Total assets 10. Operating activities 3. "
        "Activo total 10. Resultado neto 5. Flujos de efectivo 3."
    )

    result = _locator(spy).preprocess(text, "2024")

    assert result.language is ES
    assert set(spy.accessed) == set(TINY_SETS)
    assert result.balance_result.indicators == ["activo total"]
    assert result.income_result.indicators == ["resultado neto"]
    assert result.cash_flow_result.indicators == ["flujos de efectivo"]
    assert all(r.language is ES for r in result.results().values())


def test_preprocess_threshold_applies_per_type():
    spy = SpyIndicators(TINY_SETS)
    text = "Total assets 10. Net income 5. Operating activities 3."
    result = _locator(spy, language_threshold=2).preprocess(text, "2024")
    assert result.language is ES
    assert result.balance_result.metrics.first_unique_hits == 0


def test_preprocess_calls_cleaner_per_statement():
    calls = []

    def cleaner(statement_type, chunk_text, language, period):
        calls.append((statement_type, chunk_text, language, period))
        return CleanedChunk(text=f"clean-{statement_type.value}", units={"scale": "thousands"})

    text = "Total assets 10. Net income 5. Operating activities 3."
    result = _locator(TINY_SETS, cleaner).preprocess(text, "FY2023")

    assert [c[0] for c in calls] == [B, I, C]
    assert all(c[2] is EN and c[3] == "FY2023" for c in calls)
    assert calls[0][1] == result.balance_result.chunk
    assert result.balance_result.cleaned == "clean-balance"
    assert result.cash_flow_result.units == {"scale": "thousands"}


def test_preprocess_default_cleaner_strips_chunk():
    result = _locator(TINY_SETS).preprocess("  Total assets 10  ", "2024")
    assert result.balance_result.chunk == "  Total assets 10  "
    assert result.balance_result.cleaned == "Total assets 10"
    assert result.balance_result.units == {}


def test_preprocess_missing_indicator_set_raises():
    sets = {k: v for k, v in TINY_SETS.items() if k != (I, EN)}
    with pytest.raises(PreprocessingError) as excinfo:
        _locator(sets).preprocess("Total assets", "2024")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_preprocess_malformed_indicator_raises():
    sets = {**TINY_SETS, (C, EN): ["operating activities", ""]}
    with pytest.raises(PreprocessingError):
        _locator(sets).preprocess("Total assets", "2024")


def test_preprocess_cleaner_failure_raises():
    def broken(*args):
        raise RuntimeError("cleaner down")

    with pytest.raises(PreprocessingError, match="Preprocessing failed") as excinfo:
        _locator(TINY_SETS, broken).preprocess("Total assets", "2024")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_preprocess_empty_document():
    result = _locator(TINY_SETS).preprocess("", "2024")
    assert result.language is ES
    for res in result.results().values():
        assert res.chunk == ""
        assert res.metrics.first_unique_hits == 0


def test_preprocess_result_serializes():
    text = "Total assets 10. Net income 5. Operating activities 3."
    data = _locator(TINY_SETS).preprocess(text, "2024").model_dump(mode="json")

    assert set(data) == {"balance_result", "income_result", "cash_flow_result", "language"}
    assert data["language"] == "EN"
    balance = data["balance_result"]
    assert balance["statement_type"] == "balance"
    assert set(balance) >= {"chunk", "metrics", "indicators", "best_start", "cleaned", "units"}
    assert set(balance["metrics"]) == {
        "first_unique_hits", "second_unique_hits", "third_unique_hits",
        "fourth_unique_hits", "fifth_unique_hits",
    }


# --- Default indicator sets ---


def test_indicator_sets_cover_every_pair():
    assert set(INDICATOR_SETS) == {(st, lang) for st in StatementType for lang in Language}


@pytest.mark.parametrize("key", list(INDICATOR_SETS))
def test_indicator_entries_are_normalized(key):
    entries = INDICATOR_SETS[key]
    assert len(entries) > 15
    assert len(set(entries)) == len(entries)
    for entry in entries:
        assert entry and entry == normalize_text(entry)


def _filing(sections):
    filler = "\n" + "-" * 20000 + "\n"
    return filler.join(
        "\n".join(f"{label.title()}    1,234    1,100" for label in labels[:20])
        for labels in sections
    )


def test_default_sets_locate_english_filing():
    text = _filing([BALANCE_INDICATORS_EN, INCOME_INDICATORS_EN, CASH_FLOW_INDICATORS_EN])

    result = StatementLocator(Settings()).preprocess(text, "2024")

    assert result.language is EN
    assert "Balance Sheet" in result.balance_result.chunk
    assert "Income Statement" in result.income_result.chunk
    assert "Statement Of Cash Flows" in result.cash_flow_result.chunk
    for res in result.results().values():
        assert res.metrics.first_unique_hits >= 15


def test_default_sets_locate_spanish_filing():
    text = _filing([BALANCE_INDICATORS_ES, INCOME_INDICATORS_ES, CASH_FLOW_INDICATORS_ES])

    result = StatementLocator(Settings()).preprocess(text, "2024")

    assert result.language is ES
    assert "Balance General" in result.balance_result.chunk
    assert "Estado De Resultados" in result.income_result.chunk
    assert "Estado De Flujos De Efectivo" in result.cash_flow_result.chunk


def test_get_indicators_lookup():
    assert get_indicators(StatementType.BALANCE, Language.ES) is BALANCE_INDICATORS_ES
    assert get_indicators("cash_flow", "EN") is CASH_FLOW_INDICATORS_EN
    with pytest.raises(ValueError):
        get_indicators("equity", "EN")


def test_module_level_preprocess_uses_shared_locator(monkeypatch):
    monkeypatch.setattr(locator_module, "_locator", None)
    shared = locator_module.get_locator()
    assert locator_module.get_locator() is shared

    result = locator_module.preprocess("Consolidated Balance Sheet", "2024")
    assert result.balance_result.chunk == "Consolidated Balance Sheet"
