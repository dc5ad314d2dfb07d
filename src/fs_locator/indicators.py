"""Statement indicator sets: line-item labels per statement type and language.

Every entry is stored the way the locator's normalized buffer looks:
lowercase, accents stripped (``situacion`` not ``situación``), apostrophes
kept as-is.  A window's score is the number of *distinct* entries that occur
in it, so near-duplicates ("net income" / "net income attributable") simply
make a window score higher when both labels are present.
"""

from __future__ import annotations

from fs_locator.models import Language, StatementType


# ═══════════════════════════════════════════════════════════════════════════
#  English
# ═══════════════════════════════════════════════════════════════════════════

BALANCE_INDICATORS_EN: tuple[str, ...] = (
    "balance sheet",
    "statement of financial position",
    "statements of financial position",
    "total assets",
    "current assets",
    "total current assets",
    "non-current assets",
    "noncurrent assets",
    "cash and cash equivalents",
    "accounts receivable",
    "trade receivables",
    "inventories",
    "prepaid expenses",
    "marketable securities",
    "property, plant and equipment",
    "property and equipment",
    "goodwill",
    "intangible assets",
    "operating lease right-of-use",
    "deferred tax assets",
    "other assets",
    "total liabilities",
    "current liabilities",
    "total current liabilities",
    "non-current liabilities",
    "accounts payable",
    "accrued liabilities",
    "accrued expenses",
    "deferred revenue",
    "short-term borrowings",
    "current portion of long-term debt",
    "long-term debt",
    "deferred tax liabilities",
    "commitments and contingencies",
    "common stock",
    "share capital",
    "additional paid-in capital",
    "retained earnings",
    "accumulated deficit",
    "treasury stock",
    "accumulated other comprehensive",
    "noncontrolling interest",
    "total equity",
    "stockholders' equity",
    "shareholders' equity",
    "total liabilities and",
)

INCOME_INDICATORS_EN: tuple[str, ...] = (
    "income statement",
    "statement of operations",
    "statements of operations",
    "statement of income",
    "statements of income",
    "statement of comprehensive income",
    "revenue",
    "total revenues",
    "net sales",
    "cost of sales",
    "cost of revenue",
    "cost of goods sold",
    "gross profit",
    "gross margin",
    "operating expenses",
    "total operating expenses",
    "research and development",
    "selling, general and administrative",
    "sales and marketing",
    "general and administrative",
    "depreciation and amortization",
    "operating income",
    "income from operations",
    "loss from operations",
    "interest expense",
    "interest income",
    "other income",
    "other expense",
    "income before income taxes",
    "provision for income taxes",
    "income tax expense",
    "net income",
    "net loss",
    "attributable to",
    "earnings per share",
    "per share",
    "basic",
    "diluted",
    "weighted average",
    "shares used in computing",
    "dividends declared per",
    "comprehensive income",
)

CASH_FLOW_INDICATORS_EN: tuple[str, ...] = (
    "statement of cash flows",
    "statements of cash flows",
    "cash flows from operating activities",
    "cash flows from investing activities",
    "cash flows from financing activities",
    "operating activities",
    "investing activities",
    "financing activities",
    "adjustments to reconcile net income",
    "depreciation and amortization",
    "stock-based compensation",
    "share-based compensation",
    "deferred income taxes",
    "changes in operating assets and liabilities",
    "net cash provided by",
    "net cash used in",
    "purchases of property and equipment",
    "capital expenditures",
    "acquisitions, net of cash acquired",
    "purchases of marketable securities",
    "proceeds from",
    "repayments of",
    "repurchases of common stock",
    "dividends paid",
    "payments of dividends",
    "effect of exchange rate",
    "net increase in cash",
    "net decrease in cash",
    "net change in cash",
    "beginning of period",
    "end of period",
    "beginning of year",
    "end of year",
    "supplemental",
    "cash paid for interest",
    "cash paid for income taxes",
)


# ═══════════════════════════════════════════════════════════════════════════
#  Spanish
# ═══════════════════════════════════════════════════════════════════════════

BALANCE_INDICATORS_ES: tuple[str, ...] = (
    "balance general",
    "estado de situacion financiera",
    "estados de situacion financiera",
    "total activos",
    "total del activo",
    "total activo",
    "activo corriente",
    "activos corrientes",
    "activo no corriente",
    "activos no corrientes",
    "efectivo y equivalentes",
    "cuentas por cobrar",
    "deudores comerciales",
    "inventarios",
    "existencias",
    "gastos pagados por anticipado",
    "propiedades, planta y equipo",
    "propiedad, planta y equipo",
    "inmovilizado material",
    "activos intangibles",
    "plusvalia",
    "activos por impuestos diferidos",
    "total pasivos",
    "total del pasivo",
    "total pasivo",
    "pasivo corriente",
    "pasivos corrientes",
    "pasivo no corriente",
    "pasivos no corrientes",
    "cuentas por pagar",
    "acreedores comerciales",
    "obligaciones financieras",
    "prestamos",
    "provisiones",
    "pasivos por impuestos diferidos",
    "capital social",
    "capital emitido",
    "prima de emision",
    "reservas",
    "resultados acumulados",
    "utilidades retenidas",
    "ganancias acumuladas",
    "patrimonio neto",
    "total patrimonio",
    "participaciones no controladoras",
    "total pasivo y patrimonio",
)

INCOME_INDICATORS_ES: tuple[str, ...] = (
    "estado de resultados",
    "estados de resultados",
    "estado de resultados integrales",
    "cuenta de perdidas y ganancias",
    "ingresos de actividades ordinarias",
    "ingresos ordinarios",
    "importe neto de la cifra de negocios",
    "ventas netas",
    "ingresos",
    "costo de ventas",
    "coste de ventas",
    "utilidad bruta",
    "ganancia bruta",
    "margen bruto",
    "resultado bruto",
    "gastos de administracion",
    "gastos de ventas",
    "gastos de distribucion",
    "otros ingresos",
    "otros gastos",
    "resultado operacional",
    "resultado de explotacion",
    "utilidad operacional",
    "ingresos financieros",
    "gastos financieros",
    "costos financieros",
    "resultado financiero",
    "resultado antes de impuestos",
    "utilidad antes de impuestos",
    "impuesto a las ganancias",
    "impuesto sobre beneficios",
    "impuesto a la renta",
    "resultado del ejercicio",
    "resultado del periodo",
    "utilidad neta",
    "ganancia neta",
    "atribuible a",
    "ganancia por accion",
    "beneficio por accion",
    "utilidad por accion",
    "basica",
    "diluida",
)

CASH_FLOW_INDICATORS_ES: tuple[str, ...] = (
    "estado de flujos de efectivo",
    "estados de flujos de efectivo",
    "estado de flujo de efectivo",
    "flujos de efectivo",
    "actividades de operacion",
    "actividades de explotacion",
    "actividades de inversion",
    "actividades de financiacion",
    "actividades de financiamiento",
    "ajustes por",
    "depreciacion",
    "amortizacion",
    "variacion en",
    "capital de trabajo",
    "cobros procedentes",
    "pagos a proveedores",
    "pagos a empleados",
    "intereses pagados",
    "intereses recibidos",
    "dividendos pagados",
    "impuestos pagados",
    "adquisicion de propiedades",
    "compras de propiedades",
    "venta de propiedades",
    "prestamos obtenidos",
    "reembolso de prestamos",
    "pago de prestamos",
    "efectivo neto",
    "flujo neto",
    "aumento neto",
    "disminucion neta",
    "efectivo al inicio",
    "efectivo al principio",
    "efectivo al final",
    "efecto de las variaciones en las tasas de cambio",
)


# ═══════════════════════════════════════════════════════════════════════════
#  Lookup table
# ═══════════════════════════════════════════════════════════════════════════

INDICATOR_SETS: dict[tuple[StatementType, Language], tuple[str, ...]] = {
    (StatementType.BALANCE, Language.EN): BALANCE_INDICATORS_EN,
    (StatementType.INCOME, Language.EN): INCOME_INDICATORS_EN,
    (StatementType.CASH_FLOW, Language.EN): CASH_FLOW_INDICATORS_EN,
    (StatementType.BALANCE, Language.ES): BALANCE_INDICATORS_ES,
    (StatementType.INCOME, Language.ES): INCOME_INDICATORS_ES,
    (StatementType.CASH_FLOW, Language.ES): CASH_FLOW_INDICATORS_ES,
}


def get_indicators(statement_type: StatementType, language: Language) -> tuple[str, ...]:
    """Return the indicator set for one (statement type, language) pair."""
    try:
        return INDICATOR_SETS[(StatementType(statement_type), Language(language))]
    except (KeyError, ValueError) as exc:
        raise ValueError(
            f"No indicator set for statement type {statement_type!r} / language {language!r}"
        ) from exc
