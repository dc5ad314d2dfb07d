"""FS-Locator: MCP server for locating financial statements in raw filings.

Tool hierarchy
──────────────
  Text extraction
    1. normalize_document       — MIME / HTML / text → flat text
    2. extract_pdf_text         — PDF file → layout-preserving text

  Statement location
    3. locate_statements        — flat text → balance / income / cash-flow chunks
    4. process_filing           — any supported file → located chunks
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastmcp import FastMCP

from fs_locator.config import get_config
from fs_locator.html_normalizer import normalize
from fs_locator.locator import get_locator
from fs_locator.pdf_client import PdfplumberClient
from fs_locator.pdf_extractor import extract
from fs_locator.pipeline import locate_statements as run_pipeline

log = logging.getLogger(__name__)

mcp = FastMCP(name="FS-Locator")

_pdf_client: PdfplumberClient | None = None


def _get_pdf_client() -> PdfplumberClient:
    global _pdf_client
    if _pdf_client is None:
        _pdf_client = PdfplumberClient()
    return _pdf_client


def _read_file(path: str) -> bytes:
    p = Path(path).expanduser()
    if not p.is_file():
        raise ValueError(f"File not found: {path}")
    return p.read_bytes()


# ═══════════════════════════════════════════════════════════════════════════
#  TEXT EXTRACTION
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
def normalize_document(text: str) -> str:
    """Convert a raw filing (MIME web archive, HTML or plain text) to flat text.

    Tables are kept as 'Table: … End of table' blocks; layout tables without
    numbers are dropped.
    """
    return normalize(text)


@mcp.tool()
async def extract_pdf_text(
    path: str,
    start_page: str | None = None,
    end_page: str | None = None,
) -> str:
    """Extract text from a PDF report, approximating its column layout.

    Page numbers are 1-based.  Without an end page, at most 100 pages are read.
    """
    return await extract(_get_pdf_client(), _read_file(path), [start_page, end_page])


# ═══════════════════════════════════════════════════════════════════════════
#  STATEMENT LOCATION
# ═══════════════════════════════════════════════════════════════════════════


@mcp.tool()
def locate_statements(text: str, period: str) -> dict:
    """Find the balance sheet, income statement and cash-flow statement in text.

    Returns one chunk per statement with hit metrics, the matched indicator
    labels, and the detected language ('EN' or 'ES').
    """
    result = get_locator().preprocess(text, period)
    return result.model_dump(mode="json")


@mcp.tool()
async def process_filing(
    path: str,
    period: str,
    start_page: str | None = None,
    end_page: str | None = None,
) -> dict:
    """Locate the three financial statements in a filing file (PDF, .mht, .html, .txt).

    The page range applies to PDFs only.
    """
    result = await run_pipeline(
        _read_file(path), period, [start_page, end_page], client=_get_pdf_client(),
    )
    return result.model_dump(mode="json")


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

def main() -> None:
    import sys

    logging.basicConfig(
        level=get_config().log_level,
        format="%(asctime)s | %(levelname)-5s | %(name)s | %(message)s",
    )
    # SSE transport for remote hosting: python -m fs_locator.server --sse
    if "--sse" in sys.argv:
        mcp.run(transport="sse")
    else:
        mcp.run()


if __name__ == "__main__":
    main()
