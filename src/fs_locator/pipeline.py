"""End-to-end flow: raw filing → flat text → located statements.

    raw bytes / str
      ├─ PDF   → pdf_extractor.extract  (async, page range aware)
      ├─ MIME  → html_normalizer.normalize
      ├─ HTML  → html_normalizer.normalize
      └─ text  → passed through unchanged
    flat text → StatementLocator.preprocess
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from fs_locator.config import get_config
from fs_locator.html_normalizer import normalize
from fs_locator.locator import StatementLocator, get_locator
from fs_locator.mime import is_mime
from fs_locator.models import DocumentKind, PreprocessResult
from fs_locator.pdf_extractor import PdfClient, extract

log = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
# Only the head is sniffed; the PDF header may follow a little junk
_PDF_SNIFF_BYTES = 1024
_HTML_HINT_RE = re.compile(
    r"<!doctype\s+html|<html[\s>]|<body[\s>]|<table[\s>]|<div[\s>]|<p[\s>]",
    re.IGNORECASE,
)


def detect_kind(raw: str | bytes) -> DocumentKind:
    """Classify a raw document by its leading content."""
    if isinstance(raw, (bytes, bytearray)):
        if PDF_MAGIC in bytes(raw[:_PDF_SNIFF_BYTES]):
            return DocumentKind.PDF
        raw = bytes(raw).decode("utf-8", errors="replace")

    sniff_length = get_config().mime_sniff_length
    if is_mime(raw, sniff_length):
        return DocumentKind.MIME
    if _HTML_HINT_RE.search(raw[:sniff_length]):
        return DocumentKind.HTML
    return DocumentKind.TEXT


async def extract_text(
    raw: str | bytes,
    pages: Sequence[Any] | None = None,
    client: PdfClient | None = None,
) -> str:
    """Flatten any supported document into plain text."""
    kind = detect_kind(raw)
    log.info("Extracting text from %s document", kind.value)

    if kind is DocumentKind.PDF:
        if client is None:
            from fs_locator.pdf_client import PdfplumberClient
            client = PdfplumberClient()
        return await extract(client, raw, pages)

    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="replace")
    if kind is DocumentKind.TEXT:
        return raw
    return normalize(raw)


async def locate_statements(
    raw: str | bytes,
    period: str,
    pages: Sequence[Any] | None = None,
    client: PdfClient | None = None,
    locator: StatementLocator | None = None,
) -> PreprocessResult:
    """Run the full chain and return the three statement chunks."""
    text = await extract_text(raw, pages, client)
    return (locator or get_locator()).preprocess(text, period)
