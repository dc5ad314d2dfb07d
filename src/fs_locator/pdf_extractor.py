"""PDF → flat text with approximate column / row layout.

The extractor only needs a narrow capability surface from the PDF library
(see :class:`PdfClient`): load a document, fetch a page, list the page's
text items with their position transforms.  :mod:`fs_locator.pdf_client`
provides the pdfplumber-backed implementation; tests use in-memory fakes.

Layout reconstruction, per page:
  - x positions (rounded) seen at least twice are treated as column starts;
  - items are grouped into lines by y (within ``Y_TOLERANCE``), top first;
  - within a line, items are bucketed into the nearest column (within
    ``COLUMN_TOLERANCE``, else column 0) and columns joined with a tab.

Pages are processed strictly one after another.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import IO, Any, Protocol, Union

from fs_locator.config import get_config
from fs_locator.models import PageRange

log = logging.getLogger(__name__)

MAX_PAGES = 100
COLUMN_MIN_OCCURRENCES = 2
Y_TOLERANCE = 5
COLUMN_TOLERANCE = 20

PdfInput = Union[bytes, bytearray, memoryview, IO[bytes]]


class PDFExtractionError(Exception):
    """Any failure while loading or reading a PDF."""


# ═══════════════════════════════════════════════════════════════════════════
#  Capability interface
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TextItem:
    """A glyph run and its affine transform ``(a, b, c, d, x, y)``."""
    text: str
    transform: tuple[float, float, float, float, float, float]

    @property
    def x(self) -> float:
        return self.transform[4]

    @property
    def y(self) -> float:
        return self.transform[5]


class PdfPage(Protocol):
    def get_text_content(self) -> list[TextItem]: ...


class PdfDocument(Protocol):
    num_pages: int

    def get_page(self, number: int) -> PdfPage: ...


class PdfClient(Protocol):
    def load_document(self, source: str) -> PdfDocument: ...


# ═══════════════════════════════════════════════════════════════════════════
#  Page range handling
# ═══════════════════════════════════════════════════════════════════════════

def parse_page_number(value: Any, default: int = 1) -> int:
    """Coerce a user-supplied page number: positive, at most 3 digits.

    Leading zeros are ignored; anything else falls back to *default*.
    """
    if value is None or value == "":
        return default
    digits = str(value).strip().lstrip("0")
    # isascii() guards against superscripts and other Unicode digits
    if not digits or len(digits) > 3 or not (digits.isascii() and digits.isdigit()):
        return default
    number = int(digits)
    return number if number > 0 else default


def parse_page_request(pages: Sequence[Any] | None) -> tuple[int, int]:
    """Return ``(first, second)``; ``second == 1`` means "no explicit end"."""
    pages = list(pages or [])
    first = parse_page_number(pages[0] if len(pages) > 0 else None)
    second = parse_page_number(pages[1] if len(pages) > 1 else None)
    if second < first:
        second = 1
    return first, second


def resolve_page_range(
    pages: Sequence[Any] | None,
    doc_pages: int,
    max_pages: int = MAX_PAGES,
) -> PageRange:
    """Turn a ``[start?, end?]`` request into an inclusive page span.

    - explicit range (end > 1 and end > start): start … min(doc, end)
    - start only: ``max_pages`` pages from start, capped at the document
    - otherwise: start … min(doc, max_pages)
    """
    first, second = parse_page_request(pages)
    if second > 1 and second > first:
        last = min(doc_pages, second)
    elif first > 1 and second <= 1:
        last = min(doc_pages, first - 1 + max_pages)
    else:
        last = min(doc_pages, max_pages)
    return PageRange(first=first, last=last)


# ═══════════════════════════════════════════════════════════════════════════
#  Layout reconstruction
# ═══════════════════════════════════════════════════════════════════════════

def _round(value: float) -> int:
    # Halves round up; round() would send 2.5 to 2
    return math.floor(value + 0.5)


def detect_columns(items: Sequence[TextItem]) -> list[int]:
    frequency: dict[int, int] = {}
    for item in items:
        x = _round(item.x)
        frequency[x] = frequency.get(x, 0) + 1
    return sorted(x for x, n in frequency.items() if n >= COLUMN_MIN_OCCURRENCES)


def group_lines(items: Sequence[TextItem]) -> list[list[TextItem]]:
    """Cluster items into lines, top of page first, each line left to right."""
    groups: dict[int, list[TextItem]] = {}
    for item in items:
        y = _round(item.y)
        for key in sorted(groups):
            if abs(y - key) <= Y_TOLERANCE:
                groups[key].append(item)
                break
        else:
            groups[y] = [item]

    return [
        sorted(groups[key], key=lambda it: it.x)
        for key in sorted(groups, reverse=True)
    ]


def reconstruct_page_text(items: Sequence[TextItem]) -> str:
    columns = detect_columns(items)
    lines: list[str] = []
    for line_items in group_lines(items):
        row: dict[int, str] = {}
        for item in line_items:
            x = _round(item.x)
            col = next(
                (i for i, cx in enumerate(columns) if abs(cx - x) < COLUMN_TOLERANCE),
                0,
            )
            row[col] = row.get(col, "") + item.text + " "
        lines.append("\t".join(row[c].strip() for c in sorted(row)))
    return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════════════
#  Extraction
# ═══════════════════════════════════════════════════════════════════════════

@contextmanager
def temporary_source(file: PdfInput) -> Iterator[str]:
    """Write *file* to a temporary path for the PDF library; always removed."""
    data = file.read() if hasattr(file, "read") else bytes(file)
    fd, path = tempfile.mkstemp(prefix="fs_locator_", suffix=".pdf")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        yield path
    finally:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass


async def extract(
    client: PdfClient,
    file: PdfInput,
    pages: Sequence[Any] | None = None,
) -> str:
    """Extract layout-preserving text from a PDF.

    *pages* is an optional ``[start, end]`` pair of strings/ints.  Raises
    :class:`PDFExtractionError` on any failure.  The temporary file backing
    the document is removed on every path.
    """
    try:
        with temporary_source(file) as source:
            document = await asyncio.to_thread(client.load_document, source)
            try:
                return await _extract_pages(document, pages)
            finally:
                close = getattr(document, "close", None)
                if close is not None:
                    close()
    except Exception as exc:
        log.error("Error extracting PDF text: %s", exc)
        raise PDFExtractionError(f"Failed to extract text from PDF: {exc}") from exc


async def _extract_pages(document: PdfDocument, pages: Sequence[Any] | None) -> str:
    span = resolve_page_range(pages, document.num_pages, get_config().max_pdf_pages)
    log.info("Extracting PDF pages %d-%d of %d", span.first, span.last, document.num_pages)

    parts: list[str] = []
    for number in range(span.first, span.last + 1):
        page = await asyncio.to_thread(document.get_page, number)
        items = await asyncio.to_thread(page.get_text_content)
        log.debug("Page %d: %d text items", number, len(items))
        parts.append(reconstruct_page_text(items) + "\n\n")
    return "".join(parts)


def extract_sync(client: PdfClient, file: PdfInput, pages: Sequence[Any] | None = None) -> str:
    """Blocking wrapper around :func:`extract` for scripts and the CLI."""
    return asyncio.run(extract(client, file, pages))
