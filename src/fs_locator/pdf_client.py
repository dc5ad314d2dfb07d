"""pdfplumber-backed implementation of the extractor's PDF capability.

Words reported by pdfplumber become text items.  Their transform follows PDF
user space: ``x`` is the left edge, ``y`` the baseline measured from the
bottom of the page, so larger ``y`` means higher on the page.
"""

from __future__ import annotations

import logging
import warnings

import pdfplumber

from fs_locator.pdf_extractor import TextItem

log = logging.getLogger(__name__)

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")


class PdfplumberPage:
    def __init__(self, page: pdfplumber.page.Page):
        self._page = page

    def get_text_content(self) -> list[TextItem]:
        height = float(self._page.height)
        words = self._page.extract_words(keep_blank_chars=True, use_text_flow=True)
        return [
            TextItem(
                text=w["text"],
                transform=(1.0, 0.0, 0.0, 1.0, float(w["x0"]), height - float(w["bottom"])),
            )
            for w in words
            if w.get("text")
        ]


class PdfplumberDocument:
    def __init__(self, pdf: pdfplumber.PDF):
        self._pdf = pdf
        self.num_pages = len(pdf.pages)

    def get_page(self, number: int) -> PdfplumberPage:
        """Return 1-based page *number*."""
        if number < 1 or number > self.num_pages:
            raise IndexError(f"Page {number} out of range (1-{self.num_pages})")
        return PdfplumberPage(self._pdf.pages[number - 1])

    def close(self) -> None:
        self._pdf.close()


class PdfplumberClient:
    """Opens PDFs with pdfplumber."""

    def load_document(self, source: str) -> PdfplumberDocument:
        log.debug("Opening PDF %s", source)
        return PdfplumberDocument(pdfplumber.open(source))
