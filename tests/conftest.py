"""Shared fixtures: in-memory PDF capability fakes."""

import os

import pytest

from fs_locator.pdf_extractor import TextItem


def item(text, x, y):
    return TextItem(text=text, transform=(1.0, 0.0, 0.0, 1.0, float(x), float(y)))


class FakePage:
    def __init__(self, items, fail=False):
        self._items = items
        self._fail = fail

    def get_text_content(self):
        if self._fail:
            raise RuntimeError("corrupt content stream")
        return list(self._items)


class FakeDocument:
    def __init__(self, pages):
        self._pages = pages
        self.num_pages = len(pages)
        self.requested: list[int] = []
        self.closed = False

    def get_page(self, number):
        self.requested.append(number)
        return self._pages[number - 1]

    def close(self):
        self.closed = True


class FakeClient:
    """Records the temporary source path and whether it existed at load time."""

    def __init__(self, pages=None, load_error=None):
        self.document = FakeDocument(pages or [])
        self.load_error = load_error
        self.sources: list[str] = []
        self.source_existed = False
        self.loaded_bytes = b""

    def load_document(self, source):
        self.sources.append(source)
        self.source_existed = os.path.exists(source)
        if self.source_existed:
            with open(source, "rb") as fh:
                self.loaded_bytes = fh.read()
        if self.load_error is not None:
            raise self.load_error
        return self.document


@pytest.fixture
def make_pdf_client():
    def _make(pages=None, load_error=None):
        return FakeClient(pages=pages, load_error=load_error)
    return _make


@pytest.fixture
def pdf_item():
    return item
