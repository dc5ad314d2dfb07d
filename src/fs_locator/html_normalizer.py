"""Raw filing → flat readable text.

Handles three shapes of input with one entry point, :func:`normalize`:

  - MIME multipart exports (.mht / .eml); the ``text/html`` parts are pulled
    out and quoted-printable decoded first (see :mod:`fs_locator.mime`);
  - plain HTML;
  - plain text (parsed as HTML too; it comes back as a single text run).

Text extraction walks the BeautifulSoup tree depth-first.  Tables are kept
as marked blocks::

    Table:
      Total assets  1,234  1,100
    End of table

so the statement locator sees row/column structure, and layout tables that
carry no numbers are dropped afterwards.

Runs synchronously on the calling thread.  Never raises: anything that cannot
be parsed degrades to an empty string.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from fs_locator.config import get_config
from fs_locator.mime import extract_html, is_mime

log = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════════════

# Non-content tags removed (with their subtree) before traversal
SKIPPABLE_TAGS: tuple[str, ...] = (
    "img", "meta", "button", "input", "svg", "noscript", "iframe", "link",
    "head", "nav", "header", "footer", "object", "embed", "canvas", "map",
    "area", "param", "video", "audio", "track", "source", "select", "base",
    "br", "col", "hr", "wbr",
)

TABLE_START = "Table:"
TABLE_END = "End of table"
_TABLE_OPEN_MARK = "\n\nTable: "
_TABLE_CLOSE_MARK = "\nEnd of table\n\n"
_CELL_SEPARATOR = "  "

# Named entities decoded after text extraction.  The parser already resolves
# entities once, so these catch double-escaped sources (``&amp;nbsp;``).
ENTITY_MAP: dict[str, str] = {
    "&quot;": '"',
    "&apos;": "'",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&#160;": " ",
    "&nbsp;": " ",
    "&nbsp;nbsp;": " ",
    "&nbsp;&nbsp;": " ",
    "&#8217;": "'",
}

# Longest first so the ``&nbsp;`` variants win over ``&nbsp;``
_ENTITY_RE = re.compile(
    "|".join(re.escape(e) for e in sorted(ENTITY_MAP, key=len, reverse=True))
)
_DEC_ENTITY_RE = re.compile(r"&#(\d+);")
_HEX_ENTITY_RE = re.compile(r"&#[xX]([0-9a-fA-F]+);")
_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


class _Flags(NamedTuple):
    """Traversal state handed to each child by value."""
    in_script: bool = False
    in_style: bool = False
    in_table: bool = False


# ═══════════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════════

def normalize(text: str | None) -> str:
    """Convert a raw MIME / HTML / plain-text document into flat text.

    Empty or ``None`` input yields ``""``.
    """
    if not text:
        return ""

    if is_mime(text, get_config().mime_sniff_length):
        log.debug("Detected MIME multipart document (%d chars)", len(text))
        return process_content(extract_html(text))

    return process_content(text)


def process_content(content: str) -> str:
    """Parse HTML and return cleaned, entity-decoded text."""
    if not content:
        return ""

    try:
        soup = BeautifulSoup(content, "html.parser")
    except Exception as exc:
        log.warning("HTML parse failed, returning empty text: %s", exc)
        return ""

    remove_skippable_tags(soup)
    # Whole tree: html.parser leaves stray trailing content outside <body>
    return postprocess(extract_formatted_text(soup))


def remove_skippable_tags(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(SKIPPABLE_TAGS):
        # Already gone if an ancestor was decomposed first
        if not tag.decomposed:
            tag.decompose()


def extract_formatted_text(root: Tag) -> str:
    """Depth-first text extraction with table markers.

    Each stack entry carries the flags it was entered with, so a flag set
    inside one subtree never affects that subtree's siblings.
    """
    parts: list[str] = []
    # (node, flags) for entry; (tag_name, None) closes an element
    stack: list[tuple[Tag | NavigableString | str, _Flags | None]] = [(root, _Flags())]

    while stack:
        node, flags = stack.pop()

        if flags is None:
            if node == "table":
                parts.append(_TABLE_CLOSE_MARK)
            continue

        if isinstance(node, NavigableString):
            # Comments, doctypes, CDATA etc. are not text nodes
            if isinstance(node, PreformattedString):
                continue
            if not flags.in_script and not flags.in_style:
                text = node.strip()
                if text:
                    parts.append(text + " ")
            continue

        if not isinstance(node, Tag):
            continue

        name = (node.name or "").lower()
        if name == "script":
            flags = flags._replace(in_script=True)
        elif name == "style":
            flags = flags._replace(in_style=True)
        elif name == "table":
            flags = flags._replace(in_table=True)
            parts.append(_TABLE_OPEN_MARK)

        if flags.in_table:
            if name == "tr":
                parts.append("\n")
            elif name in ("td", "th"):
                parts.append(_CELL_SEPARATOR)

        if name == "table":
            stack.append(("table", None))
        if not flags.in_script and not flags.in_style:
            for child in reversed(node.contents):
                stack.append((child, flags))

    return "".join(parts)


def decode_entities(text: str) -> str:
    """Replace the named entity table, then decimal and hex references."""
    out = _ENTITY_RE.sub(lambda m: ENTITY_MAP[m.group(0)], text)
    out = _DEC_ENTITY_RE.sub(lambda m: _code_point(m.group(1), 10, m.group(0)), out)
    out = _HEX_ENTITY_RE.sub(lambda m: _code_point(m.group(1), 16, m.group(0)), out)
    return out


def postprocess(text: str) -> str:
    if not text:
        return ""
    return clean_output(decode_entities(text))


def clean_output(text: str) -> str:
    """Collapse newline runs to at most two and drop number-poor tables.

    A ``Table: … End of table`` block survives only with two or more numeric
    tokens.  An unterminated ``Table:`` is kept as ordinary text.
    """
    if not text:
        return ""

    out: list[str] = []
    newlines = 0

    def append(section: str) -> None:
        nonlocal newlines
        for ch in section:
            if ch == "\n":
                if newlines < 2:
                    out.append(ch)
                    newlines += 1
            else:
                out.append(ch)
                newlines = 0

    pos = 0
    last = 0
    while True:
        pos = text.find(TABLE_START, pos)
        if pos == -1:
            break
        append(text[last:pos])

        end = text.find(TABLE_END, pos)
        if end == -1:
            last = pos
            break

        block = text[pos:end + len(TABLE_END)]
        if count_numbers(block) > 1:
            append(block)
        else:
            log.debug("Dropping table block without numeric content (%d chars)", len(block))

        pos = end + len(TABLE_END)
        last = pos

    if last < len(text):
        append(text[last:])

    return "".join(out)


def count_numbers(text: str) -> int:
    return len(_NUMBER_RE.findall(text))


def _code_point(digits: str, base: int, original: str) -> str:
    try:
        return chr(int(digits, base))
    except (ValueError, OverflowError):
        return original
