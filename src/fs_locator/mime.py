"""MIME multipart unwrapping for saved web-page exports (.mht / .eml).

Browsers and mail clients save filings as ``multipart/related`` messages whose
HTML body is usually quoted-printable encoded.  Only the ``text/html`` parts
matter here; images, stylesheets and plain-text alternatives are ignored.
"""

from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)

DEFAULT_SNIFF_LENGTH = 8192

_BOUNDARY_RE = re.compile(r'boundary="([^"]+)"', re.IGNORECASE)
_CHARSET_RE = re.compile(r'charset\s*=\s*"?([A-Za-z0-9_.:\-]+)"?', re.IGNORECASE)
# Soft line break or =XX escape, decoded in a single pass
_QP_RE = re.compile(r"=(?:\r?\n|([0-9A-Fa-f]{2}))")


def is_mime(content: str, sniff_length: int = DEFAULT_SNIFF_LENGTH) -> bool:
    """True when the head of *content* declares a MIME multipart message."""
    if not content:
        return False
    head = content[:sniff_length].lower()
    return "mime-version: 1.0" in head and "content-type: multipart/" in head


def _body_start(part: str) -> int:
    pos = part.find("\r\n\r\n")
    if pos != -1:
        return pos + 4
    pos = part.find("\n\n")
    if pos != -1:
        return pos + 2
    return 0


def decode_quoted_printable(text: str, charset: str | None = None) -> str:
    """Decode ``=XX`` escapes and drop ``=`` soft line breaks.

    Each escape becomes the character with that byte value.  When *charset*
    names a multi-byte encoding (e.g. utf-8) the result is re-read with it so
    escaped UTF-8 sequences come back as single characters.
    """
    decoded = _QP_RE.sub(
        lambda m: chr(int(m.group(1), 16)) if m.group(1) else "",
        text,
    )
    if not charset:
        return decoded
    try:
        return decoded.encode("latin-1").decode(charset)
    except (UnicodeError, LookupError):
        # Non-latin-1 text already present, or an unknown/mismatched charset
        return decoded


def extract_html(content: str) -> str:
    """Concatenate the bodies of every ``text/html`` part, newline separated.

    Returns an empty string when no boundary is declared or no HTML part exists.
    """
    m = _BOUNDARY_RE.search(content)
    if not m:
        log.warning("MIME document without a boundary declaration")
        return ""

    boundary = m.group(1)
    bodies: list[str] = []
    for part in content.split("--" + boundary):
        start = _body_start(part)
        # A part without a blank line is all header
        header_region = part[:start] if start else part
        lowered = header_region.lower()
        if "content-type: text/html" not in lowered:
            continue
        body = part[start:]
        if "content-transfer-encoding: quoted-printable" in lowered:
            cs = _CHARSET_RE.search(header_region)
            body = decode_quoted_printable(body, cs.group(1) if cs else None)
        bodies.append(body)

    if not bodies:
        log.warning("MIME document has no text/html part")
    return "".join(b + "\n" for b in bodies)
