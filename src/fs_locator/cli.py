"""Standalone CLI to run the extraction pipeline from the terminal.

Usage:

  # Flatten a saved web page / MIME archive / HTML file
  fs-locator normalize report.mht

  # Extract text from a PDF (optional 1-based start and end page)
  fs-locator pdf annual_report.pdf
  fs-locator pdf annual_report.pdf 40 55

  # Locate statements in an already-flat text file
  fs-locator locate report.txt 2024

  # Full pipeline on any supported file
  fs-locator run annual_report.pdf 2024 40 55

  # Show effective configuration
  fs-locator config
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from fs_locator.config import get_config
from fs_locator.models import PreprocessResult


def _fmt(val, indent=2):
    """Pretty-print a value."""
    if isinstance(val, (dict, list)):
        return json.dumps(val, indent=indent, default=str, ensure_ascii=False)
    return str(val)


def _header(title: str):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def _preview(text: str, limit: int = 500) -> str:
    return text[:limit] if text else "(empty)"


def _print_result(result: PreprocessResult):
    print(f"  Language:   {result.language.value}")
    for st, res in result.results().items():
        m = res.metrics
        print(f"\n  [{st.value}]  start={res.best_start}  chunk={len(res.chunk)} chars")
        print(
            f"    hits: {m.first_unique_hits} / {m.second_unique_hits} / "
            f"{m.third_unique_hits} / {m.fourth_unique_hits} / {m.fifth_unique_hits}"
        )
        print(f"    indicators: {', '.join(res.indicators[:8])}"
              f"{' …' if len(res.indicators) > 8 else ''}")
        print(f"    --- preview ---\n{_preview(res.chunk, 300)}\n    --- end ---")


def cmd_normalize(path: str):
    """Flatten a MIME / HTML / text document."""
    _header(f"Normalize: {path}")
    from fs_locator.html_normalizer import normalize
    text = normalize(Path(path).read_text(encoding="utf-8", errors="replace"))
    print(f"  Output: {len(text)} chars\n")
    print(_preview(text, 2000))


def cmd_pdf(path: str, start: str | None = None, end: str | None = None):
    """Extract layout text from a PDF."""
    _header(f"PDF: {path} | pages {start or '-'}..{end or '-'}")
    from fs_locator.pdf_client import PdfplumberClient
    from fs_locator.pdf_extractor import extract_sync
    text = extract_sync(PdfplumberClient(), Path(path).read_bytes(), [start, end])
    print(f"  Output: {len(text)} chars\n")
    print(_preview(text, 2000))


def cmd_locate(path: str, period: str = ""):
    """Locate statements in a flat text file."""
    _header(f"Locate: {path} | period={period or '-'}")
    from fs_locator.locator import get_locator
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    _print_result(get_locator().preprocess(text, period))


def cmd_run(path: str, period: str = "", start: str | None = None, end: str | None = None):
    """Full pipeline on any supported file."""
    _header(f"Run: {path} | period={period or '-'}")
    import asyncio
    from fs_locator.pipeline import detect_kind, locate_statements
    raw = Path(path).read_bytes()
    print(f"  Kind:       {detect_kind(raw).value}")
    result = asyncio.run(locate_statements(raw, period, [start, end]))
    _print_result(result)


def cmd_config():
    """Print effective settings."""
    _header("Configuration")
    print(_fmt(get_config().model_dump()))


COMMANDS = {
    "normalize": (cmd_normalize, "path"),
    "pdf": (cmd_pdf, "path [start_page] [end_page]"),
    "locate": (cmd_locate, "path [period]"),
    "run": (cmd_run, "path [period] [start_page] [end_page]"),
    "config": (cmd_config, ""),
}


def main():
    logging.basicConfig(
        level=get_config().log_level,
        format="%(asctime)s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print("\nFS-Locator: financial statement extraction")
        print("=" * 44)
        print("\nUsage: fs-locator <command> [args]\n")
        print("Commands:")
        for cmd, (_, args) in COMMANDS.items():
            print(f"  {cmd:12s}  {args}")
        print()
        return

    cmd_name = sys.argv[1].lower()
    if cmd_name not in COMMANDS:
        print(f"Unknown command: {cmd_name}")
        print(f"Available: {', '.join(COMMANDS.keys())}")
        return

    fn, _ = COMMANDS[cmd_name]
    if cmd_name != "config" and len(sys.argv) < 3:
        print(f"Usage: fs-locator {cmd_name} {COMMANDS[cmd_name][1]}")
        return
    fn(*sys.argv[2:])


if __name__ == "__main__":
    main()
