"""Configuration management via environment variables.

Reads from .env file (via pydantic-settings) with sensible defaults.
All values can be overridden via environment variables prefixed with ``FSL_``.

Locator tuning:
    FSL_WINDOW_SIZE         — characters per scanned window
    FSL_OVERLAP_STRIDE      — step between window starts
    FSL_BUFFER_SIZE         — context kept before the best window
    FSL_OUTPUT_CHUNK_SIZE   — maximum length of a returned chunk
    FSL_LANGUAGE_THRESHOLD  — minimum English hits before falling back to Spanish

PDF:
    FSL_MAX_PDF_PAGES       — page cap when no explicit end page is requested
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Sliding-window search over the normalized document
    window_size: int = 4000
    overlap_stride: int = 500
    buffer_size: int = 1000
    output_chunk_size: int = 12000

    # A type scoring below this in English forces the Spanish pass for all types
    language_threshold: int = 15

    # Document normalization / PDF extraction
    mime_sniff_length: int = 8192
    max_pdf_pages: int = 100

    log_level: str = "INFO"

    @field_validator(
        "window_size", "overlap_stride", "buffer_size", "output_chunk_size",
        "mime_sniff_length", "max_pdf_pages",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "FSL_"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config
