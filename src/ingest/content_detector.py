"""Signature-based content type detection.

This module classifies uploads by their leading bytes rather than by the
name or content type the uploader claims. Signatures are checked in
table order because some prefixes nest inside others.
"""

from __future__ import annotations

from typing import Callable

from core.constants import (
    DOCX_CONTENT_TYPE,
    HEADER_CAPTURE_LIMIT,
    JPEG_CONTENT_TYPE,
    MIN_SIGNATURE_LENGTH,
    OCTET_STREAM_CONTENT_TYPE,
    PDF_CONTENT_TYPE,
    PNG_CONTENT_TYPE,
    ZIP_CONTENT_TYPE,
)

_PDF_MAGIC = b"%PDF"
_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_JPEG_MAGIC = b"\xff\xd8\xff"
_ZIP_MAGIC = b"PK"
_ZIP_THIRD_BYTES = frozenset({0x03, 0x05, 0x07})
_ZIP_FOURTH_BYTES = frozenset({0x04, 0x06, 0x08})
_OFFICE_WORD_MARKERS = (b"word/", b"[Content_Types].xml")

SignatureMatcher = Callable[[bytes], "str | None"]


def detect_content_type(header: bytes) -> str:
    """Classify content from its leading bytes.

    Args:
        header: First bytes of the stream; only 512 are considered.

    Returns:
        Detected content type, or ``application/octet-stream`` when no
        signature matches or fewer than four bytes are available.
    """
    window = bytes(header[:HEADER_CAPTURE_LIMIT])
    if len(window) < MIN_SIGNATURE_LENGTH:
        return OCTET_STREAM_CONTENT_TYPE
    for matcher in _SIGNATURE_TABLE:
        content_type = matcher(window)
        if content_type is not None:
            return content_type
    return OCTET_STREAM_CONTENT_TYPE


def normalize_content_type(content_type: str | None) -> str:
    """Strip parameters and whitespace from a content type.

    Args:
        content_type: Raw content type such as ``text/plain; charset=utf-8``.

    Returns:
        Bare content type; missing or blank values map to
        ``application/octet-stream``.
    """
    if content_type is None:
        return OCTET_STREAM_CONTENT_TYPE
    normalized = content_type.split(";", 1)[0].strip()
    return normalized or OCTET_STREAM_CONTENT_TYPE


def _match_pdf(window: bytes) -> str | None:
    return PDF_CONTENT_TYPE if window.startswith(_PDF_MAGIC) else None


def _match_png(window: bytes) -> str | None:
    return PNG_CONTENT_TYPE if window.startswith(_PNG_MAGIC) else None


def _match_zip(window: bytes) -> str | None:
    """Match local, central, and end-of-archive ZIP records."""
    if not window.startswith(_ZIP_MAGIC):
        return None
    if window[2] not in _ZIP_THIRD_BYTES or window[3] not in _ZIP_FOURTH_BYTES:
        return None
    if any(marker in window for marker in _OFFICE_WORD_MARKERS):
        return DOCX_CONTENT_TYPE
    return ZIP_CONTENT_TYPE


def _match_jpeg(window: bytes) -> str | None:
    return JPEG_CONTENT_TYPE if window.startswith(_JPEG_MAGIC) else None


_SIGNATURE_TABLE: tuple[SignatureMatcher, ...] = (
    _match_pdf,
    _match_png,
    _match_zip,
    _match_jpeg,
)
