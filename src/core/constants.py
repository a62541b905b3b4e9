"""Core constants used across Sieve modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_CHUNK_SIZE = 8192
HEADER_CAPTURE_LIMIT = 512
MIN_SIGNATURE_LENGTH = 4
HASH_ALGORITHM = "sha256"
DEFAULT_MAX_CONTENT_LENGTH = 10 * 1024 * 1024
BUFFER_FILE_PREFIX = "ingest-"
BUFFER_FILE_SUFFIX = ".tmp"

OCTET_STREAM_CONTENT_TYPE = "application/octet-stream"
PDF_CONTENT_TYPE = "application/pdf"
PNG_CONTENT_TYPE = "image/png"
JPEG_CONTENT_TYPE = "image/jpeg"
ZIP_CONTENT_TYPE = "application/zip"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_ACCEPTED_CONTENT_TYPES = (
    PDF_CONTENT_TYPE,
    PNG_CONTENT_TYPE,
    JPEG_CONTENT_TYPE,
    DOCX_CONTENT_TYPE,
)

ACCEPTED_DIR_NAME = "accepted"
QUARANTINE_DIR_NAME = "quarantine"
VERDICT_SIDECAR_SUFFIX = ".json"
PARTIAL_PAYLOAD_SUFFIX = ".partial"
