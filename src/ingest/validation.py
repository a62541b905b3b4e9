"""Upload validation rules.

This module evaluates the ordered validation rules for one ingestion.
Every rule runs; failures accumulate as human-readable messages.
"""

from __future__ import annotations

from typing import Iterable

from core.errors import SieveConfigError
from core.types import UploadMetadata, ValidationConfig
from ingest.content_detector import normalize_content_type


def build_validation_config(
    max_length: int,
    accepted_content_types: Iterable[str],
) -> ValidationConfig:
    """Build a validation config with normalized content types.

    Args:
        max_length: Byte ceiling, must be positive.
        accepted_content_types: Content types to accept, parameters allowed.

    Returns:
        Immutable validation config.

    Raises:
        SieveConfigError: If ``max_length`` is not positive.
    """
    if max_length <= 0:
        raise SieveConfigError(
            f"Invalid max length {max_length}: expected a positive byte count. "
            "Set max_length greater than zero."
        )
    normalized_types = frozenset(
        normalize_content_type(content_type) for content_type in accepted_content_types
    )
    return ValidationConfig(max_length=max_length, accepted_content_types=normalized_types)


def collect_validation_errors(
    metadata: UploadMetadata,
    config: ValidationConfig,
    observed_length: int,
    detected_content_type: str,
) -> tuple[str, ...]:
    """Evaluate all validation rules in order.

    Args:
        metadata: Caller-supplied upload metadata.
        config: Validation limits.
        observed_length: Exact number of bytes drained.
        detected_content_type: Content type detected from the header.

    Returns:
        Ordered error messages; empty when the upload is acceptable.
    """
    errors: list[str] = []
    declared_length = metadata.declared_length
    if declared_length is not None and declared_length != observed_length:
        errors.append(
            f"Content length mismatch: expected {declared_length} bytes, "
            f"got {observed_length} bytes"
        )
    if observed_length > config.max_length:
        errors.append(
            f"File size {observed_length} bytes exceeds maximum allowed "
            f"{config.max_length} bytes"
        )
    normalized_detected = normalize_content_type(detected_content_type)
    if normalized_detected not in config.accepted_content_types:
        accepted_rows = ", ".join(sorted(config.accepted_content_types))
        errors.append(
            f"Content type '{normalized_detected}' is not in accepted list: [{accepted_rows}]"
        )
    # Label mismatches reject even when the detected type is accepted.
    normalized_claimed = normalize_content_type(metadata.claimed_content_type)
    if normalized_claimed != normalized_detected:
        errors.append(
            f"Content type mismatch: claimed '{normalized_claimed}', "
            f"detected '{normalized_detected}'"
        )
    return tuple(errors)
