"""Shared typed models.

This module defines immutable data models used by the ingest engine,
sinks, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import SieveConfigError


@dataclass(frozen=True)
class UploadMetadata:
    """Caller-supplied facts about one upload.

    Attributes:
        filename: Original file name, informational only.
        claimed_content_type: Untrusted content type asserted by the uploader.
        declared_length: Optional byte length asserted by the uploader.
    """

    filename: str
    claimed_content_type: str | None = None
    declared_length: int | None = None

    def __post_init__(self) -> None:
        if self.declared_length is not None and self.declared_length < 0:
            raise SieveConfigError(
                f"Invalid declared length {self.declared_length} for {self.filename}: "
                "expected a non-negative byte count. Omit it when unknown."
            )


@dataclass(frozen=True)
class ValidationConfig:
    """Validation limits applied to one or many ingestions.

    Attributes:
        max_length: Byte ceiling, strictly positive.
        accepted_content_types: Normalized content types allowed through.
    """

    max_length: int
    accepted_content_types: frozenset[str]

    def __post_init__(self) -> None:
        if self.max_length <= 0:
            raise SieveConfigError(
                f"Invalid max length {self.max_length}: expected a positive byte count. "
                "Set max_length greater than zero."
            )


@dataclass(frozen=True)
class IngestVerdict:
    """Immutable outcome of validating one ingested stream.

    Attributes:
        detected_content_type: Content type derived from leading bytes.
        observed_length: Exact number of bytes drained from the source.
        digest_hex: Lowercase hex digest of the full byte sequence.
        accepted: True when no validation rule failed.
        errors: Ordered human-readable validation failures.
    """

    detected_content_type: str
    observed_length: int
    digest_hex: str
    accepted: bool
    errors: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.accepted == bool(self.errors):
            raise SieveConfigError(
                f"Inconsistent verdict: accepted={self.accepted} with "
                f"{len(self.errors)} error(s). Build verdicts with from_measurements."
            )

    @classmethod
    def from_measurements(
        cls,
        detected_content_type: str,
        observed_length: int,
        digest_hex: str,
        errors: tuple[str, ...],
    ) -> "IngestVerdict":
        """Build a verdict whose acceptance follows from its error list."""
        return cls(
            detected_content_type=detected_content_type,
            observed_length=observed_length,
            digest_hex=digest_hex,
            accepted=not errors,
            errors=tuple(errors),
        )

    def to_payload(self) -> dict[str, object]:
        """Serialize the verdict into a JSON-safe payload."""
        return {
            "detected_content_type": self.detected_content_type,
            "observed_length": self.observed_length,
            "digest_hex": self.digest_hex,
            "accepted": self.accepted,
            "errors": list(self.errors),
        }
