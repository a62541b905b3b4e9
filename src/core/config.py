"""Runtime configuration model for Sieve.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_ACCEPTED_CONTENT_TYPES,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_CONTENT_LENGTH,
)
from core.errors import SieveConfigError
from core.types import ValidationConfig
from ingest.validation import build_validation_config


@dataclass(frozen=True)
class SieveConfig:
    """Validated runtime configuration.

    Attributes:
        max_content_length: Default byte ceiling for uploads.
        accepted_content_types: Default accepted content types.
        buffer_dir: Optional directory for transient replay buffers.
        chunk_size: Read size used by stream sources.
        s3_region: Optional default AWS region for the S3 sink.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    max_content_length: int
    accepted_content_types: tuple[str, ...]
    buffer_dir: Path | None
    chunk_size: int
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "SieveConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SieveConfigError: If environment values are invalid.
        """
        max_length_value = os.getenv("SIEVE_MAX_CONTENT_LENGTH", str(DEFAULT_MAX_CONTENT_LENGTH))
        accepted_value = os.getenv("SIEVE_ACCEPTED_CONTENT_TYPES")
        buffer_dir_value = os.getenv("SIEVE_BUFFER_DIR")
        chunk_size_value = os.getenv("SIEVE_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
        return cls(
            max_content_length=_parse_positive_int("SIEVE_MAX_CONTENT_LENGTH", max_length_value),
            accepted_content_types=_parse_content_types(accepted_value),
            buffer_dir=Path(buffer_dir_value).expanduser().resolve() if buffer_dir_value else None,
            chunk_size=_parse_positive_int("SIEVE_CHUNK_SIZE", chunk_size_value),
            s3_region=os.getenv("SIEVE_S3_REGION"),
            s3_profile=os.getenv("SIEVE_S3_PROFILE"),
        )

    def validation_config(self) -> ValidationConfig:
        """Return the validation limits described by this config."""
        return build_validation_config(self.max_content_length, self.accepted_content_types)


def _parse_positive_int(variable_name: str, raw_value: str) -> int:
    """Parse a strictly positive integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed integer.

    Raises:
        SieveConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise SieveConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a positive numeric value."
        ) from error
    if value <= 0:
        raise SieveConfigError(
            f"Invalid {variable_name} value: expected a positive integer, got {value}. "
            f"Set {variable_name} to a value greater than zero."
        )
    return value


def _parse_content_types(raw_value: str | None) -> tuple[str, ...]:
    """Split a comma-separated content type list, falling back to defaults."""
    if raw_value is None:
        return DEFAULT_ACCEPTED_CONTENT_TYPES
    content_types = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not content_types:
        raise SieveConfigError(
            "Invalid SIEVE_ACCEPTED_CONTENT_TYPES value: no content types listed. "
            "Provide a comma-separated list such as 'application/pdf,image/png'."
        )
    return content_types
