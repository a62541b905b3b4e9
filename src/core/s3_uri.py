"""S3 URI parsing helpers.

This module parses ``s3://bucket/prefix`` destinations for the S3 sink
and builds object keys underneath them.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.errors import SieveConfigError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str

    def object_key(self, *parts: str) -> str:
        """Join key parts beneath the location prefix."""
        segments = [self.prefix.strip("/")] if self.prefix.strip("/") else []
        segments.extend(part.strip("/") for part in parts)
        return "/".join(segments)


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket`` or ``s3://bucket/prefix``.

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        SieveConfigError: If the URI has no scheme or bucket.
    """
    if not uri.startswith("s3://"):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix("s3://")
    bucket, _, prefix = stripped_uri.partition("/")
    if not bucket:
        _raise_uri_error(uri)
    return S3Location(bucket=bucket, prefix=prefix)


def _raise_uri_error(uri: str) -> None:
    """Raise an invalid URI error.

    Args:
        uri: Invalid URI value.

    Raises:
        SieveConfigError: Always.
    """
    raise SieveConfigError(
        f"Invalid S3 URI '{uri}': expected s3://bucket/prefix. "
        "Provide at least a bucket name."
    )
