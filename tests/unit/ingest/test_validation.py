"""Unit tests for upload validation rules."""

from __future__ import annotations

import pytest

from core.errors import SieveConfigError
from core.types import UploadMetadata
from ingest.validation import build_validation_config, collect_validation_errors


def test_build_validation_config_normalizes_types() -> None:
    """Accepted types should be stored without parameters."""
    config = build_validation_config(100, ["application/pdf; version=1.7", " image/png "])

    assert config.accepted_content_types == frozenset({"application/pdf", "image/png"})


def test_build_validation_config_rejects_non_positive_limit() -> None:
    """A zero byte ceiling should be rejected."""
    with pytest.raises(SieveConfigError):
        build_validation_config(0, ["application/pdf"])

    assert True


def test_collect_validation_errors_accepts_matching_upload() -> None:
    """A well-described upload within limits should produce no errors."""
    config = build_validation_config(100, ["application/pdf"])
    metadata = UploadMetadata("a.pdf", "application/pdf", declared_length=9)

    errors = collect_validation_errors(metadata, config, 9, "application/pdf")

    assert errors == ()


def test_collect_validation_errors_reports_every_failure_in_order() -> None:
    """All rules should run and report in their fixed order."""
    config = build_validation_config(5, ["application/pdf"])
    metadata = UploadMetadata("a.png", "application/pdf", declared_length=10)

    errors = collect_validation_errors(metadata, config, 8, "image/png")

    assert len(errors) == 4
    assert errors[0] == "Content length mismatch: expected 10 bytes, got 8 bytes"
    assert errors[1] == "File size 8 bytes exceeds maximum allowed 5 bytes"
    assert errors[2] == "Content type 'image/png' is not in accepted list: [application/pdf]"
    assert errors[3] == "Content type mismatch: claimed 'application/pdf', detected 'image/png'"


def test_collect_validation_errors_compares_normalized_claim() -> None:
    """Claimed type parameters should not cause a mismatch."""
    config = build_validation_config(100, ["application/pdf"])
    metadata = UploadMetadata("a.pdf", "application/pdf; charset=binary")

    errors = collect_validation_errors(metadata, config, 9, "application/pdf")

    assert errors == ()


def test_collect_validation_errors_missing_claim_mismatches_detected_type() -> None:
    """A missing claim normalizes to octet-stream and mismatches a PDF."""
    config = build_validation_config(100, ["application/pdf"])
    metadata = UploadMetadata("upload.bin")

    errors = collect_validation_errors(metadata, config, 9, "application/pdf")

    assert errors == (
        "Content type mismatch: claimed 'application/octet-stream', detected 'application/pdf'",
    )
