"""YAML validation policy loading.

This module loads validation limits from a YAML policy file so that a
deployment can share one reviewed policy across CLI and SDK callers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

from core.errors import SieveConfigError, SieveDependencyError
from core.types import ValidationConfig
from ingest.validation import build_validation_config

_ALLOWED_POLICY_KEYS = frozenset({"version", "max_length", "accepted_content_types"})


def load_validation_policy(policy_path: str) -> ValidationConfig:
    """Load and validate a YAML validation policy from disk.

    Args:
        policy_path: File path to the YAML policy.

    Returns:
        Validation config described by the policy.

    Raises:
        SieveDependencyError: If PyYAML is unavailable.
        SieveConfigError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(policy_path)
    root_mapping = _expect_mapping(payload)
    _validate_root_keys(root_mapping)
    _parse_version(root_mapping)
    max_length = _parse_max_length(root_mapping)
    accepted_content_types = _parse_content_types(root_mapping)
    return build_validation_config(max_length, accepted_content_types)


def _load_yaml_payload(policy_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise SieveDependencyError(
            "YAML policy support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    policy_file = Path(policy_path).expanduser().resolve()
    if not policy_file.exists():
        raise SieveConfigError(
            f"Policy file does not exist at {policy_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(policy_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise SieveConfigError(
            f"Failed to read policy at {policy_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise SieveConfigError(
            f"Failed to parse YAML policy at {policy_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise SieveConfigError(
            f"Policy at {policy_file} is empty. Define 'max_length' and 'accepted_content_types'."
        )
    return payload


def _expect_mapping(value: object) -> Mapping[str, object]:
    if isinstance(value, Mapping) and all(isinstance(key, str) for key in value):
        return value
    raise SieveConfigError(
        f"Invalid policy root: expected mapping with string keys, got {type(value).__name__}."
    )


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - _ALLOWED_POLICY_KEYS)
    if unknown_keys:
        raise SieveConfigError(f"Policy contains unknown fields: {', '.join(unknown_keys)}.")


def _parse_version(root_mapping: Mapping[str, object]) -> None:
    raw_version = root_mapping.get("version", 1)
    if raw_version != 1 or isinstance(raw_version, bool):
        raise SieveConfigError(f"Unsupported policy version {raw_version!r}. Use version: 1.")


def _parse_max_length(root_mapping: Mapping[str, object]) -> int:
    raw_value = root_mapping.get("max_length")
    if not isinstance(raw_value, int) or isinstance(raw_value, bool):
        raise SieveConfigError(
            "Policy field 'max_length' must be an integer byte count. Set max_length: 10485760."
        )
    return raw_value


def _parse_content_types(root_mapping: Mapping[str, object]) -> tuple[str, ...]:
    raw_value = root_mapping.get("accepted_content_types")
    if not isinstance(raw_value, Sequence) or isinstance(raw_value, (str, bytes)):
        raise SieveConfigError(
            "Policy field 'accepted_content_types' must be a list of content type strings."
        )
    content_types: list[str] = []
    for item in raw_value:
        if not isinstance(item, str):
            raise SieveConfigError(
                f"Policy content type entries must be strings, got {type(item).__name__}."
            )
        content_types.append(item)
    return tuple(content_types)
