"""Public SDK surface for Sieve.

This module provides a stable import path for library users.
It re-exports the ingest engine, byte sources, sinks, and typed models.
"""

from __future__ import annotations

from core.config import SieveConfig
from core.policy_file import load_validation_policy
from core.types import IngestVerdict, UploadMetadata, ValidationConfig
from ingest.content_detector import detect_content_type, normalize_content_type
from ingest.engine import Ingestor
from ingest.validation import build_validation_config
from sinks.directory_sink import DirectorySink
from sinks.draining_sink import DrainingSink
from sinks.s3_sink import S3Sink
from sinks.sink import IngestSink
from sources.byte_source import ByteSource, ByteSourceKind, iter_chunks
from sources.replay_source import ReplayByteSource
from sources.stream_source import StreamByteSource

__all__ = [
    "ByteSource",
    "ByteSourceKind",
    "DirectorySink",
    "DrainingSink",
    "IngestSink",
    "IngestVerdict",
    "Ingestor",
    "ReplayByteSource",
    "S3Sink",
    "SieveConfig",
    "StreamByteSource",
    "UploadMetadata",
    "ValidationConfig",
    "build_validation_config",
    "detect_content_type",
    "iter_chunks",
    "load_validation_policy",
    "normalize_content_type",
]
