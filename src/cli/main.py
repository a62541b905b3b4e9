"""Sieve CLI entry points.
This module exposes commands for checking, storing, and sniffing uploads.
It maps argparse commands onto the ingest engine and bundled sinks.
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import SieveConfig
from core.constants import HEADER_CAPTURE_LIMIT
from core.errors import SieveError
from core.logging_config import configure_log_level
from core.policy_file import load_validation_policy
from core.types import IngestVerdict, UploadMetadata, ValidationConfig
from ingest.content_detector import detect_content_type
from ingest.engine import Ingestor
from ingest.header_capture import HeaderCapture
from ingest.validation import build_validation_config
from sinks.directory_sink import DirectorySink
from sinks.draining_sink import DrainingSink
from sinks.s3_sink import S3Sink, create_s3_client
from sinks.sink import IngestSink
from sources.byte_source import iter_chunks
from sources.stream_source import StreamByteSource

STDIN_SOURCE = "-"
STDIN_FILENAME = "<stdin>"
EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="sieve", description="Sieve upload ingestion CLI")
    parser.add_argument("--buffer-dir", help="Override SIEVE_BUFFER_DIR for this command")
    parser.add_argument("--log-level", default="WARNING", help="Log level for stderr output")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_check_command(subparsers)
    _add_store_command(subparsers)
    _add_detect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Sieve CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 0 accepted, 1 rejected, 2 failed.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_log_level(args.log_level)
    try:
        if args.command == "detect":
            return _run_detect_command(args)
        config = _build_config(args.buffer_dir)
        if args.command == "check":
            return _run_check_command(config, args)
        if args.command == "store":
            return _run_store_command(config, args)
    except SieveError as error:
        print(f"error: {error}", file=sys.stderr)
        return EXIT_FAILED
    parser.error(f"Unsupported command: {args.command}")
    return EXIT_FAILED


def _build_config(buffer_dir: str | None) -> SieveConfig:
    """Build runtime config with optional buffer-dir override."""
    config = SieveConfig.from_env()
    if buffer_dir:
        config = replace(config, buffer_dir=Path(buffer_dir).expanduser().resolve())
    return config


def _run_check_command(config: SieveConfig, args: argparse.Namespace) -> int:
    """Handle check command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    verdict = _ingest_with_sink(config, args, DrainingSink())
    _print_verdict(verdict, args.json)
    return EXIT_ACCEPTED if verdict.accepted else EXIT_REJECTED


def _run_store_command(config: SieveConfig, args: argparse.Namespace) -> int:
    """Handle store command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    sink: IngestSink
    if args.output_uri:
        s3_client = create_s3_client(region=config.s3_region, profile=config.s3_profile)
        sink = S3Sink(args.output_uri, s3_client=s3_client)
    else:
        sink = DirectorySink(Path(args.output_dir).expanduser().resolve())
    verdict = _ingest_with_sink(config, args, sink)
    _print_verdict(verdict, args.json)
    return EXIT_ACCEPTED if verdict.accepted else EXIT_REJECTED


def _run_detect_command(args: argparse.Namespace) -> int:
    """Handle detect command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    header = HeaderCapture()
    with _open_source(args.source, HEADER_CAPTURE_LIMIT) as source:
        for chunk in iter_chunks(source):
            header.feed(chunk)
            if header.is_full:
                break
    print(detect_content_type(header.header()))
    return EXIT_ACCEPTED


def _ingest_with_sink(
    config: SieveConfig,
    args: argparse.Namespace,
    sink: IngestSink,
) -> IngestVerdict:
    """Run one ingestion for CLI args against a sink."""
    validation_config = _resolve_validation_config(config, args)
    metadata = _build_metadata(args)
    ingestor = Ingestor(buffer_dir=config.buffer_dir, chunk_size=config.chunk_size)
    with _open_source(args.source, config.chunk_size) as source:
        return ingestor.ingest(metadata, validation_config, source, sink)


def _resolve_validation_config(config: SieveConfig, args: argparse.Namespace) -> ValidationConfig:
    """Merge env defaults, optional policy file, and CLI overrides."""
    base_config = (
        load_validation_policy(args.policy) if args.policy else config.validation_config()
    )
    max_length = args.max_length if args.max_length is not None else base_config.max_length
    accepted_types = args.accept if args.accept else sorted(base_config.accepted_content_types)
    return build_validation_config(max_length, accepted_types)


def _build_metadata(args: argparse.Namespace) -> UploadMetadata:
    """Derive upload metadata, guessing the claimed type from the file name."""
    filename = STDIN_FILENAME if args.source == STDIN_SOURCE else Path(args.source).name
    claimed_type = args.claimed_type
    if claimed_type is None and args.source != STDIN_SOURCE:
        claimed_type = mimetypes.guess_type(filename)[0]
    return UploadMetadata(
        filename=filename,
        claimed_content_type=claimed_type,
        declared_length=args.declared_length,
    )


def _open_source(source_arg: str, chunk_size: int) -> StreamByteSource:
    """Open a file path or stdin as a stream source."""
    if source_arg == STDIN_SOURCE:
        return StreamByteSource(sys.stdin.buffer, chunk_size=chunk_size, close_stream=False)
    return StreamByteSource.from_path(Path(source_arg).expanduser(), chunk_size=chunk_size)


def _print_verdict(verdict: IngestVerdict, as_json: bool) -> None:
    """Print a verdict as JSON or key=value rows."""
    if as_json:
        print(json.dumps(verdict.to_payload(), sort_keys=True))
        return
    print(f"accepted={str(verdict.accepted).lower()}")
    print(f"detected_content_type={verdict.detected_content_type}")
    print(f"observed_length={verdict.observed_length}")
    print(f"digest={verdict.digest_hex}")
    for error in verdict.errors:
        print(f"error={error}")


def _add_ingest_arguments(parser: argparse.ArgumentParser) -> None:
    """Register arguments shared by ingesting commands."""
    parser.add_argument("source", help="Upload file path, or '-' for stdin")
    parser.add_argument("--claimed-type", help="Content type claimed by the uploader")
    parser.add_argument("--declared-length", type=int, help="Byte length claimed by the uploader")
    parser.add_argument("--max-length", type=int, help="Override maximum accepted byte length")
    parser.add_argument(
        "--accept",
        action="append",
        help="Accepted content type; repeat to accept several",
    )
    parser.add_argument("--policy", help="YAML validation policy file")
    parser.add_argument("--json", action="store_true", help="Print the verdict as JSON")


def _add_check_command(subparsers: Any) -> None:
    """Register check subcommand."""
    parser = subparsers.add_parser("check", help="Validate an upload and print its verdict")
    _add_ingest_arguments(parser)


def _add_store_command(subparsers: Any) -> None:
    """Register store subcommand."""
    parser = subparsers.add_parser(
        "store",
        help="Validate an upload and store it as accepted or quarantined",
    )
    _add_ingest_arguments(parser)
    destination = parser.add_mutually_exclusive_group(required=True)
    destination.add_argument("--output-dir", help="Local directory for stored uploads")
    destination.add_argument("--output-uri", help="s3://bucket/prefix destination")


def _add_detect_command(subparsers: Any) -> None:
    """Register detect subcommand."""
    parser = subparsers.add_parser("detect", help="Print the content type sniffed from a file")
    parser.add_argument("source", help="File path, or '-' for stdin")
