"""Read-once byte sources.

This package defines the chunked byte-source capability consumed by the
ingest engine and its live-stream and buffered-replay variants.
"""
