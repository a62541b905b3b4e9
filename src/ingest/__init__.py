"""Single-pass upload ingestion.

This package drains a read-once source, measures and classifies it,
validates it, and replays it to a sink with guaranteed buffer cleanup.
"""
