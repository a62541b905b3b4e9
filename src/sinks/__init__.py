"""Downstream consumers of ingested uploads.

This package defines the sink capability and bundled sink adapters.
"""
