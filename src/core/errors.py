"""Sieve exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SieveError(Exception):
    """Base exception for all Sieve failures."""


class SieveConfigError(SieveError):
    """Raised for invalid runtime or validation configuration."""


class SieveSourceError(SieveError):
    """Raised when an input byte source cannot be read."""


class SieveBufferError(SieveError):
    """Raised for replay buffer create, write, and read failures."""


class SieveSinkError(SieveError):
    """Raised by bundled sinks when persisting an upload fails."""


class SieveDependencyError(SieveError):
    """Raised when a runtime dependency or digest algorithm is missing."""
