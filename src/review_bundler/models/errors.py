"""Exception types raised while bundling an archive."""

from __future__ import annotations


class BundleError(Exception):
    """Base class for errors that abort a bundling run."""


class ValidationError(BundleError):
    """Raised when the provided inputs are rejected before processing starts."""


class ArchiveFormatError(BundleError):
    """Raised when the archive bytes cannot be decoded as the declared kind."""


class RunInProgressError(BundleError):
    """Raised when a run is started while it is already processing."""
