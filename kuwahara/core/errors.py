"""
Exception types raised by the Kuwahara toolkit.

Validation problems are collected as ValidationIssue objects first; the
blocking ones are raised through these classes so callers can catch them
either as KuwaharaError or as the builtin they specialise.
"""

from typing import List, Optional

from .types import ValidationIssue


class KuwaharaError(Exception):
    """Base class for all toolkit errors."""

    def __init__(self, message: str, issues: Optional[List[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class InvalidParameterError(KuwaharaError, ValueError):
    """Filter parameters are outside their valid domain."""


class DimensionMismatchError(KuwaharaError, ValueError):
    """Destination buffer does not match the source buffer."""


class InvalidImageError(KuwaharaError, ValueError):
    """Image buffer or region list cannot be processed."""


class RenderCancelledError(KuwaharaError):
    """A whole-image render was cancelled before completing."""
