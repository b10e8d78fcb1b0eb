"""Error taxonomy shared by every encoder."""

from __future__ import annotations


class EncoderError(ValueError):
    """Base class for encoder failures."""


class ConfigurationError(EncoderError):
    """Raised at construction when n/w/range parameters are invalid."""


class DomainError(EncoderError):
    """Raised when an input lies outside a non-periodic, non-clipping range."""


class DimensionMismatch(EncoderError):
    """Raised when an output buffer or coordinate has the wrong shape."""
