"""Exception types raised by eezsuit."""

from __future__ import annotations


class EezsuitError(Exception):
    """Base class for eezsuit errors."""


class AlignmentError(EezsuitError, ValueError):
    """Raised when rasters and zones do not share a grid or CRS."""


class LayerError(EezsuitError, ValueError):
    """Raised when an input layer cannot be read or is malformed."""


class ConfigError(EezsuitError, ValueError):
    """Raised when a run config is invalid."""
