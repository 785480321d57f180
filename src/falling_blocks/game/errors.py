from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when the engine is built or driven with invalid settings."""


class OutOfBoundsError(ConfigurationError, IndexError):
    """Raised when a grid cell outside the board is read or written."""
