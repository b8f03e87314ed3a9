from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid scan bounds, bin layout or physical parameters. Raised before any window is built."""


class NumericalIntegrationWarning(UserWarning):
    """Velocity integral truncated at a window's upper edge; part of the signal power is not injected."""


class PersistenceError(OSError):
    """Result sink could not write or read a run."""
