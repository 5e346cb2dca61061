"""Exceptions shared across the engine."""


class NoOddsAvailableError(ValueError):
    """Raised when a price is requested from an empty set of bookmaker markets."""


class ConfigError(ValueError):
    """Raised by the configuration loaders for invalid settings."""
