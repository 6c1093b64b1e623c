"""Exceptions."""


class ConfigurationError(RuntimeError):
    """The application cannot start with the provided configuration."""
