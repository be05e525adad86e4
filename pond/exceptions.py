"""Koi pond exception hierarchy.

Centralised base classes so callers can catch pond failures narrowly and
the coordinator can drop a single broken agent without stopping the frame.
"""


class PondError(Exception):
    """Root of all koi pond domain exceptions."""


class InvalidGeometryError(PondError, ZeroDivisionError):
    """A geometric operation was asked to do something degenerate.

    Raised when normalizing a zero-length vector.
    """


class InvalidInputError(PondError, ValueError):
    """An empty or otherwise unusable collection was passed to a helper."""


class InvalidFormatError(PondError, ValueError):
    """A color specification could not be parsed."""


class ConfigurationError(PondError):
    """Invalid or missing configuration."""


class AgentError(PondError):
    """An agent-level failure during update or draw."""
