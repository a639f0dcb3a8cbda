"""Emitter errors.

Learn: Everything the package raises derives from EmitterError so callers
can catch one type. The three subclasses map to the three places an
emission can go wrong: building the connection target, packing the
envelope, and talking to Redis.
"""


class EmitterError(Exception):
    """Base class for all emitter failures."""


class ConfigurationError(EmitterError):
    """Raised when the connection target or pub/sub key is invalid."""


class EncodingError(EmitterError):
    """Raised when a payload cannot be packed into (or read from) an envelope."""


class TransportError(EmitterError):
    """Raised when a connection cannot be acquired or a PUBLISH fails."""
