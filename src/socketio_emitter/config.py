"""Emitter configuration via environment variables.

Uses pydantic-settings to load config from env vars with SOCKETIO_EMITTER_
prefix. Keyword arguments override the environment.

Learn: The connection target resolves to exactly one Redis address:
    1. ``address`` wins when set ("host:port", or a socket path for unix)
    2. otherwise ``host:port``, each part falling back to localhost / 6379
    3. nothing at all → localhost:6379

A target that is set but unusable (bad port, unknown protocol, malformed
address) fails fast with ConfigurationError instead of silently falling
back to the default.
"""

from typing import Optional

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings

from socketio_emitter.errors import ConfigurationError
from socketio_emitter.protocol.packet import DEFAULT_KEY

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379
SUPPORTED_PROTOCOLS = ("tcp", "unix")


def split_address(address: str) -> tuple[str, int]:
    """Split "host:port" (or "[v6]:port") into its parts.

    Raises ValueError when the address is not in that form.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"address {address!r} must be in host:port form")
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"address {address!r} has a non-numeric port")
    _check_port(port_number)
    return host.strip("[]"), port_number


def _check_port(port: int) -> None:
    if not 0 < port <= 65535:
        raise ValueError(f"port {port} is outside 1-65535")


class EmitterSettings(BaseSettings):
    """All emitter configuration. Set via SOCKETIO_EMITTER_* env vars."""

    # Connection target
    host: Optional[str] = None
    port: Optional[int] = None
    address: Optional[str] = None
    protocol: str = "tcp"

    # Redis
    password: Optional[str] = None
    db: int = 0
    max_connections: int = 10000  # pool ceiling

    # Pub/sub
    key: str = DEFAULT_KEY

    # Publish failures raise TransportError; False logs them and carries on
    raise_on_publish_error: bool = True

    model_config = {"env_prefix": "SOCKETIO_EMITTER_"}

    @model_validator(mode="after")
    def validate_target(self):
        """Reject targets that are set but cannot be connected to."""
        if not self.key:
            raise ValueError("key must not be empty")
        if self.protocol not in SUPPORTED_PROTOCOLS:
            supported = ", ".join(SUPPORTED_PROTOCOLS)
            raise ValueError(
                f"unsupported protocol {self.protocol!r} (expected one of: {supported})"
            )
        if self.port is not None:
            _check_port(self.port)
        if self.max_connections < 1:
            raise ValueError("max_connections must be at least 1")

        if self.protocol == "unix":
            if not self.address:
                raise ValueError("protocol 'unix' requires address to be a socket path")
        elif self.address:
            split_address(self.address)
        return self

    def resolve_address(self) -> str:
        """The single address the connection pool dials."""
        if self.address:
            return self.address
        return f"{self.host or DEFAULT_HOST}:{self.port or DEFAULT_PORT}"

    def resolve_host_port(self) -> tuple[str, int]:
        """Host and port for TCP targets."""
        if self.protocol != "tcp":
            raise ConfigurationError(f"protocol {self.protocol!r} has no host/port")
        return split_address(self.resolve_address())


def load_settings(**overrides) -> EmitterSettings:
    """Build settings from the environment plus keyword overrides.

    Raises ConfigurationError instead of pydantic's ValidationError so
    callers only need to know the emitter's own error types.
    """
    # None means "not given" so the environment still applies
    given = {name: value for name, value in overrides.items() if value is not None}
    try:
        return EmitterSettings(**given)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid emitter configuration: {e}") from e
