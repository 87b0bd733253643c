"""Remote endpoint data models."""

from dataclasses import dataclass, field
from typing import Any, Final, Union

from remote_ops.models.collection import split_members
from remote_ops.utils.validation import (
    require_text,
    validate_host,
    validate_port,
    validate_timeout,
)

DEFAULT_PORT: Final[int] = 22
DEFAULT_CONNECTION_TIMEOUT_MS: Final[int] = 10_000
DEFAULT_READ_TIMEOUT_MS: Final[int] = 30_000


@dataclass(frozen=True)
class PasswordAuth:
    """Authenticate with user and password."""

    secret: str = field(repr=False)

    def __post_init__(self) -> None:
        require_text(self.secret, "password", "password auth")


@dataclass(frozen=True)
class PublicKeyAuth:
    """Authenticate with keys resolved outside this package (agent, ~/.ssh)."""


AuthMethod = Union[PasswordAuth, PublicKeyAuth]


@dataclass(frozen=True)
class RemoteAddress:
    """A single SSH endpoint."""

    name: str
    host: str
    user: str
    auth: AuthMethod = field(default_factory=PublicKeyAuth)
    port: int = DEFAULT_PORT
    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    read_timeout_ms: int = DEFAULT_READ_TIMEOUT_MS

    def __post_init__(self) -> None:
        require_text(self.name, "name", "remote")
        validate_host(self.host, self.name)
        require_text(self.user, "user", self.name)
        validate_port(self.port, self.name)
        validate_timeout(self.connection_timeout_ms, "connection_timeout_ms", self.name)
        validate_timeout(self.read_timeout_ms, "read_timeout_ms", self.name)
        if not isinstance(self.auth, (PasswordAuth, PublicKeyAuth)):
            raise TypeError(f"Unsupported auth method: {self.auth!r}")

    @property
    def address(self) -> str:
        """Return ``user@host:port``."""
        return f"{self.user}@{self.host}:{self.port}"

    @classmethod
    def password_authenticated(
        cls, name: str, host: str, user: str, password: str, **options: Any
    ) -> "RemoteAddress":
        """Create a remote that logs in with a password."""
        return cls(name=name, host=host, user=user, auth=PasswordAuth(password), **options)

    @classmethod
    def public_key_authenticated(
        cls, name: str, host: str, user: str, **options: Any
    ) -> "RemoteAddress":
        """Create a remote that logs in with externally configured keys."""
        return cls(name=name, host=host, user=user, auth=PublicKeyAuth(), **options)


@dataclass(frozen=True)
class RemoteCollection:
    """Named group of remotes, referenced by name.

    Members may be given as names or as node values. Node values are
    registered alongside the collection; only their names are kept here.
    """

    name: str
    members: tuple[str, ...] = ()
    inline: tuple["Remote", ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        require_text(self.name, "name", "remote collection")
        names, inline = split_members(
            self.name, self.members, (RemoteAddress, RemoteCollection)
        )
        object.__setattr__(self, "members", names)
        object.__setattr__(self, "inline", self.inline + inline)


Remote = Union[RemoteAddress, RemoteCollection]
