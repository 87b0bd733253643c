"""Tests for remote models."""

import pytest

from remote_ops.errors import ConfigurationError
from remote_ops.models import (
    DEFAULT_CONNECTION_TIMEOUT_MS,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT_MS,
    PasswordAuth,
    PublicKeyAuth,
    RemoteAddress,
    RemoteCollection,
)


class TestRemoteAddress:
    """Tests for single SSH endpoints."""

    def test_public_key_defaults(self) -> None:
        """A remote with only host and user gets the default port and timeouts."""
        remote = RemoteAddress.public_key_authenticated("r", host="h", user="u")

        assert remote.port == 22 == DEFAULT_PORT
        assert remote.connection_timeout_ms == 10_000 == DEFAULT_CONNECTION_TIMEOUT_MS
        assert remote.read_timeout_ms == 30_000 == DEFAULT_READ_TIMEOUT_MS
        assert remote.address == "u@h:22"
        assert isinstance(remote.auth, PublicKeyAuth)

    def test_public_key_is_default_auth(self) -> None:
        """Omitting auth means public key authentication."""
        remote = RemoteAddress(name="r", host="h", user="u")
        assert remote.auth == PublicKeyAuth()

    def test_password_remote(self) -> None:
        """Password remotes carry the secret and custom options."""
        remote = RemoteAddress.password_authenticated(
            "db", host="db.local", user="root", password="s3cret", port=2222
        )

        assert remote.auth == PasswordAuth("s3cret")
        assert remote.address == "root@db.local:2222"

    def test_password_not_in_repr(self) -> None:
        """The secret never shows up in repr."""
        remote = RemoteAddress.password_authenticated(
            "db", host="db.local", user="root", password="s3cret"
        )
        assert "s3cret" not in repr(remote)

    def test_empty_password_rejected(self) -> None:
        """Password auth requires a secret."""
        with pytest.raises(ConfigurationError, match="password"):
            PasswordAuth("")

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"host": ""}, "host"),
            ({"user": ""}, "user"),
            ({"host": "bad;host"}, "invalid characters"),
            ({"port": 0}, "port"),
            ({"port": 70000}, "port"),
            ({"connection_timeout_ms": 0}, "connection_timeout_ms"),
            ({"read_timeout_ms": -5}, "read_timeout_ms"),
        ],
    )
    def test_invalid_fields_rejected(self, kwargs: dict, match: str) -> None:
        """Invalid fields fail at construction, not at first use."""
        values = {"name": "r", "host": "h", "user": "u", **kwargs}
        with pytest.raises(ConfigurationError, match=match):
            RemoteAddress(**values)

    def test_remote_is_immutable(self) -> None:
        """Remotes cannot be changed after construction."""
        remote = RemoteAddress(name="r", host="h", user="u")
        with pytest.raises(AttributeError):
            remote.host = "other"  # type: ignore[misc]


class TestRemoteCollection:
    """Tests for remote groups."""

    def test_members_sorted_by_name(self) -> None:
        """Member names are kept in lexical order, not declaration order."""
        collection = RemoteCollection("all", ["b", "a", "c"])
        assert collection.members == ("a", "b", "c")

    def test_direct_values_become_references(self) -> None:
        """Node values are stored by name and kept for registration."""
        leaf = RemoteAddress(name="web", host="h", user="u")
        collection = RemoteCollection("all", [leaf, "db"])

        assert collection.members == ("db", "web")
        assert collection.inline == (leaf,)

    def test_single_name_member(self) -> None:
        """A single name is accepted as the member list."""
        assert RemoteCollection("one", "web").members == ("web",)

    def test_empty_collection_allowed(self) -> None:
        """A collection may start empty."""
        assert RemoteCollection("none").members == ()

    def test_wrong_member_type_rejected(self) -> None:
        """Only remote nodes and names can be members."""
        with pytest.raises(ConfigurationError, match="cannot hold"):
            RemoteCollection("all", [42])
