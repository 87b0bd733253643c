"""SSH connection lifecycle for one remote.

Each remote gets a fresh connection that is closed when the caller's
``async with`` block exits, whatever the outcome. Nothing is pooled or
reused across invocations.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import asyncssh

from remote_ops.errors import AuthenticationError, ConnectionError
from remote_ops.models import PasswordAuth, PublicKeyAuth, RemoteAddress

if TYPE_CHECKING:
    from remote_ops.config.host_keys import HostKeyVerifier

logger = logging.getLogger(__name__)

COMPRESSION_ALGS = ["zlib@openssh.com", "zlib", "none"]


def connect_options(
    remote: RemoteAddress,
    known_hosts: str | None,
    compression: bool = False,
) -> dict[str, Any]:
    """Build asyncssh.connect keyword arguments for a remote.

    Only connect and login are bounded: connection_timeout_ms maps to
    ``connect_timeout`` and read_timeout_ms to ``login_timeout``.

    Args:
        remote: Remote to connect to
        known_hosts: known_hosts path, or None to skip verification
        compression: Offer zlib compression

    Returns:
        Keyword arguments for asyncssh.connect
    """
    options: dict[str, Any] = {
        "port": remote.port,
        "username": remote.user,
        "known_hosts": known_hosts,
        "connect_timeout": remote.connection_timeout_ms / 1000,
        "login_timeout": remote.read_timeout_ms / 1000,
    }

    auth = remote.auth
    if isinstance(auth, PasswordAuth):
        options["password"] = auth.secret
        options["client_keys"] = None
        options["agent_path"] = None
    elif isinstance(auth, PublicKeyAuth):
        # asyncssh resolves the agent and default ~/.ssh keys itself
        pass
    else:
        raise TypeError(f"Unsupported auth method: {auth!r}")

    if compression:
        options["compression_algs"] = COMPRESSION_ALGS

    return options


async def _connect(
    remote: RemoteAddress,
    host_keys: "HostKeyVerifier",
    compression: bool,
) -> asyncssh.SSHClientConnection:
    """Connect and authenticate, translating transport failures."""
    options = connect_options(remote, host_keys.get_known_hosts_path(), compression)

    logger.info(
        "Opening SSH connection to %s (%s, auth=%s)",
        remote.name,
        remote.address,
        type(remote.auth).__name__,
    )
    try:
        try:
            return await asyncssh.connect(remote.host, **options)
        except asyncssh.HostKeyNotVerifiable as e:
            if host_keys.strict_checking:
                logger.error(
                    "Host key verification failed for %s: %s. "
                    "Add the host key to %s or set "
                    "REMOTE_OPS_STRICT_HOST_KEY_CHECKING=false",
                    remote.name,
                    e,
                    host_keys.get_known_hosts_path(),
                )
                raise
            logger.warning(
                "Host key not verified for %s (strict mode disabled): %s",
                remote.name,
                e,
            )
            options["known_hosts"] = None
            return await asyncssh.connect(remote.host, **options)
    except asyncssh.PermissionDenied as e:
        raise AuthenticationError(remote.address, e) from e
    except (asyncssh.Error, OSError, asyncio.TimeoutError) as e:
        raise ConnectionError(remote.address, e) from e


@asynccontextmanager
async def open_connection(
    remote: RemoteAddress,
    host_keys: "HostKeyVerifier",
    compression: bool = False,
) -> AsyncIterator[asyncssh.SSHClientConnection]:
    """Open an authenticated connection, closing it on every exit path.

    Args:
        remote: Remote to connect to
        host_keys: Host key policy
        compression: Offer transport compression (SCP transfers)

    Yields:
        Authenticated SSH connection

    Raises:
        AuthenticationError: If the remote rejects the credentials
        ConnectionError: If the remote cannot be reached or verified
    """
    conn = await _connect(remote, host_keys, compression)
    logger.info("SSH connection established to %s", remote.address)
    try:
        yield conn
    finally:
        logger.debug("Closing connection to %s", remote.address)
        conn.close()
        await conn.wait_closed()
