"""
FleetDash Drivers - SSH execution.

Uses asyncssh. The connection is opened lazily on the first run, reused by
every metric of the host and dropped after a transport failure so the next
tick reconnects.
"""

from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import asyncssh
from loguru import logger

from fleetdash.core.exceptions import CommandFailedError, CommandTimeoutError, SSHConnectionError
from fleetdash.core.types import ConnectionType
from fleetdash.drivers.base import Driver

if TYPE_CHECKING:
    from fleetdash.config.models import ConnectionSpec


class SSHDriver(Driver):
    """Run commands on a remote host over SSH."""

    DEFAULT_CONNECT_TIMEOUT = 10.0

    def __init__(
        self,
        connection: ConnectionSpec,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """
        Initialize driver.

        Args:
            connection: Resolved connection of the host.
            connect_timeout: Upper bound for establishing the session.
        """
        if not connection.target_host:
            raise ValueError("SSH connection has no target host")
        self.connection = connection
        self.connect_timeout = connect_timeout
        self._conn: asyncssh.SSHClientConnection | None = None
        self._lock = asyncio.Lock()

    @property
    def host(self) -> str:
        return self.connection.target_host

    @property
    def kind(self) -> str:
        return ConnectionType.SSH.value

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect_options(self) -> dict[str, Any]:
        """Build asyncssh connection options."""
        spec = self.connection
        options: dict[str, Any] = {
            "host": spec.target_host,
            "port": spec.port,
            # Host keys are not checked, fleets are usually provisioned from templates
            "known_hosts": None,
        }
        if spec.username:
            options["username"] = spec.username
        if spec.password:
            options["password"] = spec.password
            options["preferred_auth"] = "password,keyboard-interactive"
        if spec.private_key_path:
            options["client_keys"] = [str(Path(spec.private_key_path).expanduser())]
            if spec.private_key_passphrase:
                options["passphrase"] = spec.private_key_passphrase
        return options

    async def _get_connection(self, timeout: float) -> asyncssh.SSHClientConnection:
        async with self._lock:
            if self._conn is not None:
                return self._conn

            try:
                self._conn = await asyncio.wait_for(
                    asyncssh.connect(**self.connect_options()),
                    timeout=min(self.connect_timeout, timeout),
                )
            except TimeoutError:
                raise SSHConnectionError(self.host, "connection timed out") from None
            except (asyncssh.Error, OSError) as e:
                raise SSHConnectionError(self.host, str(e) or type(e).__name__) from e

            logger.info(f"🌐 SSH connected to {self.host}:{self.connection.port}")
            return self._conn

    async def run(self, command: str, timeout: float) -> str:
        if not command or not command.strip():
            raise ValueError("Command cannot be empty")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        conn = await self._get_connection(timeout)
        remaining = max(deadline - loop.time(), 0.001)

        try:
            result = await asyncio.wait_for(conn.run(command, check=False), timeout=remaining)
        except TimeoutError:
            raise CommandTimeoutError(self.host, timeout) from None
        except (asyncssh.Error, OSError) as e:
            await self._invalidate(conn)
            raise SSHConnectionError(self.host, str(e) or type(e).__name__) from e

        # Never log command content
        logger.debug(
            f"⚡ Executed command on {self.host} "
            f"(length: {len(command)} chars, exit: {result.exit_status})"
        )

        stdout = result.stdout or ""
        stderr = result.stderr or ""
        if isinstance(stdout, bytes):
            stdout = stdout.decode("utf-8", errors="replace")
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")

        if result.exit_status != 0:
            exit_code = result.exit_status if result.exit_status is not None else -1
            raise CommandFailedError(self.host, exit_code, stderr)
        return stdout

    async def _invalidate(self, conn: asyncssh.SSHClientConnection) -> None:
        """Drop a broken connection so the next run reconnects."""
        async with self._lock:
            if self._conn is conn:
                self._conn = None
        conn.close()
        logger.debug(f"🔌 Invalidated SSH connection to {self.host}")

    async def close(self) -> None:
        async with self._lock:
            conn, self._conn = self._conn, None
        if conn is None:
            return
        conn.close()
        with contextlib.suppress(Exception):
            await asyncio.wait_for(conn.wait_closed(), timeout=5.0)
        logger.debug(f"🔌 Disconnected from {self.host}")
