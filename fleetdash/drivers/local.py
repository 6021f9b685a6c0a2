"""
FleetDash Drivers - Local execution.
"""

from __future__ import annotations

import asyncio
import contextlib

from loguru import logger

from fleetdash.core.exceptions import CommandFailedError, CommandTimeoutError
from fleetdash.core.types import ConnectionType
from fleetdash.drivers.base import Driver


class LocalDriver(Driver):
    """Run commands through the local shell."""

    @property
    def host(self) -> str:
        return "localhost"

    @property
    def kind(self) -> str:
        return ConnectionType.LOCAL.value

    async def run(self, command: str, timeout: float) -> str:
        if not command or not command.strip():
            raise ValueError("Command cannot be empty")

        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except TimeoutError:
            await self._kill(process)
            raise CommandTimeoutError(self.host, timeout) from None
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        logger.debug(
            f"⚡ Executed local command (length: {len(command)} chars, exit: {process.returncode})"
        )
        if process.returncode != 0:
            raise CommandFailedError(
                self.host, process.returncode or -1, stderr.decode("utf-8", errors="replace")
            )
        return stdout.decode("utf-8", errors="replace")

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
