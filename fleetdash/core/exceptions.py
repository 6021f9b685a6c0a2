"""
FleetDash Core - Unified error hierarchy.

Configuration errors are fatal at startup. Execution and poll errors are
recovered per (host, metric) cell by the polling engine.
"""

from __future__ import annotations

from collections.abc import Sequence


class FleetDashError(Exception):
    """Base exception for all FleetDash errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(FleetDashError):
    """Configuration is malformed or invalid."""

    def __init__(
        self,
        message: str,
        node: str | None = None,
        field: str | None = None,
        cause: Exception | None = None,
    ):
        location = ":".join(part for part in (node, field) if part)
        text = f"{location}: {message}" if location else message
        super().__init__(text)
        self.node = node
        self.field = field
        self.cause = cause


class ConnectionDecodeError(ConfigError):
    """A node's `connection` block could not be decoded."""

    def __init__(
        self,
        node: str,
        cause: Exception | str,
        affected_hosts: Sequence[str] = (),
    ):
        reason = cause if isinstance(cause, str) else str(cause)
        super().__init__(
            f"invalid connection ({reason})",
            node=node,
            field="connection",
            cause=cause if isinstance(cause, Exception) else None,
        )
        self.reason = reason
        self.affected_hosts = list(affected_hosts)

    def __str__(self) -> str:
        if self.affected_hosts:
            return f"{self.message}; affects hosts: {', '.join(self.affected_hosts)}"
        return self.message


class InventoryError(ConfigError):
    """One or more inventory nodes failed to resolve."""

    def __init__(self, errors: Sequence[ConfigError]):
        self.errors = list(errors)
        count = len(self.errors)
        super().__init__(f"{count} inventory error{'s' if count != 1 else ''}")

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


# =============================================================================
# Execution Errors
# =============================================================================


class ExecutionError(FleetDashError):
    """Command execution against a host failed."""

    pass


class SSHConnectionError(ExecutionError):
    """SSH connection failed."""

    def __init__(self, host: str, reason: str):
        super().__init__(
            f"SSH connection to '{host}' failed: {reason}",
            {"host": host, "reason": reason},
        )
        self.host = host
        self.reason = reason


class CommandTimeoutError(ExecutionError):
    """Command execution timed out."""

    def __init__(self, host: str, timeout_seconds: float):
        super().__init__(
            f"Command on '{host}' timed out after {timeout_seconds:g}s",
            {"host": host, "timeout": timeout_seconds},
        )
        self.host = host
        self.timeout_seconds = timeout_seconds


class CommandFailedError(ExecutionError):
    """Command returned non-zero exit code."""

    def __init__(self, host: str, exit_code: int, stderr: str = ""):
        message = f"Command on '{host}' failed with exit code {exit_code}"
        first_line = stderr.strip().splitlines()[0] if stderr.strip() else ""
        if first_line:
            message = f"{message}: {first_line[:120]}"
        super().__init__(
            message,
            {"host": host, "exit_code": exit_code, "stderr": stderr.strip()[:200]},
        )
        self.host = host
        self.exit_code = exit_code
        self.stderr = stderr


class InspectorParseError(ExecutionError):
    """Command output could not be parsed into a metric value."""

    def __init__(self, metric: str, reason: str):
        super().__init__(f"Cannot parse '{metric}' output: {reason}", {"metric": metric})
        self.metric = metric
        self.reason = reason


# =============================================================================
# Polling Errors
# =============================================================================


class PollError(FleetDashError):
    """A single sampling attempt for a (host, metric) pair failed."""

    def __init__(self, address: str, metric: str, cause: BaseException):
        if isinstance(cause, FleetDashError):
            reason = cause.message
        else:
            reason = str(cause) or type(cause).__name__
        super().__init__(f"{address}/{metric}: {reason}")
        self.address = address
        self.metric = metric
        self.cause = cause
        self.reason = reason


class EngineShutdownError(FleetDashError):
    """Polling tasks did not stop within the shutdown grace period."""

    def __init__(self, stuck: Sequence[tuple[str, str]], grace: float):
        self.stuck = list(stuck)
        self.grace = grace
        pairs = ", ".join(f"{address}/{metric}" for address, metric in self.stuck)
        super().__init__(
            f"{len(self.stuck)} polling task(s) still running after {grace:g}s: {pairs}"
        )
