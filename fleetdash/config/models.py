"""
FleetDash Config - Configuration models.

Pydantic models for type-safe connection settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from fleetdash.core.types import ConnectionType

if TYPE_CHECKING:
    from fleetdash.drivers.base import Driver

DEFAULT_SSH_PORT = 22


class ConnectionSpec(BaseModel):
    """
    How to reach a host.

    Immutable once built. Every host owns its own copy, bound to its
    address through `target_host`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ConnectionType = Field(default=ConnectionType.LOCAL, description="Driver strategy")
    username: str = Field(default="", description="SSH username")
    password: str = Field(default="", repr=False, description="SSH password")
    private_key_path: str = Field(default="", description="Path to SSH private key")
    private_key_passphrase: str = Field(
        default="", repr=False, description="Passphrase of the private key"
    )
    port: int = Field(default=0, ge=0, le=65535, validate_default=True, description="SSH port")
    target_host: str = Field(default="", description="Address the driver connects to")

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> Any:
        """An empty or missing type means local execution."""
        if value is None or value == "":
            return ConnectionType.LOCAL
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator(
        "username",
        "password",
        "private_key_path",
        "private_key_passphrase",
        "target_host",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        """YAML turns `password: 1234` into an int and `password:` into None."""
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _coerce_port(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("port")
    @classmethod
    def _default_port(cls, value: int, info: ValidationInfo) -> int:
        if value == 0 and info.data.get("type") == ConnectionType.SSH:
            return DEFAULT_SSH_PORT
        return value

    @model_validator(mode="after")
    def _check_credentials(self) -> ConnectionSpec:
        if self.password and self.private_key_path:
            raise ValueError(
                "cannot specify both password login and private key login on the same connection"
            )
        return self

    @property
    def is_remote(self) -> bool:
        return self.type == ConnectionType.SSH

    def bind(self, address: str) -> ConnectionSpec:
        """Return a copy of this connection targeting `address`."""
        return self.model_copy(update={"target_host": address})

    def to_driver(self, connect_timeout: float | None = None) -> Driver:
        """
        Map this connection to an execution driver.

        No connection is opened here; the driver connects on its first run.
        """
        from fleetdash.drivers import LocalDriver, SSHDriver

        if self.type == ConnectionType.SSH:
            if connect_timeout is None:
                return SSHDriver(self)
            return SSHDriver(self, connect_timeout=connect_timeout)
        return LocalDriver()
