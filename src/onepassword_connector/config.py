"""Connector configuration.

Pydantic-validated settings for the 1Password connector. Everything the
connector needs from its environment comes through ConnectorConfig; direct
os.environ access is confined to load_config_from_env().
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .permissions.catalog import all_vault_permissions


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AuthType(str, Enum):
    """How the ``op`` CLI is authenticated.

    - SERVICE: service account token exported as OP_SERVICE_ACCOUNT_TOKEN
    - USER: interactive session token passed with ``--session``
    """

    SERVICE = "service"
    USER = "user"


class ConnectorConfig(BaseModel):
    """Configuration for the 1Password connector.

    Environment variables:
        LOG_LEVEL                      logging level
        LOG_JSON                       JSON log format (true/false)
        BATON_ADDRESS                  sign-in address of the account
        BATON_AUTH_TYPE                service | user
        OP_SESSION                     session token (user auth)
        OP_SERVICE_ACCOUNT_TOKEN       service account token (service auth)
        OP_CLI_PATH                    path to the op binary
        OP_COMMAND_TIMEOUT             per-command timeout in seconds
        BATON_LIMIT_VAULT_PERMISSIONS  comma-separated vault permission allow-list
    """

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the connector",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    address: str = Field(
        default="",
        description="Sign in address of your 1Password account",
    )
    auth_type: AuthType = Field(
        default=AuthType.SERVICE,
        description="Authentication mode for the op CLI: service or user",
    )
    session_token: str = Field(
        default="",
        repr=False,
        description="Session or service account token handed to the op CLI",
    )

    op_path: str = Field(
        default="op",
        description="Path to the 1Password CLI binary",
    )
    command_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for a single op invocation",
    )

    limit_vault_permissions: Optional[list[str]] = Field(
        default=None,
        description=(
            "Limit ingested vault permissions: "
            + ", ".join(sorted(all_vault_permissions()))
            + ". None = ingest everything."
        ),
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("limit_vault_permissions", mode="before")
    @classmethod
    def validate_limit_vault_permissions(cls, v: str | list[str] | None) -> Optional[list[str]]:
        """Accept a comma-separated string and reject unknown permissions."""
        if v is None:
            return None
        if isinstance(v, str):
            v = [p.strip() for p in v.split(",") if p.strip()]
        if not v:
            return None
        valid = all_vault_permissions()
        for perm in v:
            if perm not in valid:
                raise ValueError(f"invalid vault permission: {perm}")
        return list(v)

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> ConnectorConfig:
    """Load connector configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.
    See ConnectorConfig for the variable names.

    Returns:
        ConnectorConfig instance with values from environment or defaults.
    """
    import os

    auth_type = os.getenv("BATON_AUTH_TYPE", "service")
    if auth_type == AuthType.USER.value:
        session_token = os.getenv("OP_SESSION", "")
    else:
        session_token = os.getenv("OP_SERVICE_ACCOUNT_TOKEN", "")

    return ConnectorConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        address=os.getenv("BATON_ADDRESS", ""),
        auth_type=auth_type,
        session_token=session_token,
        op_path=os.getenv("OP_CLI_PATH", "op"),
        command_timeout=float(os.getenv("OP_COMMAND_TIMEOUT", "60")),
        limit_vault_permissions=os.getenv("BATON_LIMIT_VAULT_PERMISSIONS") or None,
    )


__all__ = [
    "AuthType",
    "ConnectorConfig",
    "LogLevel",
    "load_config_from_env",
]
