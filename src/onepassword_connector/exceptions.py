"""Unified exception hierarchy for the 1Password connector.

Every error raised by the connector inherits from ConnectorError and carries a
stable error code.

Usage:
    from onepassword_connector.exceptions import (
        ConnectorError,
        CursorError,
        InvalidEntitlementError,
    )

Each call that fails surfaces exactly one of these; nothing in the connector
retries on its own.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConnectorError",
    "ConfigurationError",
    "InvalidEntitlementError",
    "UnsupportedPrincipalError",
    "CliError",
    "CursorError",
    "ValidationError",
]


class ConnectorError(Exception):
    """Base exception for the connector.

    Attributes:
        code: Stable error code string (e.g. "CURSOR_ERROR").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(ConnectorError):
    """Invalid or missing configuration (including an unknown account tier)."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid connector configuration"


class InvalidEntitlementError(ConnectorError):
    """Entitlement id is not of the form ``<resourceType>:<resourceId>:<label>``."""

    code: str = "INVALID_ENTITLEMENT"
    message: str = "Invalid entitlement ID"


class UnsupportedPrincipalError(ConnectorError):
    """Principal type is not allowed for the requested grant or revoke."""

    code: str = "POLICY_VIOLATION"
    message: str = "Principal type not supported for this action"


class CliError(ConnectorError):
    """The ``op`` command failed or returned output that could not be decoded."""

    code: str = "CLI_ERROR"
    message: str = "1Password CLI command failed"


class CursorError(ConnectorError):
    """Pagination cursor is corrupt or carries an unknown state.

    Distinct from the empty cursor, which means there are no more pages.
    """

    code: str = "CURSOR_ERROR"
    message: str = "Invalid pagination cursor"


class ValidationError(ConnectorError):
    """Connector could not verify it is signed in to an account."""

    code: str = "VALIDATION_ERROR"
    message: str = "Connector validation failed"

