"""Thin wrapper around the 1Password ``op`` command-line tool.

Every call runs one ``op`` subprocess with ``--format=json`` and decodes the
output into the models of :mod:`onepassword_connector.models`. Failures are
raised as :class:`CliError` and never retried here.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .config import AuthType, ConnectorConfig
from .exceptions import CliError
from .logging import safe_log_value
from .models import Account, AuthResponse, Group, User, Vault

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_USERS = TypeAdapter(list[User])
_GROUPS = TypeAdapter(list[Group])
_VAULTS = TypeAdapter(list[Vault])
_ACCOUNT = TypeAdapter(Account)
_AUTH = TypeAdapter(AuthResponse)

MANAGER_ROLE = "manager"


def _redact_args(args: list[str]) -> list[str]:
    redacted = list(args)
    for i, arg in enumerate(redacted[:-1]):
        if arg == "--session":
            redacted[i + 1] = "[REDACTED]"
    return redacted


class OnePasswordCli:
    """1Password CLI instance.

    Args:
        op_path: Path to the ``op`` binary.
        session_token: ``--session`` token for user auth, or the service
            account token exported as ``OP_SERVICE_ACCOUNT_TOKEN``.
        auth_type: ``"service"`` or ``"user"``.
        timeout: Seconds before a single invocation is abandoned.
    """

    def __init__(
        self,
        *,
        op_path: str = "op",
        session_token: str = "",
        auth_type: str = AuthType.SERVICE.value,
        timeout: float = 60.0,
    ) -> None:
        self.op_path = op_path
        self.auth_type = auth_type
        self.timeout = timeout
        self._session_token = session_token

    @classmethod
    def from_config(cls, config: ConnectorConfig) -> OnePasswordCli:
        return cls(
            op_path=config.op_path,
            session_token=config.session_token,
            auth_type=config.auth_type,
            timeout=config.command_timeout,
        )

    # ── Invocation ──────────────────────────────────────

    def _build_command(self, args: list[str]) -> list[str]:
        cmd = [self.op_path, *args]
        if self.auth_type == AuthType.USER.value and self._session_token:
            cmd += ["--session", self._session_token]
        cmd.append("--format=json")
        return cmd

    def _build_env(self) -> dict[str, str] | None:
        if self.auth_type == AuthType.SERVICE.value and self._session_token:
            return {**os.environ, "OP_SERVICE_ACCOUNT_TOKEN": self._session_token}
        return None

    def execute(self, args: list[str], *, parse: bool = True) -> Any:
        """Run ``op <args> --format=json`` and return the decoded JSON.

        Args:
            args: Subcommand and arguments, e.g. ``["vault", "list"]``.
            parse: Decode stdout as JSON. When False, returns None.

        Raises:
            CliError: Missing binary, timeout, non-zero exit or malformed JSON.
        """
        cmd = self._build_command(args)
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._build_env(),
            )
        except FileNotFoundError as e:
            raise CliError(f"op binary not found: {self.op_path}", command=args[:2]) from e
        except subprocess.TimeoutExpired as e:
            logger.error(
                "op command timed out",
                extra={"command_args": _redact_args(cmd), "timeout": self.timeout},
            )
            raise CliError(f"op command timed out after {self.timeout}s", command=args[:2]) from e

        if proc.returncode != 0:
            logger.error(
                "error executing command",
                extra={
                    "stderr": safe_log_value(proc.stderr),
                    "stdout": safe_log_value(proc.stdout),
                    "exit_code": proc.returncode,
                    "command_args": _redact_args(cmd),
                },
            )
            raise CliError(
                f"op {' '.join(args[:2])} failed with exit code {proc.returncode}",
                exit_code=proc.returncode,
                stderr=proc.stderr,
            )

        if not parse or not proc.stdout.strip():
            return None

        try:
            return json.loads(proc.stdout)
        except ValueError as e:
            raise CliError(f"error unmarshalling response: {e}", command=args[:2]) from e

    def _query(self, args: list[str], adapter: TypeAdapter[_T], what: str, default: Any = None) -> _T:
        data = self.execute(args)
        if data is None:
            data = default
        try:
            return adapter.validate_python(data)
        except PydanticValidationError as e:
            raise CliError(f"error {what}: unexpected response shape", errors=e.errors()) from e

    # ── Queries ─────────────────────────────────────────

    def get_signed_in_account(self) -> AuthResponse:
        """Information about the signed in account (``op whoami``)."""
        return self._query(["whoami"], _AUTH, "getting signed in account details")

    def get_account(self) -> Account:
        return self._query(["account", "get"], _ACCOUNT, "getting account")

    def list_users(self) -> list[User]:
        return self._query(["user", "list"], _USERS, "listing users", default=[])

    def list_groups(self) -> list[Group]:
        return self._query(["group", "list"], _GROUPS, "listing groups", default=[])

    def list_group_members(self, group_id: str) -> list[User]:
        return self._query(["group", "user", "list", group_id], _USERS, "listing group members", default=[])

    def list_vaults(self) -> list[Vault]:
        return self._query(["vault", "list"], _VAULTS, "listing vaults", default=[])

    def list_vault_members(self, vault_id: str) -> list[User]:
        """Users with direct access to a vault, with their permissions."""
        return self._query(["vault", "user", "list", vault_id], _USERS, "listing vault members", default=[])

    def list_vault_groups(self, vault_id: str) -> list[Group]:
        """Groups with access to a vault, with their permissions."""
        return self._query(["vault", "group", "list", vault_id], _GROUPS, "listing vault groups", default=[])

    # ── Directives ──────────────────────────────────────

    def add_user_to_group(self, group: str, role: str, user: str) -> None:
        """Add ``user`` to ``group`` with ``role`` (member or manager).

        A user must be a member before becoming a manager, so the grant is
        issued a second time for the manager role.
        """
        args = ["group", "user", "grant", "--group", group, "--role", role, "--user", user]
        self.execute(args, parse=False)
        if role == MANAGER_ROLE:
            self.execute(args, parse=False)

    def remove_user_from_group(self, group: str, user: str) -> None:
        self.execute(["group", "user", "revoke", "--group", group, "--user", user], parse=False)

    def add_user_to_vault(self, vault: str, user: str, permissions: str) -> None:
        self.execute(
            ["vault", "user", "grant", "--vault", vault, "--user", user, "--permissions", permissions],
            parse=False,
        )

    def remove_user_from_vault(self, vault: str, user: str, permissions: str) -> None:
        """Revoke vault permissions from a user.

        The CLI rejects this with "the accessor doesn't have any permissions"
        when the user's access is inherited from a group.
        """
        self.execute(
            ["vault", "user", "revoke", "--vault", vault, "--user", user, "--permissions", permissions],
            parse=False,
        )

    def add_group_to_vault(self, vault: str, group: str, permissions: str) -> None:
        self.execute(
            ["vault", "group", "grant", "--vault", vault, "--group", group, "--permissions", permissions],
            parse=False,
        )

    def remove_group_from_vault(self, vault: str, group: str, permissions: str) -> None:
        self.execute(
            ["vault", "group", "revoke", "--vault", vault, "--group", group, "--permissions", permissions],
            parse=False,
        )


__all__ = ["MANAGER_ROLE", "OnePasswordCli"]
