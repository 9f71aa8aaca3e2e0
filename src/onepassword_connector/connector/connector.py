from __future__ import annotations

import logging
from typing import AbstractSet, Any, Optional
from urllib.parse import urlsplit

from ..client import OnePasswordCli
from ..config import ConnectorConfig
from ..exceptions import CliError, ValidationError
from ..interfaces import ResourceSyncer
from .account import AccountSyncer
from .group import GroupSyncer
from .user import UserSyncer
from .vault import VaultSyncer

logger = logging.getLogger(__name__)


def _host(address: str) -> str:
    """Hostname of a sign-in address, with or without a scheme."""
    if "//" not in address:
        address = "//" + address
    return (urlsplit(address).hostname or "").lower()


class OnePasswordConnector:
    """Entry point tying the ``op`` client to the resource syncers.

    Args:
        cli: Authenticated 1Password CLI client.
        limit_vault_permissions: Optional allow-list of vault entitlements
            (``member`` and permission ids). None ingests everything.
        address: Expected sign-in address. When set, :meth:`validate` fails
            if the CLI is signed in to a different account.
    """

    def __init__(
        self,
        cli: OnePasswordCli,
        limit_vault_permissions: Optional[AbstractSet[str]] = None,
        address: str = "",
    ) -> None:
        self.cli = cli
        self.limit_vault_permissions = limit_vault_permissions
        self.address = address

    @classmethod
    def from_config(cls, config: ConnectorConfig) -> OnePasswordConnector:
        limit = config.limit_vault_permissions
        return cls(
            OnePasswordCli.from_config(config),
            limit_vault_permissions=frozenset(limit) if limit is not None else None,
            address=config.address,
        )

    def metadata(self) -> dict[str, Any]:
        return {
            "display_name": "1Password",
            "description": "Connector syncing 1Password users, groups, and vaults",
        }

    def validate(self) -> dict[str, str]:
        """Check that the ``op`` CLI is signed in.

        Raises:
            ValidationError: If ``op whoami`` fails or the CLI is signed in to
                an account other than the configured address.
        """
        try:
            auth = self.cli.get_signed_in_account()
        except CliError as e:
            logger.error("connector validation failed", extra={"error_code": e.code})
            raise ValidationError(f"failed to get signed in account: {e.message}", **e.details) from e

        if self.address and _host(self.address) != _host(auth.url):
            logger.error(
                "signed in to an unexpected account",
                extra={"address": self.address, "signed_in_url": auth.url},
            )
            raise ValidationError(
                f"signed in to {auth.url!r}, expected {self.address!r}",
                address=self.address,
                url=auth.url,
            )
        return {"url": auth.url, "email": auth.email, "account_uuid": auth.account_uuid}

    def resource_syncers(self) -> list[ResourceSyncer]:
        return [
            AccountSyncer(self.cli),
            UserSyncer(self.cli),
            GroupSyncer(self.cli),
            VaultSyncer(self.cli, self.limit_vault_permissions),
        ]
