"""Vault permission vocabularies and account tiers.

Provides:
- ``AccountTier``: the two account classes (basic / business).
- ``Entitlements``: the coarse ``member`` / ``manager`` entitlement names.
- ``BASIC_PERMISSIONS`` / ``BUSINESS_PERMISSIONS``: permission id → label.
- ``permissions_for_tier()`` / ``coarse_entitlement_permissions()``.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ..exceptions import ConfigurationError


class AccountTier(str, Enum):
    """Account class selecting which permission vocabulary is in use.

    1Password Teams and Families accounts expose three coarse vault
    permissions; 1Password Business exposes twelve fine-grained ones.
    """

    BASIC = "basic"
    BUSINESS = "business"

    @classmethod
    def from_account_type(cls, account_type: str) -> AccountTier:
        """Map the ``type`` attribute of ``op account get`` to a tier.

        Raises:
            ConfigurationError: If the account type is not recognised.
        """
        normalized = (account_type or "").strip().upper()
        if normalized == "BUSINESS":
            return cls.BUSINESS
        if normalized in _BASIC_ACCOUNT_TYPES:
            return cls.BASIC
        raise ConfigurationError(
            f"Unsupported 1Password account type: {account_type!r}",
            account_type=account_type,
        )


_BASIC_ACCOUNT_TYPES = frozenset({"BASIC", "TEAM", "FAMILY", "INDIVIDUAL"})


class Entitlements:
    """Coarse entitlements exposed uniformly across tiers."""

    MEMBER = "member"
    MANAGER = "manager"

    ALL = frozenset({"member", "manager"})


# ── Permission vocabularies ─────────────────────────────

# 1Password Teams and 1Password Families.
BASIC_PERMISSIONS: Mapping[str, str] = MappingProxyType(
    {
        "allow_viewing": "allow viewing",
        "allow_editing": "allow editing",
        "allow_managing": "allow managing",
    }
)

# 1Password Business.
BUSINESS_PERMISSIONS: Mapping[str, str] = MappingProxyType(
    {
        "view_items": "view items",
        "create_items": "create items",
        "edit_items": "edit items",
        "archive_items": "archive items",
        "delete_items": "delete items",
        "view_and_copy_passwords": "view and copy passwords",
        "view_item_history": "view item history",
        "import_items": "import items",
        "export_items": "export items",
        "copy_and_share_items": "copy and share items",
        "print_items": "print items",
        "manage_vault": "manage vault",
    }
)

_PERMISSIONS_BY_TIER: Mapping[AccountTier, Mapping[str, str]] = MappingProxyType(
    {
        AccountTier.BASIC: BASIC_PERMISSIONS,
        AccountTier.BUSINESS: BUSINESS_PERMISSIONS,
    }
)

_COARSE_BY_TIER: Mapping[AccountTier, Mapping[str, str]] = MappingProxyType(
    {
        AccountTier.BASIC: MappingProxyType(
            {Entitlements.MEMBER: "allow_viewing", Entitlements.MANAGER: "allow_managing"}
        ),
        AccountTier.BUSINESS: MappingProxyType(
            {Entitlements.MEMBER: "view_items", Entitlements.MANAGER: "manage_vault"}
        ),
    }
)


def permissions_for_tier(tier: AccountTier) -> Mapping[str, str]:
    """Return the permission id → display label mapping for a tier."""
    return _PERMISSIONS_BY_TIER[tier]


def coarse_entitlement_permissions(tier: AccountTier) -> Mapping[str, str]:
    """Return the permission each coarse entitlement stands for in a tier.

    ``member`` maps to the tier's view permission and ``manager`` to its
    top-level management permission.
    """
    return _COARSE_BY_TIER[tier]


def label_for(tier: AccountTier, permission: str) -> str:
    """Translate a raw permission code into its entitlement label.

    Codes missing from the tier's vocabulary are returned unchanged.
    """
    return _PERMISSIONS_BY_TIER[tier].get(permission, permission)


def all_vault_permissions() -> frozenset[str]:
    """Every value accepted by the vault permission allow-list."""
    return frozenset({Entitlements.MEMBER, *BASIC_PERMISSIONS, *BUSINESS_PERMISSIONS})


__all__ = [
    "AccountTier",
    "BASIC_PERMISSIONS",
    "BUSINESS_PERMISSIONS",
    "Entitlements",
    "all_vault_permissions",
    "coarse_entitlement_permissions",
    "label_for",
    "permissions_for_tier",
]
