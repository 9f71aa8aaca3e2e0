from __future__ import annotations

from typing import AbstractSet, Optional

from ..client import OnePasswordCli
from ..permissions.catalog import AccountTier
from ..resources import Entitlement, EntitlementPurpose, Resource, new_entitlement
from .resource_types import RESOURCE_TYPE_USER


def populate_entitlement(
    resource: Resource,
    slug: str,
    *,
    purpose: str = EntitlementPurpose.PERMISSION,
) -> Entitlement:
    """Entitlement on a 1Password resource, grantable to users."""
    resource_type = resource.id.resource_type
    return new_entitlement(
        resource,
        slug,
        purpose=purpose,
        display_name=f"{resource.display_name} {resource_type} {slug}",
        description=f"1Password {resource.display_name} {resource_type}",
        grantable_to=(RESOURCE_TYPE_USER,),
    )


def resolve_tier(cli: OnePasswordCli) -> AccountTier:
    """Tier of the signed in account, from ``op account get``."""
    return AccountTier.from_account_type(cli.get_account().type)


def is_allowed(limit: Optional[AbstractSet[str]], permission: str) -> bool:
    """Whether ``permission`` passes the optional vault permission allow-list."""
    return limit is None or permission in limit


def split_name(name: str) -> tuple[str, str]:
    names = name.split(" ", 1)
    if len(names) == 2:
        return names[0], names[1]
    return names[0], ""
