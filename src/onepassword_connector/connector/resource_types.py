from __future__ import annotations

from ..resources import ResourceType, Traits

RESOURCE_TYPE_USER = ResourceType(
    id="user",
    display_name="User",
    traits=(Traits.USER,),
    skip_entitlements_and_grants=True,
)

RESOURCE_TYPE_GROUP = ResourceType(
    id="group",
    display_name="Group",
    traits=(Traits.GROUP,),
)

RESOURCE_TYPE_ACCOUNT = ResourceType(
    id="account",
    display_name="Account",
)

RESOURCE_TYPE_VAULT = ResourceType(
    id="vault",
    display_name="Vault",
)
