from __future__ import annotations

from typing import Optional

from ..client import OnePasswordCli
from ..interfaces import ResourceSyncer
from ..models import Account
from ..permissions.catalog import Entitlements
from ..resources import Entitlement, EntitlementPurpose, Grant, Page, Resource, ResourceId, new_grant
from .helpers import populate_entitlement
from .resource_types import (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_USER,
    RESOURCE_TYPE_VAULT,
)
from .user import user_resource


def account_resource(account: Account) -> Resource:
    """Create the root resource for a 1Password account."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_ACCOUNT.id, account.id),
        display_name=account.name,
        child_resource_types=(
            RESOURCE_TYPE_GROUP.id,
            RESOURCE_TYPE_USER.id,
            RESOURCE_TYPE_VAULT.id,
        ),
    )


class AccountSyncer(ResourceSyncer):
    """The signed in account; every user is a member of it."""

    resource_type = RESOURCE_TYPE_ACCOUNT

    def __init__(self, cli: OnePasswordCli) -> None:
        self.cli = cli

    def list(self, parent_id: Optional[ResourceId], page_token: str = "") -> Page[Resource]:
        return Page([account_resource(self.cli.get_account())])

    def entitlements(self, resource: Resource, page_token: str = "") -> Page[Entitlement]:
        return Page([populate_entitlement(resource, Entitlements.MEMBER, purpose=EntitlementPurpose.ASSIGNMENT)])

    def grants(self, resource: Resource, page_token: str = "") -> Page[Grant]:
        return Page(
            [
                new_grant(resource, Entitlements.MEMBER, user_resource(user, resource.id))
                for user in self.cli.list_users()
            ]
        )
