from __future__ import annotations

import logging
from typing import Optional

from ..client import OnePasswordCli
from ..exceptions import UnsupportedPrincipalError
from ..interfaces import Provisioner, ResourceSyncer
from ..models import Group
from ..permissions.catalog import Entitlements
from ..resources import Entitlement, EntitlementPurpose, Grant, Page, Resource, ResourceId, new_grant
from .helpers import populate_entitlement
from .resource_types import RESOURCE_TYPE_GROUP, RESOURCE_TYPE_USER
from .user import user_resource

logger = logging.getLogger(__name__)

MANAGER_ROLE = "MANAGER"


def group_resource(group: Group, parent_id: Optional[ResourceId]) -> Resource:
    """Create a connector resource for a 1Password group."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_GROUP.id, group.id),
        display_name=group.name,
        parent_id=parent_id,
        profile={
            "group_name": group.name,
            "group_id": group.id,
        },
    )


def _require_user(principal: Resource, message: str) -> None:
    if principal.id.resource_type != RESOURCE_TYPE_USER.id:
        logger.warning(
            message,
            extra={"principal_type": principal.id.resource_type, "principal_id": principal.id.resource},
        )
        raise UnsupportedPrincipalError(
            message,
            principal_type=principal.id.resource_type,
            principal_id=principal.id.resource,
        )


class GroupSyncer(ResourceSyncer, Provisioner):
    """Groups with ``member`` and ``manager`` entitlements."""

    resource_type = RESOURCE_TYPE_GROUP

    def __init__(self, cli: OnePasswordCli) -> None:
        self.cli = cli

    def list(self, parent_id: Optional[ResourceId], page_token: str = "") -> Page[Resource]:
        if parent_id is None:
            return Page()
        return Page([group_resource(group, parent_id) for group in self.cli.list_groups()])

    def entitlements(self, resource: Resource, page_token: str = "") -> Page[Entitlement]:
        return Page(
            [
                populate_entitlement(resource, Entitlements.MEMBER, purpose=EntitlementPurpose.ASSIGNMENT),
                populate_entitlement(resource, Entitlements.MANAGER),
            ]
        )

    def grants(self, resource: Resource, page_token: str = "") -> Page[Grant]:
        rv: list[Grant] = []
        for member in self.cli.list_group_members(resource.id.resource):
            ur = user_resource(member, resource.id)
            rv.append(new_grant(resource, Entitlements.MEMBER, ur))
            if member.role == MANAGER_ROLE:
                rv.append(new_grant(resource, Entitlements.MANAGER, ur))
        return Page(rv)

    def grant(self, principal: Resource, entitlement: Entitlement) -> None:
        _require_user(principal, "only users can be granted group membership")
        self.cli.add_user_to_group(entitlement.resource.id.resource, entitlement.slug, principal.id.resource)

    def revoke(self, grant: Grant) -> None:
        _require_user(grant.principal, "only users can have group membership revoked")
        self.cli.remove_user_from_group(grant.entitlement.resource.id.resource, grant.principal.id.resource)
