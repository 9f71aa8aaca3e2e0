"""Vault syncer and the vault grant walker.

Vault grants come from two separate ``op`` listings: users with direct
access and groups with access. The walker handles one listing per call and
hands back a cursor naming what is left, so enumeration can stop and resume
at any point.

Grants to vaults should be granted and revoked from individual users only.
``op vault user revoke`` fails with "the accessor doesn't have any
permissions" when the user's access is inherited from a group.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Optional

from ..client import OnePasswordCli
from ..exceptions import CursorError, UnsupportedPrincipalError
from ..interfaces import Provisioner, ResourceSyncer
from ..logging import get_connector_logger
from ..models import Vault
from ..pagination import PageState, PaginationBag
from ..permissions.catalog import AccountTier, Entitlements, label_for, permissions_for_tier
from ..permissions.expansion import directive_for, permission_from_entitlement_id
from ..resources import (
    Entitlement,
    EntitlementPurpose,
    Grant,
    GrantExpandable,
    Page,
    Resource,
    ResourceId,
    entitlement_id,
    new_grant,
)
from .group import group_resource
from .helpers import is_allowed, populate_entitlement, resolve_tier
from .resource_types import RESOURCE_TYPE_GROUP, RESOURCE_TYPE_USER, RESOURCE_TYPE_VAULT
from .user import user_resource

logger = logging.getLogger(__name__)

VAULT_LIST_USERS = "list-users"
VAULT_LIST_GROUPS = "list-groups"


def vault_resource(vault: Vault, parent_id: Optional[ResourceId]) -> Resource:
    """Create a connector resource for a 1Password vault."""
    return Resource(
        id=ResourceId(RESOURCE_TYPE_VAULT.id, vault.id),
        display_name=vault.name,
        parent_id=parent_id,
    )


def group_expansion(group: Resource) -> GrantExpandable:
    """Annotation pointing at the group's own ``member`` entitlement."""
    return GrantExpandable(
        entitlement_ids=(entitlement_id(group.id, Entitlements.MEMBER),),
        shallow=True,
        resource_type_ids=(RESOURCE_TYPE_USER.id,),
    )


def _principal_grants(
    vault: Resource,
    principal: Resource,
    permissions: Iterable[str],
    *,
    tier: AccountTier,
    limit: Optional[AbstractSet[str]],
    annotations: tuple[GrantExpandable, ...] = (),
) -> list[Grant]:
    rv: list[Grant] = []
    if is_allowed(limit, Entitlements.MEMBER):
        rv.append(new_grant(vault, Entitlements.MEMBER, principal, annotations=annotations))
    for permission in permissions:
        if not is_allowed(limit, permission):
            continue
        rv.append(new_grant(vault, label_for(tier, permission), principal, annotations=annotations))
    return rv


def walk_vault_grants(
    cli: OnePasswordCli,
    vault: Resource,
    page_token: str,
    *,
    tier: AccountTier,
    limit: Optional[AbstractSet[str]] = None,
) -> Page[Grant]:
    """Produce one page of grants for ``vault`` and the cursor for the next.

    An empty ``page_token`` starts a new walk: ``list-groups`` then
    ``list-users`` are pushed, so direct users come first. Each call pops one
    task and performs exactly one listing. The returned ``next_token`` is
    ``""`` once both tasks are done.

    Args:
        cli: 1Password CLI client.
        vault: The vault resource.
        page_token: Cursor from the previous call, or ``""``.
        tier: Account tier used to label raw permission codes.
        limit: Optional allow-list of ``member`` and permission ids.

    Raises:
        CursorError: If the cursor cannot be decoded, names an unknown task or
            belongs to a different vault.
    """
    bag = PaginationBag.unmarshal(page_token)
    if bag.current() is None:
        bag.push(PageState(VAULT_LIST_GROUPS, vault.id.resource))
        bag.push(PageState(VAULT_LIST_USERS, vault.id.resource))

    state = bag.pop()
    if state.resource_id != vault.id.resource:
        logger.warning(
            "pagination cursor belongs to another vault",
            extra={
                "state_kind": state.kind,
                "resource_id": vault.id.resource,
                "cursor_resource_id": state.resource_id,
            },
        )
        raise CursorError(
            "pagination cursor targets another resource",
            state=state.kind,
            resource_id=state.resource_id,
        )

    rv: list[Grant] = []

    if state.kind == VAULT_LIST_USERS:
        for member in cli.list_vault_members(state.resource_id):
            ur = user_resource(member, vault.id)
            rv.extend(_principal_grants(vault, ur, member.permissions, tier=tier, limit=limit))

    elif state.kind == VAULT_LIST_GROUPS:
        for group in cli.list_vault_groups(state.resource_id):
            gr = group_resource(group, vault.id)
            rv.extend(
                _principal_grants(
                    vault,
                    gr,
                    group.permissions,
                    tier=tier,
                    limit=limit,
                    annotations=(group_expansion(gr),),
                )
            )

    else:
        logger.warning(
            "unexpected state while listing vault grants",
            extra={"state_kind": state.kind, "resource_id": vault.id.resource},
        )
        raise CursorError(f"unexpected vault grant state: {state.kind!r}", state=state.kind)

    return Page(rv, bag.marshal())


class VaultSyncer(ResourceSyncer, Provisioner):
    """Vaults, their permission entitlements, and user/group access."""

    resource_type = RESOURCE_TYPE_VAULT

    def __init__(self, cli: OnePasswordCli, limit_vault_permissions: Optional[AbstractSet[str]] = None) -> None:
        self.cli = cli
        self.limit_vault_permissions = (
            frozenset(limit_vault_permissions) if limit_vault_permissions is not None else None
        )

    def list(self, parent_id: Optional[ResourceId], page_token: str = "") -> Page[Resource]:
        if parent_id is None:
            return Page()
        return Page([vault_resource(vault, parent_id) for vault in self.cli.list_vaults()])

    def entitlements(self, resource: Resource, page_token: str = "") -> Page[Entitlement]:
        tier = resolve_tier(self.cli)
        rv: list[Entitlement] = []
        if is_allowed(self.limit_vault_permissions, Entitlements.MEMBER):
            rv.append(populate_entitlement(resource, Entitlements.MEMBER, purpose=EntitlementPurpose.ASSIGNMENT))
        for permission, label in permissions_for_tier(tier).items():
            if is_allowed(self.limit_vault_permissions, permission):
                rv.append(populate_entitlement(resource, label))
        return Page(rv)

    def grants(self, resource: Resource, page_token: str = "") -> Page[Grant]:
        tier = resolve_tier(self.cli)
        return walk_vault_grants(
            self.cli,
            resource,
            page_token,
            tier=tier,
            limit=self.limit_vault_permissions,
        )

    def grant(self, principal: Resource, entitlement: Entitlement) -> None:
        """Grant a user or group access to a vault."""
        permission = permission_from_entitlement_id(entitlement.id)
        vault_id = entitlement.resource.id.resource
        log = get_connector_logger(__name__, resource_id=vault_id, principal_id=principal.id.resource)

        if principal.id.resource_type not in (RESOURCE_TYPE_USER.id, RESOURCE_TYPE_GROUP.id):
            log.error(
                "only users or groups can be granted vault access",
                extra={"principal_type": principal.id.resource_type},
            )
            raise UnsupportedPrincipalError(
                "only users or groups can be granted vault access",
                principal_type=principal.id.resource_type,
                principal_id=principal.id.resource,
            )

        directive = directive_for(permission, resolve_tier(self.cli))
        log.info(
            "granting vault access",
            extra={"username": principal.display_name, "permission": directive},
        )
        if not directive:
            log.warning("empty permission directive, nothing to grant")
            return

        if principal.id.resource_type == RESOURCE_TYPE_GROUP.id:
            self.cli.add_group_to_vault(vault_id, principal.id.resource, directive)
        else:
            self.cli.add_user_to_vault(vault_id, principal.display_name, directive)

    def revoke(self, grant: Grant) -> None:
        """Revoke a user's access to a vault."""
        permission = permission_from_entitlement_id(grant.entitlement.id)
        principal = grant.principal
        vault_id = grant.entitlement.resource.id.resource
        log = get_connector_logger(__name__, resource_id=vault_id, principal_id=principal.id.resource)

        if principal.id.resource_type != RESOURCE_TYPE_USER.id:
            log.error(
                "only users can have vault access revoked",
                extra={"principal_type": principal.id.resource_type},
            )
            raise UnsupportedPrincipalError(
                "only users can have vault access revoked",
                principal_type=principal.id.resource_type,
                principal_id=principal.id.resource,
            )

        directive = directive_for(permission, resolve_tier(self.cli), revoke=True)
        log.info(
            "revoking vault access",
            extra={"username": principal.display_name, "permission": directive},
        )
        if not directive:
            log.warning("empty permission directive, nothing to revoke")
            return

        self.cli.remove_user_from_vault(vault_id, principal.display_name, directive)
