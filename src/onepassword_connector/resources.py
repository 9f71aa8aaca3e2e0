"""Identity-governance primitives: resource types, resources, entitlements, grants.

These are the records the connector hands to the governance layer. Ids are
stable strings:

- entitlement: ``<resourceType>:<resourceId>:<slug>``
- grant: ``<entitlementId>:<principalType>:<principalId>``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

_T = TypeVar("_T")


class Traits:
    USER = "user"
    GROUP = "group"


class UserStatus:
    ENABLED = "enabled"
    DISABLED = "disabled"
    UNSPECIFIED = "unspecified"


class EntitlementPurpose:
    ASSIGNMENT = "assignment"
    PERMISSION = "permission"


@dataclass(frozen=True)
class ResourceType:
    """A kind of resource the connector syncs.

    ``skip_entitlements_and_grants`` marks types that only exist as principals.
    """

    id: str
    display_name: str
    traits: tuple[str, ...] = ()
    skip_entitlements_and_grants: bool = False


@dataclass(frozen=True)
class ResourceId:
    resource_type: str
    resource: str


@dataclass(frozen=True)
class Resource:
    """A synced object (account, user, group or vault)."""

    id: ResourceId
    display_name: str
    parent_id: ResourceId | None = None
    profile: dict[str, Any] = field(default_factory=dict, compare=False)
    status: str | None = None
    email: str | None = None
    child_resource_types: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "resource_type": self.id.resource_type,
            "resource_id": self.id.resource,
            "display_name": self.display_name,
        }
        if self.parent_id is not None:
            data["parent"] = {
                "resource_type": self.parent_id.resource_type,
                "resource_id": self.parent_id.resource,
            }
        if self.profile:
            data["profile"] = dict(self.profile)
        if self.status:
            data["status"] = self.status
        if self.email:
            data["email"] = self.email
        if self.child_resource_types:
            data["child_resource_types"] = list(self.child_resource_types)
        return data


@dataclass(frozen=True)
class Entitlement:
    """Something a principal can be granted on a resource."""

    resource: Resource
    slug: str
    purpose: str = EntitlementPurpose.PERMISSION
    display_name: str = ""
    description: str = ""
    grantable_to: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return entitlement_id(self.resource.id, self.slug)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "resource_id": self.resource.id.resource,
            "slug": self.slug,
            "purpose": self.purpose,
            "display_name": self.display_name,
            "description": self.description,
            "grantable_to": list(self.grantable_to),
        }


@dataclass(frozen=True)
class GrantExpandable:
    """Points the caller at entitlements whose grants extend this grant.

    A grant to a group carries the group's own ``member`` entitlement here so
    effective users can be resolved later without enumerating them now.
    """

    entitlement_ids: tuple[str, ...]
    shallow: bool = False
    resource_type_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "grant_expandable",
            "entitlement_ids": list(self.entitlement_ids),
            "shallow": self.shallow,
            "resource_type_ids": list(self.resource_type_ids),
        }


@dataclass(frozen=True)
class Grant:
    """A principal holding an entitlement."""

    entitlement: Entitlement
    principal: Resource
    annotations: tuple[GrantExpandable, ...] = ()

    @property
    def id(self) -> str:
        return f"{self.entitlement.id}:{self.principal.id.resource_type}:{self.principal.id.resource}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "entitlement_id": self.entitlement.id,
            "principal": {
                "resource_type": self.principal.id.resource_type,
                "resource_id": self.principal.id.resource,
            },
        }
        if self.annotations:
            data["annotations"] = [a.to_dict() for a in self.annotations]
        return data


@dataclass
class Page(Generic[_T]):
    """One page of results plus the token for the next one (``""`` = done)."""

    items: list[_T] = field(default_factory=list)
    next_token: str = ""


def entitlement_id(resource_id: ResourceId, slug: str) -> str:
    return f"{resource_id.resource_type}:{resource_id.resource}:{slug}"


def new_entitlement(
    resource: Resource,
    slug: str,
    *,
    purpose: str = EntitlementPurpose.PERMISSION,
    display_name: str = "",
    description: str = "",
    grantable_to: Iterable[ResourceType] = (),
) -> Entitlement:
    return Entitlement(
        resource=resource,
        slug=slug,
        purpose=purpose,
        display_name=display_name,
        description=description,
        grantable_to=tuple(rt.id for rt in grantable_to),
    )


def new_grant(
    resource: Resource,
    slug: str,
    principal: Resource,
    *,
    annotations: Iterable[GrantExpandable] = (),
) -> Grant:
    """Grant of the ``slug`` entitlement on ``resource`` to ``principal``."""
    return Grant(
        entitlement=Entitlement(resource=resource, slug=slug),
        principal=principal,
        annotations=tuple(annotations),
    )


__all__ = [
    "Entitlement",
    "EntitlementPurpose",
    "Grant",
    "GrantExpandable",
    "Page",
    "Resource",
    "ResourceId",
    "ResourceType",
    "Traits",
    "UserStatus",
    "entitlement_id",
    "new_entitlement",
    "new_grant",
]
