from abc import ABC, abstractmethod
from typing import Optional

from .resources import Entitlement, Grant, Page, Resource, ResourceId, ResourceType


class ResourceSyncer(ABC):
    """Produces resources, entitlements and grants for one resource type."""

    resource_type: ResourceType

    @abstractmethod
    def list(self, parent_id: Optional[ResourceId], page_token: str = "") -> Page[Resource]:
        raise NotImplementedError

    @abstractmethod
    def entitlements(self, resource: Resource, page_token: str = "") -> Page[Entitlement]:
        raise NotImplementedError

    @abstractmethod
    def grants(self, resource: Resource, page_token: str = "") -> Page[Grant]:
        raise NotImplementedError


class Provisioner(ABC):
    """Syncer that can also push grants and revokes back to 1Password."""

    @abstractmethod
    def grant(self, principal: Resource, entitlement: Entitlement) -> None:
        raise NotImplementedError

    @abstractmethod
    def revoke(self, grant: Grant) -> None:
        raise NotImplementedError


__all__ = ["Provisioner", "ResourceSyncer"]
