from __future__ import annotations

from typing import Optional

from ..client import OnePasswordCli
from ..interfaces import ResourceSyncer
from ..models import User
from ..resources import Entitlement, Grant, Page, Resource, ResourceId, UserStatus
from .helpers import split_name
from .resource_types import RESOURCE_TYPE_USER

_DISABLED_STATES = frozenset({"INACTIVE", "SUSPENDED", "TRANSFER_SUSPENDED"})
_ENABLED_STATES = frozenset({"ACTIVE", "RECOVERY_STARTED"})


def user_status(state: str) -> str:
    if state in _DISABLED_STATES:
        return UserStatus.DISABLED
    if state in _ENABLED_STATES:
        return UserStatus.ENABLED
    return UserStatus.UNSPECIFIED


def user_resource(user: User, parent_id: Optional[ResourceId]) -> Resource:
    """Create a connector resource for a 1Password user."""
    first_name, last_name = split_name(user.name)
    return Resource(
        id=ResourceId(RESOURCE_TYPE_USER.id, user.id),
        display_name=user.name,
        parent_id=parent_id,
        profile={
            "first_name": first_name,
            "last_name": last_name,
            "login": user.email,
            "user_id": user.id,
        },
        status=user_status(user.state),
        email=user.email or None,
    )


class UserSyncer(ResourceSyncer):
    """Users of the account. Users only appear as principals."""

    resource_type = RESOURCE_TYPE_USER

    def __init__(self, cli: OnePasswordCli) -> None:
        self.cli = cli

    def list(self, parent_id: Optional[ResourceId], page_token: str = "") -> Page[Resource]:
        if parent_id is None:
            return Page()
        return Page([user_resource(user, parent_id) for user in self.cli.list_users()])

    def entitlements(self, resource: Resource, page_token: str = "") -> Page[Entitlement]:
        return Page()

    def grants(self, resource: Resource, page_token: str = "") -> Page[Grant]:
        return Page()
