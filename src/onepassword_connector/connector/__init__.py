"""Resource syncers for 1Password accounts, users, groups and vaults."""

from .account import AccountSyncer, account_resource
from .connector import OnePasswordConnector
from .group import GroupSyncer, group_resource
from .resource_types import (
    RESOURCE_TYPE_ACCOUNT,
    RESOURCE_TYPE_GROUP,
    RESOURCE_TYPE_USER,
    RESOURCE_TYPE_VAULT,
)
from .user import UserSyncer, user_resource
from .vault import VAULT_LIST_GROUPS, VAULT_LIST_USERS, VaultSyncer, vault_resource, walk_vault_grants

__all__ = [
    "AccountSyncer",
    "GroupSyncer",
    "OnePasswordConnector",
    "RESOURCE_TYPE_ACCOUNT",
    "RESOURCE_TYPE_GROUP",
    "RESOURCE_TYPE_USER",
    "RESOURCE_TYPE_VAULT",
    "UserSyncer",
    "VAULT_LIST_GROUPS",
    "VAULT_LIST_USERS",
    "VaultSyncer",
    "account_resource",
    "group_resource",
    "user_resource",
    "vault_resource",
    "walk_vault_grants",
]
