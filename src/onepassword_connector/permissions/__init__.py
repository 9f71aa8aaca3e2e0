"""Vault permission model for 1Password.

Defines:
- AccountTier: basic (Teams/Families) or business vocabulary
- Entitlements: coarse member/manager entitlements
- BASIC_PERMISSIONS / BUSINESS_PERMISSIONS: permission id → label
- FORWARD_DEPENDENCIES / REVERSE_DEPENDENCIES: per-tier dependency graph
- expand_for_grant() / expand_for_revoke(): resolve directive permission sets
"""

from .catalog import (
    BASIC_PERMISSIONS,
    BUSINESS_PERMISSIONS,
    AccountTier,
    Entitlements,
    all_vault_permissions,
    coarse_entitlement_permissions,
    label_for,
    permissions_for_tier,
)
from .expansion import (
    directive_for,
    expand_for_grant,
    expand_for_revoke,
    format_directive,
    permission_from_entitlement_id,
    resolve_dependencies,
)
from .graph import (
    FORWARD_DEPENDENCIES,
    REVERSE_DEPENDENCIES,
    check_graph_consistency,
    forward_edges,
    reverse_edges,
)

__all__ = [
    "BASIC_PERMISSIONS",
    "BUSINESS_PERMISSIONS",
    "FORWARD_DEPENDENCIES",
    "REVERSE_DEPENDENCIES",
    "AccountTier",
    "Entitlements",
    "all_vault_permissions",
    "check_graph_consistency",
    "coarse_entitlement_permissions",
    "directive_for",
    "expand_for_grant",
    "expand_for_revoke",
    "format_directive",
    "forward_edges",
    "label_for",
    "permission_from_entitlement_id",
    "permissions_for_tier",
    "resolve_dependencies",
    "reverse_edges",
]
