"""Permission expansion for vault grant and revoke directives.

Turns one requested entitlement (coarse ``member`` / ``manager`` or a
fine-grained permission) into the closed set of permissions the ``op`` CLI
must receive. Granting walks forward edges (what the permission needs);
revoking walks reverse edges (what depends on the permission).
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..exceptions import InvalidEntitlementError
from .catalog import AccountTier, Entitlements, coarse_entitlement_permissions
from .graph import EdgeMap, forward_edges, reverse_edges

logger = logging.getLogger(__name__)

ENTITLEMENT_ID_SEPARATOR = ":"
DIRECTIVE_SEPARATOR = ","


def resolve_dependencies(start: str, edges: EdgeMap, visited: set[str] | None = None) -> list[str]:
    """Resolve ``start`` and everything reachable from it through ``edges``.

    Dependencies come first and ``start`` comes last. Each permission is
    emitted once, at its first occurrence; ``visited`` is shared across the
    whole call tree and may be shared across calls to merge closures.

    Args:
        start: Permission to resolve. Empty string resolves to nothing.
        edges: Forward or reverse edge map of one tier.
        visited: Permissions already emitted. Mutated in place.

    Returns:
        Ordered list of newly resolved permissions.

    Example::

        >>> resolve_dependencies("edit_items", forward_edges(AccountTier.BUSINESS))
        ['view_items', 'view_and_copy_passwords', 'edit_items']
    """
    if visited is None:
        visited = set()
    if not start or start in visited:
        return []
    visited.add(start)

    resolved: list[str] = []
    for dep in edges.get(start, ()):
        resolved.extend(resolve_dependencies(dep, edges, visited))
    resolved.append(start)
    return resolved


def expand_for_grant(permission: str, tier: AccountTier) -> list[str]:
    """Permissions to send when granting ``permission``, dependency-first.

    - ``member`` → closure of the tier's view permission.
    - ``manager`` → business: view closure plus ``manage_vault``;
      basic: closure of ``allow_managing``.
    - anything else → its own closure. Unknown codes come back alone.

    Order matters here: the result is joined into a single directive.
    """
    coarse = coarse_entitlement_permissions(tier)
    edges = forward_edges(tier)

    if permission == Entitlements.MEMBER:
        return resolve_dependencies(coarse[Entitlements.MEMBER], edges)

    if permission == Entitlements.MANAGER:
        if tier == AccountTier.BUSINESS:
            visited: set[str] = set()
            view = resolve_dependencies(coarse[Entitlements.MEMBER], edges, visited)
            return view + resolve_dependencies(coarse[Entitlements.MANAGER], edges, visited)
        return resolve_dependencies(coarse[Entitlements.MANAGER], edges)

    return resolve_dependencies(permission, edges)


def expand_for_revoke(permission: str, tier: AccountTier) -> frozenset[str]:
    """Permissions to remove when revoking ``permission``, unordered.

    - ``member`` → every permission depending on the view permission,
      plus the tier's management permission.
    - ``manager`` → the management permission and its dependents.
    - anything else → the permission and everything depending on it.
    """
    coarse = coarse_entitlement_permissions(tier)
    edges = reverse_edges(tier)

    if permission == Entitlements.MEMBER:
        view = resolve_dependencies(coarse[Entitlements.MEMBER], edges)
        return frozenset(view) | {coarse[Entitlements.MANAGER]}

    if permission == Entitlements.MANAGER:
        return frozenset(resolve_dependencies(coarse[Entitlements.MANAGER], edges))

    return frozenset(resolve_dependencies(permission, edges))


def format_directive(permissions: Iterable[str]) -> str:
    """Join permissions into the comma-separated ``--permissions`` value.

    Sequences keep their order. Sets are sorted so the command line is stable.
    An empty input gives an empty string.
    """
    if isinstance(permissions, (set, frozenset)):
        permissions = sorted(permissions)
    return DIRECTIVE_SEPARATOR.join(permissions)


def permission_from_entitlement_id(entitlement_id: str) -> str:
    """Extract the permission id from ``<resourceType>:<resourceId>:<label>``.

    Spaces in the label become underscores (``"view items"`` → ``"view_items"``).

    Raises:
        InvalidEntitlementError: If the id does not have exactly three segments.
    """
    parts = entitlement_id.split(ENTITLEMENT_ID_SEPARATOR)
    if len(parts) != 3:
        raise InvalidEntitlementError(
            f"invalid entitlement ID: {entitlement_id}",
            entitlement_id=entitlement_id,
        )
    return parts[2].replace(" ", "_")


def directive_for(permission: str, tier: AccountTier, *, revoke: bool = False) -> str:
    """Expand ``permission`` for a grant or revoke and format the directive."""
    if revoke:
        permissions: Iterable[str] = expand_for_revoke(permission, tier)
    else:
        permissions = expand_for_grant(permission, tier)
    directive = format_directive(permissions)
    logger.debug(
        "expanded %s directive",
        "revoke" if revoke else "grant",
        extra={"permission": permission, "tier": tier.value, "directive": directive},
    )
    return directive


__all__ = [
    "directive_for",
    "expand_for_grant",
    "expand_for_revoke",
    "format_directive",
    "permission_from_entitlement_id",
    "resolve_dependencies",
]
