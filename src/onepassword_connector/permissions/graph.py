"""Vault permission dependency graph.

Provides:
- ``FORWARD_DEPENDENCIES``: permission → permissions it requires (grant direction).
- ``REVERSE_DEPENDENCIES``: permission → permissions that require it (revoke direction).
- ``check_graph_consistency()``: verifies the two tables agree.

Both directions are declared as data. The reverse tables are checked against
the forward ones when this module is imported, so a divergence fails at
startup instead of corrupting revokes.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..exceptions import ConfigurationError
from .catalog import AccountTier, permissions_for_tier

EdgeMap = Mapping[str, tuple[str, ...]]

# ── Forward edges ───────────────────────────────────────
# Granting the key requires every listed permission to be present too.

_BASIC_FORWARD: EdgeMap = MappingProxyType(
    {
        "allow_viewing": (),
        "allow_editing": ("allow_viewing",),
        "allow_managing": (),
    }
)

_BUSINESS_FORWARD: EdgeMap = MappingProxyType(
    {
        "view_items": (),
        "create_items": ("view_items",),
        "view_and_copy_passwords": ("view_items",),
        "edit_items": ("view_and_copy_passwords", "view_items"),
        "archive_items": ("edit_items", "view_and_copy_passwords", "view_items"),
        "delete_items": ("edit_items", "view_and_copy_passwords", "view_items"),
        "view_item_history": ("view_and_copy_passwords", "view_items"),
        "import_items": ("create_items", "view_items"),
        "export_items": ("view_item_history", "view_and_copy_passwords", "view_items"),
        "copy_and_share_items": ("view_item_history", "view_and_copy_passwords", "view_items"),
        "print_items": ("view_item_history", "view_and_copy_passwords", "view_items"),
        "manage_vault": (),
    }
)

# ── Reverse edges ───────────────────────────────────────
# Revoking the key must also revoke every listed permission.

_BASIC_REVERSE: EdgeMap = MappingProxyType(
    {
        "allow_viewing": ("allow_editing",),
        "allow_editing": (),
        "allow_managing": (),
    }
)

_BUSINESS_REVERSE: EdgeMap = MappingProxyType(
    {
        "view_items": (
            "create_items",
            "view_and_copy_passwords",
            "edit_items",
            "archive_items",
            "delete_items",
            "view_item_history",
            "import_items",
            "export_items",
            "copy_and_share_items",
            "print_items",
        ),
        "create_items": ("import_items",),
        "view_and_copy_passwords": (
            "edit_items",
            "archive_items",
            "delete_items",
            "view_item_history",
            "export_items",
            "copy_and_share_items",
            "print_items",
        ),
        "edit_items": ("archive_items", "delete_items"),
        "archive_items": (),
        "delete_items": (),
        "view_item_history": ("export_items", "copy_and_share_items", "print_items"),
        "import_items": (),
        "export_items": (),
        "copy_and_share_items": (),
        "print_items": (),
        "manage_vault": (),
    }
)

FORWARD_DEPENDENCIES: Mapping[AccountTier, EdgeMap] = MappingProxyType(
    {
        AccountTier.BASIC: _BASIC_FORWARD,
        AccountTier.BUSINESS: _BUSINESS_FORWARD,
    }
)

REVERSE_DEPENDENCIES: Mapping[AccountTier, EdgeMap] = MappingProxyType(
    {
        AccountTier.BASIC: _BASIC_REVERSE,
        AccountTier.BUSINESS: _BUSINESS_REVERSE,
    }
)


def forward_edges(tier: AccountTier) -> EdgeMap:
    """Edges followed when granting: permission → its requirements."""
    return FORWARD_DEPENDENCIES[tier]


def reverse_edges(tier: AccountTier) -> EdgeMap:
    """Edges followed when revoking: permission → its dependents."""
    return REVERSE_DEPENDENCIES[tier]


def invert_edges(edges: EdgeMap) -> dict[str, frozenset[str]]:
    """Invert an edge map, keeping every key of the input."""
    inverted: dict[str, set[str]] = {perm: set() for perm in edges}
    for perm, deps in edges.items():
        for dep in deps:
            inverted.setdefault(dep, set()).add(perm)
    return {perm: frozenset(deps) for perm, deps in inverted.items()}


def find_cycle(edges: EdgeMap) -> list[str] | None:
    """Return one cycle in ``edges`` as a path, or None if it is acyclic."""
    done: set[str] = set()
    path: list[str] = []
    on_path: set[str] = set()

    def visit(perm: str) -> list[str] | None:
        if perm in on_path:
            return path[path.index(perm) :] + [perm]
        if perm in done:
            return None
        path.append(perm)
        on_path.add(perm)
        for dep in edges.get(perm, ()):
            cycle = visit(dep)
            if cycle:
                return cycle
        on_path.discard(perm)
        path.pop()
        done.add(perm)
        return None

    for perm in edges:
        cycle = visit(perm)
        if cycle:
            return cycle
    return None


def check_graph_consistency(
    vocabulary: Mapping[str, str] | frozenset[str],
    forward: EdgeMap,
    reverse: EdgeMap,
) -> None:
    """Verify a tier's forward and reverse tables describe the same graph.

    Checks that both tables are keyed by exactly the tier vocabulary, that
    every edge points inside the vocabulary, that the forward relation is
    acyclic and that ``reverse`` is the edge inversion of ``forward``.

    Raises:
        ConfigurationError: On the first inconsistency found.
    """
    expected = set(vocabulary)
    for name, table in (("forward", forward), ("reverse", reverse)):
        if set(table) != expected:
            missing = sorted(expected - set(table))
            extra = sorted(set(table) - expected)
            raise ConfigurationError(
                f"{name} dependency table does not match vocabulary",
                missing=missing,
                extra=extra,
            )
        for perm, deps in table.items():
            unknown = sorted(set(deps) - expected)
            if unknown:
                raise ConfigurationError(
                    f"{name} dependency of {perm!r} outside vocabulary",
                    unknown=unknown,
                )

    cycle = find_cycle(forward)
    if cycle:
        raise ConfigurationError("forward dependency table has a cycle", cycle=cycle)

    inverted = invert_edges(forward)
    for perm in expected:
        if inverted[perm] != frozenset(reverse[perm]):
            raise ConfigurationError(
                f"reverse dependencies of {perm!r} diverge from forward table",
                expected=sorted(inverted[perm]),
                declared=sorted(reverse[perm]),
            )


for _tier in AccountTier:
    check_graph_consistency(
        permissions_for_tier(_tier),
        FORWARD_DEPENDENCIES[_tier],
        REVERSE_DEPENDENCIES[_tier],
    )


__all__ = [
    "EdgeMap",
    "FORWARD_DEPENDENCIES",
    "REVERSE_DEPENDENCIES",
    "check_graph_consistency",
    "find_cycle",
    "forward_edges",
    "invert_edges",
    "reverse_edges",
]
