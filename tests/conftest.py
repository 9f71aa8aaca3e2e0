"""Shared fixtures: an in-memory stand-in for the ``op`` binary."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from onepassword_connector.exceptions import CliError
from onepassword_connector.models import Account, AuthResponse, Group, User, Vault
from onepassword_connector.resources import Resource, ResourceId


class FakeCli:
    """Canned ``op`` responses keyed the way OnePasswordCli is called.

    Every directive is recorded in ``calls`` as ``(method, *args)``.
    """

    def __init__(self, account_type: str = "BUSINESS") -> None:
        self.account = Account(id="ACC1", name="Acme", domain="acme.1password.com", type=account_type)
        self.auth: Optional[AuthResponse] = AuthResponse(
            url="https://acme.1password.com", email="ops@acme.com", account_uuid="ACC1"
        )
        self.users: list[User] = []
        self.groups: list[Group] = []
        self.vaults: list[Vault] = []
        self.group_members: dict[str, list[User]] = {}
        self.vault_members: dict[str, list[User]] = {}
        self.vault_groups: dict[str, list[Group]] = {}
        self.calls: list[tuple[Any, ...]] = []

    # Queries

    def get_signed_in_account(self) -> AuthResponse:
        self.calls.append(("get_signed_in_account",))
        if self.auth is None:
            raise CliError("op whoami failed with exit code 1", exit_code=1, stderr="not signed in")
        return self.auth

    def get_account(self) -> Account:
        return self.account

    def list_users(self) -> list[User]:
        return list(self.users)

    def list_groups(self) -> list[Group]:
        return list(self.groups)

    def list_group_members(self, group_id: str) -> list[User]:
        return list(self.group_members.get(group_id, []))

    def list_vaults(self) -> list[Vault]:
        return list(self.vaults)

    def list_vault_members(self, vault_id: str) -> list[User]:
        self.calls.append(("list_vault_members", vault_id))
        return list(self.vault_members.get(vault_id, []))

    def list_vault_groups(self, vault_id: str) -> list[Group]:
        self.calls.append(("list_vault_groups", vault_id))
        return list(self.vault_groups.get(vault_id, []))

    # Directives

    def add_user_to_group(self, group: str, role: str, user: str) -> None:
        self.calls.append(("add_user_to_group", group, role, user))

    def remove_user_from_group(self, group: str, user: str) -> None:
        self.calls.append(("remove_user_from_group", group, user))

    def add_user_to_vault(self, vault: str, user: str, permissions: str) -> None:
        self.calls.append(("add_user_to_vault", vault, user, permissions))

    def remove_user_from_vault(self, vault: str, user: str, permissions: str) -> None:
        self.calls.append(("remove_user_from_vault", vault, user, permissions))

    def add_group_to_vault(self, vault: str, group: str, permissions: str) -> None:
        self.calls.append(("add_group_to_vault", vault, group, permissions))

    def remove_group_from_vault(self, vault: str, group: str, permissions: str) -> None:
        self.calls.append(("remove_group_from_vault", vault, group, permissions))

    def directives(self) -> list[tuple[Any, ...]]:
        """Recorded calls that change state in 1Password."""
        return [c for c in self.calls if not c[0].startswith(("list_", "get_"))]


@pytest.fixture
def fake_cli() -> FakeCli:
    """Business account with two users, one group and one vault."""
    cli = FakeCli()
    alice = User(id="U1", name="Alice Smith", email="alice@acme.com", state="ACTIVE")
    bob = User(id="U2", name="Bob", email="bob@acme.com", state="SUSPENDED")
    cli.users = [alice, bob]
    cli.groups = [Group(id="G1", name="Engineering")]
    cli.vaults = [Vault(id="V1", name="Shared")]
    cli.group_members = {
        "G1": [
            User(id="U1", name="Alice Smith", email="alice@acme.com", role="MANAGER"),
            User(id="U2", name="Bob", email="bob@acme.com", role="MEMBER"),
        ]
    }
    cli.vault_members = {
        "V1": [
            User(id="U1", name="Alice Smith", email="alice@acme.com", permissions=["view_items", "edit_items"]),
            User(id="U2", name="Bob", email="bob@acme.com", permissions=["view_items"]),
        ]
    }
    cli.vault_groups = {
        "V1": [Group(id="G1", name="Engineering", permissions=["view_items", "manage_vault"])],
    }
    return cli


@pytest.fixture
def basic_cli(fake_cli: FakeCli) -> FakeCli:
    """Same data on a Teams account, which uses the basic vocabulary."""
    fake_cli.account = Account(id="ACC1", name="Acme", type="TEAM")
    fake_cli.vault_members = {
        "V1": [User(id="U1", name="Alice Smith", permissions=["allow_viewing", "allow_editing"])],
    }
    fake_cli.vault_groups = {"V1": []}
    return fake_cli


@pytest.fixture
def vault() -> Resource:
    return Resource(id=ResourceId("vault", "V1"), display_name="Shared", parent_id=ResourceId("account", "ACC1"))


@pytest.fixture
def user_principal() -> Resource:
    return Resource(id=ResourceId("user", "U1"), display_name="Alice Smith")


@pytest.fixture
def group_principal() -> Resource:
    return Resource(id=ResourceId("group", "G1"), display_name="Engineering")
