"""Tests for the account, user and group syncers."""

from __future__ import annotations

import pytest

from onepassword_connector.connector import (
    AccountSyncer,
    GroupSyncer,
    UserSyncer,
    account_resource,
    group_resource,
    user_resource,
)
from onepassword_connector.connector.helpers import split_name
from onepassword_connector.connector.user import user_status
from onepassword_connector.exceptions import UnsupportedPrincipalError
from onepassword_connector.models import User
from onepassword_connector.resources import Entitlement, ResourceId, UserStatus, new_grant

from conftest import FakeCli

ACCOUNT_ID = ResourceId("account", "ACC1")


class TestAccountSyncer:
    """Tests for the root account resource."""

    def test_list_ignores_parent(self, fake_cli: FakeCli) -> None:
        (account,) = AccountSyncer(fake_cli).list(None).items
        assert account.id == ACCOUNT_ID
        assert account.display_name == "Acme"
        assert account.child_resource_types == ("group", "user", "vault")

    def test_member_entitlement(self, fake_cli: FakeCli) -> None:
        account = account_resource(fake_cli.account)
        (ent,) = AccountSyncer(fake_cli).entitlements(account).items
        assert ent.id == "account:ACC1:member"
        assert ent.purpose == "assignment"
        assert ent.description == "1Password Acme account"

    def test_member_grant_per_user(self, fake_cli: FakeCli) -> None:
        account = account_resource(fake_cli.account)
        grants = AccountSyncer(fake_cli).grants(account).items
        assert [g.id for g in grants] == ["account:ACC1:member:user:U1", "account:ACC1:member:user:U2"]


class TestUserSyncer:
    """Tests for users as principals."""

    def test_list(self, fake_cli: FakeCli) -> None:
        users = UserSyncer(fake_cli).list(ACCOUNT_ID).items
        assert [u.id.resource for u in users] == ["U1", "U2"]
        alice = users[0]
        assert alice.profile == {
            "first_name": "Alice",
            "last_name": "Smith",
            "login": "alice@acme.com",
            "user_id": "U1",
        }
        assert alice.status == UserStatus.ENABLED
        assert alice.email == "alice@acme.com"
        assert users[1].status == UserStatus.DISABLED

    def test_list_without_parent(self, fake_cli: FakeCli) -> None:
        assert UserSyncer(fake_cli).list(None).items == []

    def test_no_entitlements_or_grants(self, fake_cli: FakeCli) -> None:
        alice = user_resource(fake_cli.users[0], ACCOUNT_ID)
        syncer = UserSyncer(fake_cli)
        assert syncer.entitlements(alice).items == []
        assert syncer.grants(alice).items == []
        assert syncer.resource_type.skip_entitlements_and_grants is True

    @pytest.mark.parametrize(
        ("state", "status"),
        [
            ("ACTIVE", UserStatus.ENABLED),
            ("RECOVERY_STARTED", UserStatus.ENABLED),
            ("INACTIVE", UserStatus.DISABLED),
            ("SUSPENDED", UserStatus.DISABLED),
            ("TRANSFER_SUSPENDED", UserStatus.DISABLED),
            ("TRANSFER_PENDING", UserStatus.UNSPECIFIED),
            ("", UserStatus.UNSPECIFIED),
        ],
    )
    def test_user_status(self, state: str, status: str) -> None:
        assert user_status(state) == status

    def test_split_name(self) -> None:
        assert split_name("Mary Ann Lee") == ("Mary", "Ann Lee")
        assert split_name("Cher") == ("Cher", "")

    def test_user_without_email(self) -> None:
        resource = user_resource(User(id="U9", name="Svc"), ACCOUNT_ID)
        assert resource.email is None


class TestGroupSyncer:
    """Tests for group membership sync and provisioning."""

    def test_list(self, fake_cli: FakeCli) -> None:
        (group,) = GroupSyncer(fake_cli).list(ACCOUNT_ID).items
        assert group.id == ResourceId("group", "G1")
        assert group.profile == {"group_name": "Engineering", "group_id": "G1"}
        assert GroupSyncer(fake_cli).list(None).items == []

    def test_entitlements(self, fake_cli: FakeCli) -> None:
        group = group_resource(fake_cli.groups[0], ACCOUNT_ID)
        ents = GroupSyncer(fake_cli).entitlements(group).items
        assert [(e.slug, e.purpose) for e in ents] == [("member", "assignment"), ("manager", "permission")]
        assert ents[1].display_name == "Engineering group manager"

    def test_grants_include_managers(self, fake_cli: FakeCli) -> None:
        group = group_resource(fake_cli.groups[0], ACCOUNT_ID)
        grants = GroupSyncer(fake_cli).grants(group).items
        assert [g.id for g in grants] == [
            "group:G1:member:user:U1",
            "group:G1:manager:user:U1",
            "group:G1:member:user:U2",
        ]

    def test_grant_passes_slug_as_role(self, fake_cli: FakeCli, user_principal) -> None:
        group = group_resource(fake_cli.groups[0], ACCOUNT_ID)
        GroupSyncer(fake_cli).grant(user_principal, Entitlement(resource=group, slug="manager"))
        assert fake_cli.directives() == [("add_user_to_group", "G1", "manager", "U1")]

    def test_revoke(self, fake_cli: FakeCli, user_principal) -> None:
        group = group_resource(fake_cli.groups[0], ACCOUNT_ID)
        GroupSyncer(fake_cli).revoke(new_grant(group, "member", user_principal))
        assert fake_cli.directives() == [("remove_user_from_group", "G1", "U1")]

    def test_group_principal_rejected(self, fake_cli: FakeCli, group_principal) -> None:
        group = group_resource(fake_cli.groups[0], ACCOUNT_ID)
        syncer = GroupSyncer(fake_cli)
        with pytest.raises(UnsupportedPrincipalError, match="granted group membership"):
            syncer.grant(group_principal, Entitlement(resource=group, slug="member"))
        with pytest.raises(UnsupportedPrincipalError, match="membership revoked"):
            syncer.revoke(new_grant(group, "member", group_principal))
        assert fake_cli.directives() == []
