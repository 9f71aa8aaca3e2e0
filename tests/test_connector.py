"""Tests for the connector facade and the command-line entry point."""

from __future__ import annotations

import json
from collections import Counter

import pytest
from typer.testing import CliRunner

from onepassword_connector import cli as cli_module
from onepassword_connector.config import ConnectorConfig
from onepassword_connector.connector import (
    AccountSyncer,
    GroupSyncer,
    OnePasswordConnector,
    UserSyncer,
    VaultSyncer,
)
from onepassword_connector.exceptions import ValidationError
from onepassword_connector.resources import Page

from conftest import FakeCli

runner = CliRunner()


class TestOnePasswordConnector:
    """Tests for OnePasswordConnector."""

    def test_metadata(self, fake_cli: FakeCli) -> None:
        assert OnePasswordConnector(fake_cli).metadata()["display_name"] == "1Password"

    def test_validate(self, fake_cli: FakeCli) -> None:
        info = OnePasswordConnector(fake_cli).validate()
        assert info["email"] == "ops@acme.com"
        assert fake_cli.calls == [("get_signed_in_account",)]

    def test_validate_failure(self, fake_cli: FakeCli) -> None:
        fake_cli.auth = None
        with pytest.raises(ValidationError) as exc_info:
            OnePasswordConnector(fake_cli).validate()
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details["exit_code"] == 1

    @pytest.mark.parametrize("address", ["acme.1password.com", "https://ACME.1password.com/"])
    def test_validate_address_matches(self, fake_cli: FakeCli, address: str) -> None:
        info = OnePasswordConnector(fake_cli, address=address).validate()
        assert info["url"] == "https://acme.1password.com"

    def test_validate_address_mismatch(self, fake_cli: FakeCli) -> None:
        """Test that a session for another account fails validation."""
        with pytest.raises(ValidationError) as exc_info:
            OnePasswordConnector(fake_cli, address="other.1password.eu").validate()
        assert exc_info.value.details == {
            "address": "other.1password.eu",
            "url": "https://acme.1password.com",
        }

    def test_resource_syncers(self, fake_cli: FakeCli) -> None:
        syncers = OnePasswordConnector(fake_cli, frozenset({"member"})).resource_syncers()
        assert [type(s) for s in syncers] == [AccountSyncer, UserSyncer, GroupSyncer, VaultSyncer]
        assert syncers[-1].limit_vault_permissions == frozenset({"member"})

    def test_from_config(self) -> None:
        config = ConnectorConfig(op_path="/opt/op", limit_vault_permissions="member,view_items")
        connector = OnePasswordConnector.from_config(config)
        assert connector.cli.op_path == "/opt/op"
        assert connector.limit_vault_permissions == frozenset({"member", "view_items"})

    def test_from_config_address(self) -> None:
        connector = OnePasswordConnector.from_config(ConnectorConfig(address="acme.1password.com"))
        assert connector.address == "acme.1password.com"

    def test_from_config_without_limit(self) -> None:
        assert OnePasswordConnector.from_config(ConnectorConfig()).limit_vault_permissions is None


class TestCli:
    """Tests for the onepassword-connector command."""

    @pytest.fixture(autouse=True)
    def _connector(self, fake_cli: FakeCli, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cli_module, "build_connector", lambda: OnePasswordConnector(fake_cli))

    def test_validate(self) -> None:
        result = runner.invoke(cli_module.app, ["validate"])
        assert result.exit_code == 0
        assert "ops@acme.com" in result.output

    def test_validate_failure(self, fake_cli: FakeCli) -> None:
        fake_cli.auth = None
        result = runner.invoke(cli_module.app, ["validate"])
        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.output

    def test_sync(self) -> None:
        """Test that sync drives every syncer and cursor to completion."""
        result = runner.invoke(cli_module.app, ["sync"])
        assert result.exit_code == 0
        records = [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
        kinds = Counter(r["kind"] for r in records)
        assert kinds == {"resource": 5, "entitlement": 16, "grant": 13}

        grants = {r["id"] for r in records if r["kind"] == "grant"}
        assert "vault:V1:manage vault:group:G1" in grants
        assert "vault:V1:edit items:user:U1" in grants

    def test_sync_failure(self, fake_cli: FakeCli) -> None:
        fake_cli.account = fake_cli.account.model_copy(update={"type": "MYSTERY"})
        result = runner.invoke(cli_module.app, ["sync"])
        assert result.exit_code == 1
        assert "CONFIGURATION_ERROR" in result.output


class TestDrain:
    """Tests for following page tokens."""

    def test_follows_tokens(self) -> None:
        pages = {"": Page([1], "a"), "a": Page([2], "b"), "b": Page([3], "")}
        assert list(cli_module.drain(lambda t: pages[t])) == [1, 2, 3]
