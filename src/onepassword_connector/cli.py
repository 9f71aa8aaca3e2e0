"""
onepassword-connector - command-line entry point.

Usage:
    onepassword-connector validate    Check that the op CLI is signed in
    onepassword-connector sync        Print every resource, entitlement and grant

Settings come from the environment, see ConnectorConfig.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_config_from_env
from .connector import OnePasswordConnector
from .exceptions import ConnectorError
from .interfaces import ResourceSyncer
from .logging import setup_logging
from .resources import Page, Resource

_T = TypeVar("_T")

app = typer.Typer(
    name="onepassword-connector",
    help="Sync 1Password users, groups and vaults for access reviews",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def build_connector() -> OnePasswordConnector:
    config = load_config_from_env()
    setup_logging(config)
    return OnePasswordConnector.from_config(config)


def _fail(e: ConnectorError) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(f'[{e.code}] {e.message}')}")
    return typer.Exit(1)


def _emit(kind: str, record: dict[str, Any]) -> None:
    line = json.dumps({"kind": kind, **record}, sort_keys=True)
    console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)


def drain(fetch: Callable[[str], Page[_T]]) -> Iterator[_T]:
    """Yield items page by page until the returned token is empty."""
    token = ""
    while True:
        page = fetch(token)
        yield from page.items
        token = page.next_token
        if not token:
            return


def walk_resources(syncers: list[ResourceSyncer]) -> Iterator[tuple[ResourceSyncer, Resource]]:
    """Yield every resource, parents before their children."""
    by_type = {s.resource_type.id: s for s in syncers}
    pending: list[tuple[ResourceSyncer, Resource]] = []
    for syncer in syncers:
        pending.extend((syncer, r) for r in drain(lambda t, s=syncer: s.list(None, t)))

    while pending:
        syncer, resource = pending.pop(0)
        yield syncer, resource
        for child_type in resource.child_resource_types:
            child = by_type.get(child_type)
            if child is None:
                continue
            pending.extend((child, r) for r in drain(lambda t, c=child, p=resource.id: c.list(p, t)))


@app.command("validate")
def validate_command() -> None:
    """Check that the op CLI is signed in to an account."""
    try:
        connector = build_connector()
        info = connector.validate()
    except ConnectorError as e:
        raise _fail(e)

    table = Table(title=connector.metadata()["display_name"])
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in info.items():
        table.add_row(key, value)
    console.print(table)
    console.print("[green]✓[/green] Signed in")


@app.command("sync")
def sync_command() -> None:
    """Print one JSON object per resource, entitlement and grant."""
    try:
        connector = build_connector()
        for syncer, resource in walk_resources(connector.resource_syncers()):
            _emit("resource", resource.to_dict())
            if syncer.resource_type.skip_entitlements_and_grants:
                continue
            for entitlement in drain(lambda t: syncer.entitlements(resource, t)):
                _emit("entitlement", entitlement.to_dict())
            for grant in drain(lambda t: syncer.grants(resource, t)):
                _emit("grant", grant.to_dict())
    except ConnectorError as e:
        raise _fail(e)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
