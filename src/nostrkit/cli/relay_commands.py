import asyncio
from typing import List

import typer
from rich.markup import escape

from ..domain.errors import NostrkitError
from ..relays import OutboxSynchronizer, WebsocketTransport
from ..services.relays import RelayService
from .common import PROFILE_OPTION_HELP, console, fail, get_config_store

app = typer.Typer()


def get_relay_service() -> RelayService:
    """get relay service wired to the websocket transport."""
    synchronizer = OutboxSynchronizer(WebsocketTransport())
    return RelayService(get_config_store(), synchronizer)


@app.command("list")
def list_relays(
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """print configured relays."""
    service = get_relay_service()

    try:
        alias, relays = service.list_relays(profile)
    except NostrkitError as e:
        fail(e)

    if not relays:
        console.print(
            f"No relays are configured for '{escape(alias)}'. "
            "Use [cyan]nostrkit relays add <url>[/cyan] to add one."
        )
        return

    for index, relay in enumerate(relays, start=1):
        console.print(f"{index}. {escape(relay)}")


@app.command("add")
def add_relays(
    urls: List[str] = typer.Argument(..., help="Relay URLs to add"),
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """add relay URLs to the config."""
    service = get_relay_service()

    try:
        alias, added = service.add_relays(profile, urls)
    except NostrkitError as e:
        fail(e)

    if not added:
        console.print("All provided relays are already configured.")
        return

    console.print(f"[green]✓[/green] Added {len(added)} relay(s) to '{escape(alias)}':")
    for relay in added:
        console.print(f"- {escape(relay)}")


@app.command("remove")
def remove_relays(
    urls: List[str] = typer.Argument(..., help="Relay URLs to remove"),
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """remove relay URLs from the config."""
    service = get_relay_service()

    try:
        alias, removed, missing = service.remove_relays(profile, urls)
    except NostrkitError as e:
        fail(e)

    console.print(f"[green]✓[/green] Removed {len(removed)} relay(s) from '{escape(alias)}':")
    for relay in removed:
        console.print(f"- {escape(relay)}")
    if missing:
        console.print(f"[yellow]The following relays were not found:[/yellow] {escape(', '.join(missing))}")


@app.command("pull")
def pull_relays(
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """
    pull relay metadata via the outbox model.

    connects to the configured relays, fetches the latest kind 10002 event
    and replaces the local relay list with its write relays.
    """
    service = get_relay_service()

    try:
        alias, relays = asyncio.run(service.pull_relays(profile))
    except NostrkitError as e:
        fail(e)

    console.print(f"[green]✓[/green] Synchronized {len(relays)} relay(s) into '{escape(alias)}' from outbox metadata:")
    for relay in relays:
        console.print(f"- {escape(relay)}")
