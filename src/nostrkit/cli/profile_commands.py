import typer
from rich.table import Table

from ..domain.errors import DecryptionError, NostrkitError
from ..services.profiles import ProfileService
from .common import PROFILE_OPTION_HELP, console, fail, get_config_store, prompt_new_password

app = typer.Typer()

UNLOCK_ATTEMPTS = 3


def get_profile_service() -> ProfileService:
    """get profile service instance."""
    return ProfileService(get_config_store())


@app.command("list")
def list_profiles():
    """show available profile aliases."""
    service = get_profile_service()

    try:
        aliases, current = service.list_profiles()
    except NostrkitError as e:
        fail(e)

    if not aliases:
        console.print("[yellow]No profiles are configured.[/yellow]")
        console.print("\nCreate one with: [cyan]nostrkit setup --alias <name>[/cyan]")
        return

    table = Table(title="Profiles")
    table.add_column("Alias", style="cyan")
    table.add_column("Status", style="green")

    for alias in aliases:
        table.add_row(alias, "current" if alias == current else "")

    console.print(table)


@app.command("add")
def add_profile(alias: str):
    """
    create a new profile alias.

    walks through the encrypted key setup for the new alias so you can keep
    multiple identities side by side.
    """
    service = get_profile_service()
    secret_key = typer.prompt("Enter your private key (nsec or hex)", hide_input=True)
    password = prompt_new_password()

    try:
        alias, profile = service.add_profile(alias, secret_key, password)
    except NostrkitError as e:
        fail(e)

    console.print(f"[green]✓[/green] Profile '{alias}' created and set as default")
    console.print(f"  Public key: [cyan]{profile.public_key}[/cyan]")


@app.command("switch")
def switch_profile(alias: str):
    """set the default profile used when --profile is not supplied."""
    service = get_profile_service()

    try:
        current = service.switch_profile(alias)
    except NostrkitError as e:
        fail(e)

    console.print(f"[green]✓[/green] Default profile set to '{current}'")


@app.command("unlock")
def unlock_profile(
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """check that a password decrypts the stored private key."""
    service = get_profile_service()

    for attempt in range(1, UNLOCK_ATTEMPTS + 1):
        password = typer.prompt("Enter password to decrypt private key", hide_input=True)
        try:
            alias, _ = service.unlock(profile, password)
        except DecryptionError as e:
            if attempt == UNLOCK_ATTEMPTS:
                fail(e)
            console.print(f"[yellow]Try again:[/yellow] {e}")
            continue
        except NostrkitError as e:
            fail(e)

        console.print(f"[green]✓[/green] Private key for '{alias}' unlocked")
        return
