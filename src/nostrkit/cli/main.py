import typer

from ..config import DEFAULT_PROFILE_ALIAS
from ..domain.errors import NostrkitError
from ..services.profiles import ProfileService
from .common import (
    PROFILE_OPTION_HELP,
    console,
    fail,
    get_config_store,
    prompt_new_password,
    setup_logging,
)
from .profile_commands import app as profile_app
from .relay_commands import app as relay_app

app = typer.Typer()

app.add_typer(profile_app, name="profile", help="Manage saved key profiles")
app.add_typer(relay_app, name="relays", help="List, edit, or synchronize your relay list")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """manage encrypted nostr keys and relay lists."""
    setup_logging(verbose)


@app.command()
def setup(
    alias: str = typer.Option(DEFAULT_PROFILE_ALIAS, "--alias", help="Profile alias to configure or update"),
):
    """configure your encrypted key and relays."""
    service = ProfileService(get_config_store())
    secret_key = typer.prompt("Enter your private key (nsec or hex)", hide_input=True)
    password = prompt_new_password()

    try:
        alias, profile = service.setup_profile(alias, secret_key, password)
    except NostrkitError as e:
        fail(e)

    console.print(f"[green]✓[/green] Setup complete for '{alias}'! Your public key is: [cyan]{profile.public_key}[/cyan]")


@app.command("gen-keys")
def gen_keys(
    alias: str = typer.Option(DEFAULT_PROFILE_ALIAS, "--alias", help="Profile alias to store the generated key"),
):
    """generate a new key pair and store it encrypted."""
    service = ProfileService(get_config_store())
    password = prompt_new_password()

    try:
        alias, profile, nsec, npub = service.generate_profile(alias, password)
    except NostrkitError as e:
        fail(e)

    console.print("Generated keys:")
    console.print(f"  Secret (nsec): {nsec}")
    console.print(f"  Public (hex):  {profile.public_key}")
    console.print(f"  Public (npub): {npub}")
    console.print(f"[green]✓[/green] Saved encrypted key to profile '{alias}'")


@app.command("pubkey")
def pubkey(
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """show the configured public key in hex and npub format."""
    service = ProfileService(get_config_store())

    try:
        alias, public_hex, npub = service.show_public_key(profile)
    except NostrkitError as e:
        fail(e)

    console.print(f"\\[{alias}] Public key (hex):  {public_hex}")
    console.print(f"\\[{alias}] Public key (npub): {npub}")


@app.command("whoami")
def whoami(
    profile: str = typer.Option("", "--profile", help=PROFILE_OPTION_HELP),
):
    """alias for 'pubkey'."""
    pubkey(profile)


if __name__ == "__main__":
    app()
