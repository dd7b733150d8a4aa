import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import get_config_file
from ..profiles import ConfigStore

console = Console()

PROFILE_OPTION_HELP = "Use the named profile for this command"


def get_config_store() -> ConfigStore:
    """get config store for the configured path."""
    return ConfigStore(get_config_file())


def setup_logging(verbose: bool) -> None:
    """route log records through rich; debug output with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def fail(error: Exception) -> NoReturn:
    """print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise typer.Exit(1)


def prompt_new_password() -> str:
    return typer.prompt(
        "Enter password to encrypt private key",
        hide_input=True,
        confirmation_prompt="Confirm password",
    )
