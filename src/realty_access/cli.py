"""Maintenance CLI for the access-control store."""

import typer
from rich.console import Console

from realty_access import __version__
from realty_access.commands import grants, tokens, users
from realty_access.config import settings
from realty_access.core.logging import configure_logging


console = Console()

app = typer.Typer(
    name="realty-access",
    help="Inspect and repair users, permission grants and revoked tokens.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(grants.app, name="grants")
app.add_typer(tokens.app, name="tokens")
app.add_typer(users.app, name="users")


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Realty Access CLI - maintain users, grants and revoked tokens."""
    if version:
        console.print(f"[bold cyan]realty-access[/bold cyan] version {__version__}")
        raise typer.Exit()
    configure_logging(settings.log_level)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
