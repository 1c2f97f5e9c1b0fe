"""Commands: realty-access grants - inspect and repair permission grants."""

import asyncio
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from realty_access.core.database import async_session_factory
from realty_access.core.permissions import GrantRepository, get_catalogue
from realty_access.modules.permissions.services import BackfillResult, PermissionService
from realty_access.modules.users.enums import Role
from realty_access.modules.users.models import User
from realty_access.modules.users.repos import UserRepository


console = Console()

app = typer.Typer(help="Inspect and repair permission grants.", no_args_is_help=True)


async def _load(user_id: UUID) -> tuple[User | None, list[str]]:
    async with async_session_factory() as session:
        user = await UserRepository(session).get_by_id(user_id)
        if user is None:
            return None, []
        return user, await GrantRepository(session).list_grants(user_id)


async def _backfill() -> BackfillResult:
    async with async_session_factory() as session:
        result = await PermissionService(session).backfill_employee_defaults()
        await session.commit()
        return result


@app.command(name="show")
def show(
    user_id: UUID = typer.Argument(..., help="The user's ID"),
) -> None:
    """Show a user's role, status and stored grants."""
    user, permissions = asyncio.run(_load(user_id))
    if user is None:
        console.print(f"[red]Error:[/red] User not found: {user_id}")
        raise typer.Exit(1)

    console.print(
        f"[bold]{user.username}[/bold] <{user.email}> "
        f"role=[cyan]{user.role.value}[/cyan] status={user.status.value}"
    )

    if not permissions:
        console.print("[yellow]No permissions granted.[/yellow]")
    else:
        table = Table(title="Granted Permissions", show_header=True)
        table.add_column("Permission", style="cyan", no_wrap=True)
        for permission in permissions:
            table.add_row(permission)
        console.print(table)

    if user.role == Role.EMPLOYEE:
        missing = [p for p in get_catalogue().employee_defaults if p not in permissions]
        if missing:
            console.print(
                f"[yellow]Missing default permissions:[/yellow] {', '.join(missing)}"
            )
        else:
            console.print("[green]All default permissions present.[/green]")


@app.command(name="backfill-defaults")
def backfill_defaults() -> None:
    """Add missing default permissions to every employee.

    Extra permissions already granted are kept. A failure on one
    employee is reported and the rest are still processed.
    """
    result = asyncio.run(_backfill())

    console.print(
        f"Processed [bold]{result.processed}[/bold] employees: "
        f"[green]{result.updated} updated[/green], {result.unchanged} unchanged, "
        f"[red]{len(result.failed)} failed[/red]"
    )
    for user_id in result.failed:
        console.print(f"  [red]failed:[/red] {user_id}")

    if result.failed:
        raise typer.Exit(1)
