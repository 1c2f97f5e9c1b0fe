"""Commands: realty-access users - bootstrap accounts."""

import asyncio

import typer
from rich.console import Console

from realty_access.core.auth.backend import hash_password
from realty_access.core.database import async_session_factory
from realty_access.core.permissions import GrantRepository, get_catalogue
from realty_access.modules.users.enums import Role
from realty_access.modules.users.models import User
from realty_access.modules.users.repos import UserRepository


console = Console()

app = typer.Typer(help="Bootstrap user accounts.", no_args_is_help=True)


class AccountExists(Exception):
    pass


async def _create(username: str, email: str, password: str, role: Role) -> User:
    async with async_session_factory() as session:
        repo = UserRepository(session)
        if await repo.get_by_email(email) is not None:
            raise AccountExists(f"Email already registered: {email}")
        if await repo.get_by_username(username) is not None:
            raise AccountExists(f"Username already taken: {username}")

        user = await repo.create(
            User(
                username=username,
                email=email.lower(),
                password_hash=hash_password(password),
                role=role,
            )
        )
        if role == Role.EMPLOYEE:
            await GrantRepository(session).create(user.id, get_catalogue().employee_defaults)
        await session.commit()
        return user


@app.command(name="create")
def create(
    username: str = typer.Argument(..., help="Unique username"),
    email: str = typer.Argument(..., help="Unique email address"),
    role: Role = typer.Option(Role.USER, "--role", "-r", help="Account role"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Create an account. Employees start with the default permissions."""
    try:
        user = asyncio.run(_create(username, email, password, role))
    except AccountExists as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(
        f"[green]✓[/green] Created {user.role.value} [bold]{user.username}[/bold] ({user.id})"
    )
