"""Commands: realty-access tokens - maintain the revocation list."""

import asyncio
from datetime import UTC, datetime

import typer
from rich.console import Console

from realty_access.core.database import async_session_factory
from realty_access.modules.users.repos import RevokedTokenRepository


console = Console()

app = typer.Typer(help="Maintain the revoked token list.", no_args_is_help=True)


async def _cleanup(before: datetime) -> int:
    async with async_session_factory() as session:
        deleted = await RevokedTokenRepository(session).cleanup_expired(before)
        await session.commit()
        return deleted


@app.command(name="cleanup")
def cleanup() -> None:
    """Delete revoked tokens that have expired on their own."""
    deleted = asyncio.run(_cleanup(datetime.now(UTC)))
    console.print(f"[green]✓[/green] Removed {deleted} expired revoked token(s)")
