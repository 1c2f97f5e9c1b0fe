"""Test helpers shared by fixtures and test modules."""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from realty_access.core.auth.backend import create_access_token
from realty_access.modules.users.models import User


TEST_DATABASE_URL = "sqlite+aiosqlite://"


def sqlite_engine(url: str = TEST_DATABASE_URL, **kwargs) -> AsyncEngine:
    """Create a SQLite engine with foreign keys and working savepoints."""
    engine = create_async_engine(url, echo=False, **kwargs)

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        # Let SQLAlchemy emit BEGIN itself so SAVEPOINT behaves
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    return engine


def token_for(user: User) -> str:
    """Issue an access token carrying the user's current role."""
    return create_access_token(
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
    )


def bearer(user: User) -> dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {token_for(user)}"}
