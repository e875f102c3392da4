"""Database Session Manager — request-scoped sessions for the membership store.

Invariants:
    - Every session rolls back on exception (no half-created member leaks)
    - A unique violation reaching this layer surfaces as ConflictError (409),
      named after the identity it protects: email, CPF, invite or intent
    - Any other SQLAlchemy failure surfaces as DatabaseError (503)
    - Readiness means the membership schema is reachable, not just the server

Design Decisions:
    - Services catch the unique races they expect (registration) themselves;
      this mapping is the backstop for check-then-act races elsewhere
      (two approvals minting the same token, two intents for one email)
    - Pool sizing applies to server databases only: SQLite (tests, local runs)
      keeps the dialect's default pool
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from netgroup.core.errors import ConflictError, DatabaseError, NetgroupError

logger = logging.getLogger(__name__)

# Column named in the driver's unique-violation text -> public message
_UNIQUE_MESSAGES = (
    ("invite_token", "Invite token collision, please retry"),
    ("intent_id", "This invite has already been used"),
    ("cpf", "This CPF is already registered"),
    ("email", "This email is already registered"),
)

# Table probed by the readiness check
_READINESS_PROBE = "SELECT 1 FROM members LIMIT 1"


def conflict_message(detail: str) -> str | None:
    """Message for a unique violation, or None if the error is something else.

    Works on both PostgreSQL ("Key (cpf)=...") and SQLite
    ("UNIQUE constraint failed: members.cpf") driver texts.
    """
    lowered = detail.lower()
    if "unique" not in lowered and "duplicate key" not in lowered:
        return None
    for column, message in _UNIQUE_MESSAGES:
        if column in lowered:
            return message
    return "Resource already exists"


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine and hands out one AsyncSession per request."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except NetgroupError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            message = conflict_message(str(e.orig))
            if message is None:
                logger.error(f"Integrity violation: {e.orig}")
                raise DatabaseError("Integrity constraint violated", "commit")
            logger.warning(
                f"Unique violation mapped to conflict: {e.orig}",
                extra={"error_code": "CONFLICT"},
            )
            raise ConflictError(message)
        except OperationalError as e:
            await session.rollback()
            logger.error(f"Membership store unreachable: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except (DBAPIError, SQLAlchemyError) as e:
            await session.rollback()
            logger.error(f"Membership store error: {e}")
            raise DatabaseError("Database operation failed", "query")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when the members table answers (server up and schema migrated)."""
        try:
            async with self.session() as db:
                await db.execute(text(_READINESS_PROBE))
            return True
        except Exception as e:
            logger.error(f"Readiness probe failed: {e}")
            return False


# Initialized on startup by the lifespan
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one managed session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
