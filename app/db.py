"""Database engine, session factory and FastAPI dependency."""

from __future__ import annotations

import contextlib
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings


class Base(DeclarativeBase):
    pass


class DatabaseManager:
    """Owns the engine and hands out sessions. Engine is created lazily."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self._database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = sessionmaker(
                bind=self._engine, autoflush=False, expire_on_commit=False
            )
        return self._engine

    def _create_engine(self) -> Engine:
        settings = get_settings()
        url = self._database_url or settings.database_url
        if url is None:
            raise ValueError("Database URL is not set.")
        if url.startswith("sqlite"):
            # In-memory SQLite must share one connection across threads
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            connect_args={"application_name": settings.app_name},
        )

    def session(self) -> Session:
        if self._session_factory is None:
            self._engine = self.engine
        return self._session_factory()

    @contextlib.contextmanager
    def db_session(self) -> Iterator[Session]:
        """Yield a session that is closed afterwards; rolls back on error."""
        db = self.session()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


db_manager = DatabaseManager()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    with db_manager.db_session() as db:
        yield db
