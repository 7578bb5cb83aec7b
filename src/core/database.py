"""Database connection and session management.

This module wraps the SQLAlchemy engine and session factory in a single
Database handle. One handle is built at process start by the application
factory and handed to request handlers through FastAPI dependencies.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import DATABASE_URL
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and hands out ORM sessions."""

    def __init__(self, url: Optional[str] = None):
        """Initialize Database.

        Args:
            url: SQLAlchemy database URL. Defaults to DATABASE_URL.
        """
        self.url = make_url(url or DATABASE_URL)
        engine_kwargs = {}
        if self.url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if not self.url.database or self.url.database == ":memory:":
                # In-memory databases live per connection; share a single one
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(self.url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        if self.url.get_backend_name() == "sqlite" and self.url.database not in (
            None,
            "",
            ":memory:",
        ):
            Path(self.url.database).parent.mkdir(parents=True, exist_ok=True)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables checked/created at %s", self.url.render_as_string())

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session outside of a request, closing it afterwards."""
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """Return the Database handle attached to the running application."""
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for getting a request-scoped database session."""
    db = get_database(request).SessionLocal()
    try:
        yield db
    finally:
        db.close()
