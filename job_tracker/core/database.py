"""
Storage handle for the SQLite job database.

One Storage owns one engine and one session factory. The application gets
its handle injected through create_app(); get_storage() provides the lazy
process-wide default used when nothing is injected.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from job_tracker.core.config import settings

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; ON DELETE CASCADE needs it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class Storage:
    """
    Handle on a SQLite database file (or an in-memory database for tests).
    """

    def __init__(self, url: str):
        self.url = url

        if _is_memory_url(url):
            # Every session must see the same in-memory database
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                pool_pre_ping=True,
            )

        event.listen(self.engine, "connect", _enable_foreign_keys)
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)

    @classmethod
    def from_path(cls, db_path: Path) -> "Storage":
        """
        Open the database file at db_path, creating its directory if missing.

        Args:
            db_path: Path to SQLite database file

        Returns:
            Storage bound to that file
        """
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{db_path}")

    def init_schema(self) -> None:
        """
        Create tables and indexes if they do not exist yet.

        Safe to call any number of times.
        """
        from job_tracker import models  # noqa: F401  register models on Base
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """
    Get or create the process-wide storage handle.

    The first call creates the database file under settings.DATA_DIR and
    applies the schema; later calls return the same handle.
    """
    global _storage

    if _storage is None:
        logger.info(f"Opening job database at {settings.DATABASE_PATH}")
        storage = Storage.from_path(settings.DATABASE_PATH)
        storage.init_schema()
        _storage = storage

    return _storage


def reset_storage() -> None:
    """Dispose and forget the process-wide handle (useful for testing)."""
    global _storage

    if _storage is not None:
        _storage.dispose()
    _storage = None


def get_db(request: Request):
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = request.app.state.storage.session()
    try:
        yield db
    finally:
        db.close()
