"""
Database connection and session management for the Event Planning Service.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database manager owning the engine and the session factory.
    One session per unit of work; commit on success, rollback on error.
    """

    def __init__(self):
        self.engine = None
        self.session_factory = None
        self.database_url: Optional[str] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, database_url: str, pool_config: Optional[Dict[str, Any]] = None):
        """
        Initialize the engine for a database URL.

        Args:
            database_url: SQLAlchemy database URL
            pool_config: Connection pool settings (ignored for SQLite)
        """
        if self._initialized:
            self.close()

        try:
            if database_url.startswith("sqlite"):
                engine_kwargs: Dict[str, Any] = {
                    "connect_args": {"check_same_thread": False},
                }
                if database_url in ("sqlite://", "sqlite:///:memory:"):
                    engine_kwargs["poolclass"] = StaticPool
            else:
                pool_config = pool_config or {}
                engine_kwargs = {
                    "pool_pre_ping": True,
                    "pool_size": pool_config.get("pool_size", 10),
                    "max_overflow": pool_config.get("max_overflow", 20),
                    "pool_timeout": pool_config.get("pool_timeout", 30),
                    "pool_recycle": pool_config.get("pool_recycle", 3600),
                }

            self.engine = create_engine(database_url, echo=False, **engine_kwargs)
            self.session_factory = sessionmaker(
                bind=self.engine,
                class_=Session,
                autoflush=False,
                expire_on_commit=False
            )
            self.database_url = database_url

            self._setup_event_listeners()

            self._initialized = True
            logger.info("Database manager initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database manager: {e}")
            raise

    def _setup_event_listeners(self):
        """Set up connection listeners."""

        @event.listens_for(self.engine, "connect")
        def set_connection_options(dbapi_connection, connection_record):
            """Enforce foreign keys on SQLite connections."""
            if self.database_url.startswith("sqlite"):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session with automatic transaction management.
        Ensures proper rollback on exceptions.
        """
        if not self._initialized:
            raise RuntimeError("Database manager not initialized")

        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        if not self._initialized:
            return False
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def create_tables(self):
        """Create all database tables."""
        from eventplanning.models.base import Base
        from eventplanning.models import booking, notification, payment, review, task, user, vendor  # noqa: F401
        from eventplanning.models import event as event_models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created successfully")

    def drop_tables(self):
        """Drop all database tables (use with caution)."""
        from eventplanning.models.base import Base

        Base.metadata.drop_all(bind=self.engine)
        logger.info("Database tables dropped successfully")

    def close(self):
        """Close all database connections."""
        if self.engine:
            self.engine.dispose()
        self._initialized = False
        logger.info("Database connections closed")


# Global database manager instance
db_manager = DatabaseManager()
