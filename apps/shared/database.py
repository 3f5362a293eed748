"""
Database configuration and session management

The store lifecycle lives in an explicit Database object instead of module
globals, so the server and the tests can each hand their own instance to the
application factory.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from apps.shared.config import get_settings

logger = logging.getLogger(__name__)

# Base class for ORM models
Base = declarative_base()


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one database URL.

    Usage:
        db = Database("sqlite:///./blog.db")
        db.init()          # connect, verify, create tables
        with db.session() as session:
            ...
        db.teardown()      # drop all tables
        db.dispose()       # close pooled connections
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        settings = get_settings()
        self.url = url or settings.database_url
        self.echo = settings.database_echo if echo is None else echo
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    def _create_engine(self) -> None:
        connect_args = {}
        if self.url.startswith("sqlite"):
            # Sessions may be opened and closed on different worker threads
            connect_args["check_same_thread"] = False
        # NullPool for better compatibility with containerized environments
        self._engine = create_engine(
            self.url,
            poolclass=NullPool,
            echo=self.echo,
            connect_args=connect_args,
        )
        self._sessionmaker = sessionmaker(
            autocommit=False, autoflush=False, bind=self._engine
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._create_engine()
        return self._engine

    @property
    def SessionLocal(self) -> sessionmaker:
        if self._sessionmaker is None:
            self._create_engine()
        return self._sessionmaker

    def init(self) -> None:
        """Connect to the store, verify it answers and create missing tables."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def teardown(self) -> None:
        """Drop every table owned by the service."""
        logger.warning("Dropping all tables (%s)", self.engine.url.render_as_string(hide_password=True))
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        """Close all connections held by the engine."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connections closed")

    def check_connection(self) -> bool:
        """
        Test database connectivity
        Returns True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database connectivity check failed")
            return False

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()


def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency injection for database sessions
    Usage in FastAPI endpoints:

    @app.get("/endpoint")
    def endpoint(db: Session = Depends(get_db)):
        # use db here
        pass
    """
    db = get_database(request).SessionLocal()
    try:
        yield db
    finally:
        db.close()
