"""
Database configuration for SQLAlchemy.

The engine is opened once at startup and owned by the application
(``app.state.db``) instead of living in a module global, so tests can point
it at a throwaway SQLite file and shutdown can dispose it.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .settings import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for ORM models."""
    pass


@dataclass
class Database:
    """Engine + session factory handle passed to the request layer."""
    engine: Engine
    session_factory: sessionmaker

    def dispose(self) -> None:
        self.engine.dispose()


def create_db_engine(settings: Settings) -> Engine:
    url = settings.sqlalchemy_url
    connect_args = {}
    if url.startswith("sqlite"):
        # SQLite needs check_same_thread=False because FastAPI runs sync deps in threads.
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


def connect_db(settings: Settings) -> Database:
    """
    Startup gate: build the engine and make one connection attempt, no retry.

    On failure (bad URL, missing driver, unreachable database) the error is
    logged and the process exits with status 1.
    """
    try:
        engine = create_db_engine(settings)
        with engine.connect():
            pass
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.exception("Database connection failed")
        sys.exit(1)

    logger.info("Database connected: %s", engine.url)
    return Database(
        engine=engine,
        session_factory=sessionmaker(autocommit=False, autoflush=False, bind=engine),
    )


def get_db(request: Request):
    """
    FastAPI dependency that yields a DB session per request,
    then closes it cleanly afterwards.
    """
    db = request.app.state.db.session_factory()
    try:
        yield db
    finally:
        db.close()
