"""Database engine and helpers.

The engine is not a module global: `create_db_engine` builds one from a
URL and the application factory attaches it to `app.state`. Request
handlers obtain a `Session` through the `get_session` dependency, which
reads the engine from the running application.
"""

import logging

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

logger = logging.getLogger("edumeta.database")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for `url`.

    SQLite connections get foreign key enforcement switched on so that
    the cascade rules declared on the models behave as they do on a
    server database. In-memory SQLite uses a single shared connection.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)
    logger.info("database engine created for dialect %s", engine.dialect.name)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables(engine: Engine):
    """Create database tables using SQLModel metadata.

    This function is intended for local development and tests;
    production deployments should manage the schema with a migration
    tool instead.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session bound to the application's engine and
    ensures it is closed when the request scope finishes.
    """
    with Session(request.app.state.engine) as session:
        yield session
