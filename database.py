import os
import re
from typing import Any, Sequence

import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker

from errors import DataAccessError

logger = structlog.get_logger(__name__)

_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def _build_database_url() -> str:
    """Determine the SQLAlchemy DB URL using env vars with sensible fallbacks."""
    env_url = os.getenv("DATABASE_URL")
    if env_url:
        return env_url

    host = os.getenv("DB_HOST")
    if host:
        user = os.getenv("DB_USER", "postgres")
        password = os.getenv("DB_PASSWORD", "")
        port = os.getenv("DB_PORT", "5432")
        name = os.getenv("DB_NAME", "jobly")
        return f"postgresql://{user}:{password}@{host}:{port}/{name}"

    # Default to local SQLite file for simple local development
    return "sqlite:///./jobly.db"


def make_engine(url: str) -> Engine:
    """Create an engine; SQLite gets a longer timeout and per-connection pragmas."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    sqlite_engine = create_engine(
        url,
        connect_args={
            "check_same_thread": False,
            "timeout": 15,
        },
        pool_pre_ping=True,
    )

    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA busy_timeout = 5000")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            # company_handle references companies(handle)
            cursor.execute("PRAGMA foreign_keys=ON;")
        finally:
            cursor.close()

    return sqlite_engine


SQLALCHEMY_DATABASE_URL = _build_database_url()

engine = make_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_db_and_tables():
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def query(
    db: Session, sql: str, params: Sequence[Any] = (), commit: bool = False
) -> list[dict]:
    """Run one parameterized statement and return its rows as dicts.

    ``sql`` uses positional ``$1..$n`` placeholders; ``params[i]`` binds ``$i+1``.
    With ``commit=True`` the statement is committed after its rows are read.

    Any database failure rolls the session back and is re-raised as
    DataAccessError.
    """
    bound_sql = _POSITIONAL_PARAM.sub(r":p\1", sql)
    bind_params = {f"p{idx}": value for idx, value in enumerate(params, start=1)}
    try:
        result = db.execute(text(bound_sql), bind_params)
        rows = [dict(row._mapping) for row in result] if result.returns_rows else []
        if commit:
            db.commit()
    except (SQLAlchemyError, OverflowError) as exc:
        # OverflowError: a bound int the driver cannot represent
        db.rollback()
        logger.error("Query failed", error=str(exc.__cause__ or exc))
        raise DataAccessError() from exc
    return rows
