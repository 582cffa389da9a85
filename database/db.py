# database/db.py
# CodeMentor — Engine, session factory, and table initialisation.
# Imports from: database/models.py, utils/logger.py
# Callers receive a session factory explicitly; nothing here is a global engine.

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from database.models import Base
from utils.logger import get_logger

log = get_logger("database.db")


# ─────────────────────────────────────────────
# Engine configuration
# ─────────────────────────────────────────────

def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Creates the engine for DATABASE_URL. SQLite gets check_same_thread=False
    (FastAPI runs sync routes on a threadpool) plus WAL and foreign keys on
    every new connection. Other backends are used as-is.
    """
    if _is_sqlite(database_url):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, connect_args=connect_args, echo=False, **kwargs)

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

        return engine

    return create_engine(database_url, echo=False, pool_pre_ping=True, **kwargs)


# ─────────────────────────────────────────────
# Session factory
# ─────────────────────────────────────────────

def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,   # rows stay readable after commit
    )


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Commits on clean exit, rolls back on any exception, always closes.
    Usage:
        with session_scope(factory) as db:
            db.add(row)
    """
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


# ─────────────────────────────────────────────
# Table initialisation — called once on startup
# ─────────────────────────────────────────────

def create_tables(engine: Engine) -> None:
    """Creates missing tables. Safe on every startup."""
    log.info("db_create_tables", url=engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)


def check_db_health(factory: sessionmaker[Session]) -> bool:
    """Returns True if the DB answers a trivial query."""
    try:
        with session_scope(factory) as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        log.error("db_health_check_failed", error=str(exc))
        return False
