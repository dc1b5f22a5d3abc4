"""Engine, sessions and schema setup for the eisentask task store.

The store is a local SQLite file unless `DATABASE_URL` points somewhere else
(e.g. PostgreSQL). Tasks and the eligibility counters are the only tables.
"""

import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm import declarative_base
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eisentask.db")


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "False").lower() == "true"


def get_engine_kwargs(database_url: str) -> dict:
    """Keyword arguments for `create_engine` given a database URL.

    Reads DEBUG and the DB_POOL_* settings from the environment at call time.
    """
    engine_kwargs: dict = {
        "echo": _env_flag("DEBUG"),
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Request handlers may run on a different thread than the one that opened the connection
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


engine = build_engine(DATABASE_URL)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Switch SQLite connections to write-ahead logging."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Session:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Make sure the task store schema exists.

    With `RUN_MIGRATIONS=true` on a non-SQLite database the schema comes from the
    Alembic revisions (ALEMBIC_INI selects the config file). Otherwise the tables
    are created straight from the ORM models.
    """
    # TaskDB / NotificationEligibilityDB register themselves on Base.metadata
    from eisentask.database import models  # noqa: F401

    if _env_flag("RUN_MIGRATIONS") and not _is_sqlite_url(DATABASE_URL):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
