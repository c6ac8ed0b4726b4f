from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """Turn on FK enforcement for every new SQLite connection.

    SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    """

    @event.listens_for(target, "connect")
    def _set_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    settings.APP_DATABASE_DSN,
    connect_args=({"check_same_thread": False} if "sqlite" in settings.APP_DATABASE_DSN else {}),
)
if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


def close_db() -> None:
    """Release pooled connections at shutdown."""
    engine.dispose()
