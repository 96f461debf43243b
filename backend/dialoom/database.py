# backend/dialoom/database.py
from datetime import datetime
import logging
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            # A single shared connection so every session sees the same in-memory db
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "poolclass": QueuePool,
        "pool_size": 20,  # Number of persistent connections
        "max_overflow": 10,  # Maximum overflow connections
        "pool_timeout": 30,  # Timeout for getting connection
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_pre_ping": True,  # Test connections before using
        "connect_args": {"connect_timeout": 10, "application_name": "dialoom_backend"},
    }


DATABASE_URL = settings.get_database_url()
engine: Engine = create_engine(
    DATABASE_URL, echo=settings.database_echo, **_engine_kwargs(DATABASE_URL)
)


@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create all tables for the registered models."""
    from . import models  # noqa: F401  (registers mappers)

    Base.metadata.create_all(bind=engine)
