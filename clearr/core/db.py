from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from contextlib import contextmanager
from functools import lru_cache

from clearr.config import get_settings

# SQLAlchemy declarative base for models
Base = declarative_base()


@lru_cache()
def get_engine() -> Engine:
    db_settings = get_settings().database
    connect_args = {}
    if db_settings.url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        db_settings.url,
        echo=db_settings.echo,
        pool_pre_ping=db_settings.pool_pre_ping,
        connect_args=connect_args,
        future=True,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(
        bind=get_engine(), autoflush=False, autocommit=False, expire_on_commit=False
    )


def create_all(engine: Engine | None = None) -> None:
    """Create every mapped table; used by tests and DATABASE_AUTO_CREATE."""
    # Import models so their tables are registered on Base.metadata
    import clearr.models  # noqa: F401

    Base.metadata.create_all(engine or get_engine())


@contextmanager
def db_session(session_factory: sessionmaker | None = None):
    session = (session_factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

