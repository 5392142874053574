"""
Database connection settings for the leave workflow engine.
Provides SQLAlchemy session management and connection pooling.
"""

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from leaveflow.config.logging import get_logger
from leaveflow.config.settings import settings

logger = get_logger(__name__)


@lru_cache()
def get_engine(database_url: Optional[str] = None) -> Engine:
    """Create (once per URL) the SQLAlchemy engine"""
    url = database_url or settings.get_database_url()
    options = {
        "pool_pre_ping": True,  # Check connection before using it
        "echo": settings.DB_ECHO,
        "connect_args": dict(settings.DB_CONNECT_ARGS),
    }
    if url.startswith("sqlite"):
        options["connect_args"].setdefault("check_same_thread", False)
    else:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
    return create_engine(url, **options)


@lru_cache()
def get_session_factory(database_url: Optional[str] = None) -> sessionmaker:
    """Create the sessionmaker bound to the engine"""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=get_engine(database_url),
    )


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - start timer"""
    conn.info.setdefault('query_start_time', []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log query execution time - stop timer and log if slow query"""
    total_time = time.time() - conn.info['query_start_time'].pop()

    # Log slow queries (more than 0.5 seconds)
    if total_time > 0.5:
        logger.warning(
            f"Slow query detected ({total_time:.4f}s): {statement[:100]}..."
        )


def get_db_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup"""
    session = get_session_factory()()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Context manager for database sessions"""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error(f"Database context error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None, seed: bool = True) -> None:
    """
    Create all tables and seed the leave type catalogue.

    Args:
        engine: Engine to use (default: configured engine)
        seed: Whether to insert default leave type configurations
    """
    from leaveflow.models import Base
    from leaveflow.repositories.leave.leave_type_repository import LeaveTypeRepository

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)

    if seed:
        session = sessionmaker(bind=engine, expire_on_commit=False)()
        try:
            created = LeaveTypeRepository(session).seed_defaults()
            session.commit()
            logger.info(f"Database initialised; seeded {created} leave type(s)")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
