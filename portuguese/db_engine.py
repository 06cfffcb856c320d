"""
SQLAlchemy engine and session handling for the flashcard store.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from portuguese.constants import DB_NAME

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Return the module engine, opening the default sqlite file on first use."""
    if _engine is None:
        set_engine(create_engine(f"sqlite:///{DB_NAME}"))
    return _engine


def set_engine(engine: Engine) -> None:
    """Point the flashcard store at another engine (tests, --db flag)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = sessionmaker(bind=engine, expire_on_commit=False)


def use_sqlite_file(path: Union[str, Path]) -> Engine:
    engine = create_engine(f"sqlite:///{path}")
    set_engine(engine)
    return engine


def reset_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session scope: commits when the block exits cleanly, rolls back otherwise."""
    if _session_factory is None:
        get_engine()

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
