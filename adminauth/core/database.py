"""SQLAlchemy engine and session factory for the SQL credential store."""

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, pool_pre_ping=True, echo=echo)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)


def check_db_connected(session_factory: sessionmaker[Session]) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        with session_factory() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
