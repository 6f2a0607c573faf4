from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from fulfillment.core.config import settings

# Create a base class for our models
Base = declarative_base()


def make_engine(url: str):
    """SQLite needs thread sharing for FastAPI; ``sqlite://`` also needs one shared connection."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(bind):
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = make_engine(settings.DATABASE_URL)
SessionLocal = make_session_factory(engine)


def create_tables(bind=None):
    """Create all tables in the database."""
    # Import models so they are registered with the Base metadata
    from fulfillment.infrastructure import tables  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
