import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Local default when DATABASE_URL is not provided to the helper script
DB_PATH = os.path.join(os.path.dirname(__file__), "healthbot.db")
DEFAULT_DATABASE_URL = f"sqlite:///{DB_PATH}"

# Create a base class for our models
Base = declarative_base()

def create_db_engine(database_url: str):
    """Create the SQLAlchemy engine for a database URL."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every thread sees its own empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)

def make_session_factory(engine):
    """Create a configured "Session" class bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def create_tables(engine):
    """Create all tables in the database."""
    # Import all models here before calling create_all
    # This ensures they are registered with the Base metadata
    from .models import User  # noqa: F401
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    url = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    create_tables(create_db_engine(url))
    print("Database tables created successfully.")
