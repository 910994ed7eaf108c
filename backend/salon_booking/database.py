from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings


def build_engine(url: str):
    """Create an engine; sqlite gets thread sharing and foreign keys."""
    if url.startswith("sqlite"):
        # check_same_thread=False: sessions are opened from the fetch worker pool
        engine = create_engine(url, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def enable_sqlite_fk(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.resolved_database_url)

# SessionLocal is the session factory handed to the stores
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)
