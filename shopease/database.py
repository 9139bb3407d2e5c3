from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

from shopease.config import get_settings

settings = get_settings()


def build_engine(url: str, **kwargs) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Server databases get a sized connection pool. SQLite gets foreign key
    enforcement on every connection; file-backed SQLite databases also take
    the write lock at BEGIN so concurrent writers queue on the busy timeout
    instead of failing with a lock-upgrade deadlock.
    """
    if not url.startswith("sqlite"):
        kwargs.setdefault("pool_size", settings.DB_POOL_SIZE)
        kwargs.setdefault("max_overflow", settings.DB_MAX_OVERFLOW)
        kwargs.setdefault("pool_pre_ping", True)
        return create_engine(url, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    database = make_url(url).database
    immediate = bool(database) and database != ":memory:"

    @event.listens_for(engine, "connect")
    def _on_sqlite_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        if immediate:
            # Hand transaction control to SQLAlchemy's "begin" event below
            dbapi_connection.isolation_level = None

    if immediate:
        @event.listens_for(engine, "begin")
        def _on_sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


# Create SQLAlchemy engine with connection pooling
engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency to get database session.
    Yields a database session and closes it after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
