from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from hashlink_app.config import settings

IS_SQLITE = settings.database_url.startswith("sqlite")

# SQLite needs this to share the connection with FastAPI's threadpool
connect_args = {"check_same_thread": False} if IS_SQLITE else {}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked, per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


if IS_SQLITE:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)


def get_db():
    """Yield a database session per request and always close it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
