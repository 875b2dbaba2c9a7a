from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clubhouse.core.config import settings


def build_engine(url: str):
    # SQLite connections are handed between threadpool workers by FastAPI
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


# The engine is the entry point to the database. It's configured with the
# database URL and handles the connection pooling.
engine = build_engine(settings.DATABASE_URL)

# SessionLocal is a factory for creating new Session objects. The document
# store opens one session per transaction attempt.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
