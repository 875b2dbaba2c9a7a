# tests/conftest.py

import os
import tempfile

# Settings are read at import time, so point them at the test database first
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "clubhouse_test.db")
os.environ["ENV"] = "local"
os.environ["DATABASE_URL_LOCAL"] = f"sqlite:///{TEST_DB_PATH}"

import pytest  # noqa: E402
from sqlalchemy import delete  # noqa: E402
from sqlalchemy_utils import create_database, database_exists, drop_database  # noqa: E402
from starlette.testclient import TestClient  # noqa: E402

from clubhouse.api import deps  # noqa: E402
from clubhouse.core.config import settings  # noqa: E402
from clubhouse.db.base_class import Base  # noqa: E402
from clubhouse.db.session import SessionLocal, engine  # noqa: E402
from clubhouse.main import app  # noqa: E402
from clubhouse.models.document import Document  # noqa: E402
from clubhouse.store import SqlDocumentStore  # noqa: E402


# --- Test Database Setup ---
@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    if database_exists(engine.url):
        drop_database(engine.url)
    create_database(engine.url)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    drop_database(engine.url)


@pytest.fixture(autouse=True)
def clean_documents():
    """Every test starts from an empty document store."""
    yield
    with SessionLocal() as db:
        db.execute(delete(Document))
        db.commit()


@pytest.fixture
def store():
    return SqlDocumentStore(
        SessionLocal, max_attempts=settings.TRANSACTION_MAX_ATTEMPTS
    )


# --- Test Client Fixtures ---
@pytest.fixture
def client(store):
    """
    TestClient over the live test database. Authentication is real: use
    tests.utils.auth to build bearer headers.
    """
    app.dependency_overrides[deps.get_store] = lambda: store

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
