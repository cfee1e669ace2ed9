"""Pytest configuration and fixtures."""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from vdir import models  # noqa: F401
from vdir.config import ClosureStrategy
from vdir.database import Base
from vdir.models.enums import NodeType
from vdir.services.ancestry import AncestryChecker
from vdir.services.namespace_service import NamespaceService
from vdir.services.node_store import NodeStore

# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").rsplit("/", 1)[0] + "/vdir_test"
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()
    if SQLALCHEMY_DATABASE_URL.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(params=[ClosureStrategy.RECURSIVE_CTE, ClosureStrategy.ITERATIVE])
def ancestry(request, db):
    """Ancestry checker, once per closure strategy."""
    return AncestryChecker(db, strategy=request.param, max_depth=100)


@pytest.fixture
def store(db, ancestry):
    """Node store bound to the test session."""
    return NodeStore(db, ancestry)


@pytest.fixture
def service(db, store):
    """Namespace service bound to the test session."""
    return NamespaceService(db, store)


@pytest.fixture
def make_tree(store, db):
    """Create a chain or tree of nodes from (name, type, parent_name) tuples.

    Returns a dict of name -> node id.
    """

    def _make(*specs: tuple[str, str, str | None]) -> dict[str, str]:
        ids: dict[str, str] = {}
        for name, node_type, parent_name in specs:
            parent_id = ids[parent_name] if parent_name else None
            ids[name] = store.create(name, NodeType(node_type), parent_id).id
        db.commit()
        return ids

    return _make


@pytest.fixture
def session_factory():
    """Session factory bound to the test database."""
    return TestingSessionLocal
