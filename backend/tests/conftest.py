import os, sys
import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# In-memory profile; must be set before the taskboard package is imported.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

# Ensure app import path
backend_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

from taskboard.main import app  # noqa: E402
from taskboard.db.session import engine, Base, get_db  # noqa: E402
from taskboard.domain.task_request import TaskRequest  # noqa: E402
from taskboard.security import execute_in_user_context  # noqa: E402
from taskboard.services.task_service import TaskService  # noqa: E402
from taskboard.services.user_service import UserService  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Session joined to an outer transaction that is rolled back after each test.

    Service-level commits only release a SAVEPOINT, so nothing a test writes
    survives it.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection, autoflush=False, join_transaction_mode="create_savepoint")
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def task_service(db):
    return TaskService(db)


@pytest.fixture
def user_service(db):
    return UserService(db)


@pytest.fixture
def existing_user(user_service):
    return user_service.create("alex", "adelina")


@pytest.fixture
def existing_task(existing_user, task_service):
    request = TaskRequest.builder().message("Sample").assignee_id(existing_user.id).build()
    return execute_in_user_context(existing_user, lambda p: task_service.create(p, request))


@pytest.fixture
def some_user(user_service):
    """Factory creating a fresh user with a unique name on each call."""
    def _make():
        return user_service.create(f"The new guy {uuid.uuid4().hex[:8]}", "123456")
    return _make


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
