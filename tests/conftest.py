import os
import threading

os.environ["ENV"] = "test"
os.environ["REDIS_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.db import Base, db_manager, get_db  # noqa: E402
from app.events.dispatcher import EventDispatcher  # noqa: E402
from app.events.emitter import EventEmitter  # noqa: E402
from app.main import create_app  # noqa: E402
from app.routers.utils.dependencies import get_event_dispatcher  # noqa: E402

pytest_plugins = ["tests.fixtures.chat_fixtures"]


class RecordingEventEmitter(EventEmitter):
    """Keeps every emitted event in memory instead of publishing it."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict, dict | None]] = []
        self.closed = False
        self._lock = threading.Lock()

    def emit_with_metadata(self, event_type, payload, metadata) -> None:
        with self._lock:
            self.events.append((event_type, payload, metadata))

    def close(self) -> None:
        self.closed = True

    def of_type(self, event_type: str) -> list[dict]:
        return [payload for t, payload, _ in self.events if t == event_type]


@pytest.fixture(scope="session")
def engine():
    engine = db_manager.engine
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    db_manager.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = db_manager.session()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture(scope="function")
def event_emitter():
    return RecordingEventEmitter()


@pytest.fixture(scope="function")
def dispatcher(event_emitter):
    dispatcher = EventDispatcher(event_emitter)
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture(scope="function")
def client(db, dispatcher):
    """Client with db and event dispatcher overrides; auth is off in testing mode."""
    app = create_app(testing=True)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
