"""Shared test fixtures."""
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, MagicMock

import pytest
from sqlalchemy.orm import sessionmaker

from outlet_ops.database import Base, make_engine


T0 = datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = make_engine('sqlite:///:memory:')
    import outlet_ops.models.db_outlet  # noqa: F401
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(session_factory):
    """Route every get_session() call to the in-memory database."""
    with patch('outlet_ops.database.get_session', side_effect=lambda: session_factory()):
        yield


@pytest.fixture
def mock_redis():
    """Dict-backed stand-in for the Redis client used by the preview store."""
    store = {}
    mock = MagicMock()
    mock.setex.side_effect = lambda key, ttl, value: store.__setitem__(key, value) or True
    mock.get.side_effect = lambda key: store.get(key)
    mock.delete.side_effect = lambda key: 1 if store.pop(key, None) is not None else 0
    mock.store = store
    with patch('outlet_ops.services.preview_store.r', mock):
        yield mock


@pytest.fixture
def clock():
    """Deterministic, strictly increasing timestamps: clock() → next minute."""
    state = {'now': T0}

    def _tick(minutes=1):
        state['now'] = state['now'] + timedelta(minutes=minutes)
        return state['now']
    return _tick


@pytest.fixture
def make_outlet():
    """Factory — builds an Outlet at the first stage with seeded history."""
    from outlet_ops.pipeline.transitions import create_outlet

    def _make(name='Dil Daily - Koramangala', now=T0, **overrides):
        outlet = create_outlet(name=name, note='Initial request received.', now=now)
        for k, v in overrides.items():
            setattr(outlet, k, v)
        return outlet
    return _make


@pytest.fixture
def repository():
    from outlet_ops.services.repository import InMemoryRepository
    return InMemoryRepository()


@pytest.fixture
def app(repository):
    """Flask test app backed by the in-memory repository."""
    from outlet_ops import create_app
    app = create_app(repository=repository)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def t0():
    """The fixed instant make_outlet() creates outlets at."""
    return T0
