import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from docledger.create_tables import create_tables
from docledger.database import Base, build_session_factory
from docledger.documents.services import Clock, InMemoryDocumentStore, SqlDocumentStore
from docledger.events.services import InMemoryEventSink, SqlEventSink

START_TS = 1_700_000_000_000_000


class ManualClock(Clock):
    """Advances one microsecond per reading."""

    def __init__(self, start: int = START_TS):
        self.current = start

    def now(self) -> int:
        self.current += 1
        return self.current


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def engine():
    # one shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture(params=["memory", "sql"])
def backend(request, clock):
    """(store, events) for each store implementation."""
    if request.param == "memory":
        events = InMemoryEventSink()
        return InMemoryDocumentStore(events, clock), events

    session_factory = request.getfixturevalue("session_factory")
    events = SqlEventSink(session_factory)
    return SqlDocumentStore(session_factory, events, clock), events


@pytest.fixture
def store(backend):
    return backend[0]


@pytest.fixture
def events(backend):
    return backend[1]
