import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from docledger.events.models.event import EventKind, EventRecord
from docledger.events.models.schemas import LedgerEvent
from docledger.events.repositories.event_repository import EventRepository

logger = logging.getLogger(__name__)


class EventSink(ABC):
    """Receives ledger events from a document store.

    Stores call these synchronously on the success path of ``create`` and
    ``sign``; how events are kept or forwarded is up to the implementation.
    """

    @abstractmethod
    def record_creation(self, document_id: int, creator: str) -> None:
        ...

    @abstractmethod
    def record_signing(self, document_id: int, signer: str) -> None:
        ...

    @abstractmethod
    def list_events(self, document_id: Optional[int] = None) -> List[LedgerEvent]:
        """Events in recording order, optionally for one document. Not used by stores."""


class InMemoryEventSink(EventSink):
    """Keeps events in a list. Also used as the recording double in tests."""

    def __init__(self):
        self._events: List[LedgerEvent] = []
        self._lock = threading.Lock()

    def record_creation(self, document_id: int, creator: str) -> None:
        self._append(EventKind.CREATED, document_id, creator)

    def record_signing(self, document_id: int, signer: str) -> None:
        self._append(EventKind.SIGNED, document_id, signer)

    def _append(self, kind: EventKind, document_id: int, account: str) -> None:
        event = LedgerEvent(
            kind=kind,
            document_id=document_id,
            account=account,
            created_at=datetime.utcnow(),
        )
        with self._lock:
            self._events.append(event)

    def list_events(self, document_id: Optional[int] = None) -> List[LedgerEvent]:
        with self._lock:
            events = list(self._events)
        if document_id is None:
            return events
        return [e for e in events if e.document_id == document_id]


class SqlEventSink(EventSink):
    """Persists events in the ``events`` table, one short session per event."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def record_creation(self, document_id: int, creator: str) -> None:
        self._save(EventKind.CREATED, document_id, creator)

    def record_signing(self, document_id: int, signer: str) -> None:
        self._save(EventKind.SIGNED, document_id, signer)

    def _save(self, kind: EventKind, document_id: int, account: str) -> None:
        with self._session_factory() as session:
            event = EventRepository(session).save(
                EventRecord(kind=kind, document_id=document_id, account=account)
            )
            logger.debug("Stored %s event %s for document %s", kind.value, event.id, document_id)

    def list_events(self, document_id: Optional[int] = None) -> List[LedgerEvent]:
        with self._session_factory() as session:
            records = EventRepository(session).find_all(document_id)
            return [LedgerEvent.model_validate(r) for r in records]
