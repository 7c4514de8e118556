from typing import Callable, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from docledger.documents.exceptions import DocumentNotFoundError
from docledger.documents.models.document import Document, Signature
from docledger.documents.models.record import DocumentRecord, SignatureRecord
from docledger.documents.services.clock import Clock
from docledger.documents.services.document_store import DocumentStore
from docledger.events.services.event_sink import EventSink


class SqlDocumentStore(DocumentStore):
    """Durable store on top of the ``documents`` and ``signatures`` tables.

    Ids come from the row count rather than the database sequence so that
    numbering starts at 0; this holds because documents are never deleted.
    The store lock serializes writers within the process; a single process
    is expected to own the database.
    """

    def __init__(self, session_factory: Callable[[], Session], events: EventSink,
                 clock: Optional[Clock] = None):
        super().__init__(events, clock)
        self._session_factory = session_factory

    @staticmethod
    def _to_document(record: DocumentRecord) -> Document:
        return Document(
            id=record.id,
            content_hash=record.content_hash,
            creator=record.creator,
            signers=tuple(record.signers),
            signatures=tuple(Signature(signer=s.signer, timestamp=s.ts) for s in record.signatures),
            is_completed=record.is_completed,
        )

    def _load(self, session: Session, document_id: int) -> Optional[DocumentRecord]:
        return (
            session.query(DocumentRecord)
            .options(selectinload(DocumentRecord.signatures))
            .filter(DocumentRecord.id == document_id)
            .first()
        )

    def _insert(self, creator: str, content_hash: str, signers: Sequence[str]) -> int:
        with self._session_factory() as session:
            document_id = session.query(func.count(DocumentRecord.id)).scalar()
            session.add(DocumentRecord(
                id=document_id,
                creator=creator,
                content_hash=content_hash,
                signers=list(signers),
                is_completed=False,
            ))
            session.commit()
        return document_id

    def _append_signature(self, signer: str, document_id: int) -> Document:
        with self._session_factory() as session:
            record = self._load(session, document_id)
            document = self.check_can_sign(
                document_id, self._to_document(record) if record else None, signer
            )

            record.signatures.append(SignatureRecord(
                signer=signer,
                ts=self.clock.now(),
                order=len(document.signatures) + 1,
            ))
            session.flush()
            record.is_completed = self.is_fully_signed(len(record.signatures), len(record.signers))
            # signature row and completion flag land in the same transaction
            session.commit()
            return self._to_document(record)

    def get(self, document_id: int) -> Document:
        with self._lock, self._session_factory() as session:
            record = self._load(session, document_id)
            if record is None:
                raise DocumentNotFoundError(document_id)
            return self._to_document(record)

    def get_all(self) -> List[Document]:
        with self._lock, self._session_factory() as session:
            records = (
                session.query(DocumentRecord)
                .options(selectinload(DocumentRecord.signatures))
                .order_by(DocumentRecord.id)
                .all()
            )
            return [self._to_document(r) for r in records]

    def count(self) -> int:
        with self._lock, self._session_factory() as session:
            return session.query(func.count(DocumentRecord.id)).scalar()
