import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from docledger.documents.exceptions import (
    AlreadyCompletedError,
    DocumentError,
    DocumentNotFoundError,
    UnauthorizedSignerError,
)
from docledger.documents.models.document import Document, Signature
from docledger.documents.services.clock import Clock, SystemClock
from docledger.events.services.event_sink import EventSink

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Authoritative collection of documents and the counter that numbers them.

    Every public operation runs under one re-entrant lock, so the
    check-then-act sequence of ``sign`` is atomic with respect to any other
    call on the same store and readers never see a half-applied signature.

    Documents are numbered 0, 1, 2, ... in creation order and are never
    removed. A document is completed the first time its number of recorded
    signatures reaches its number of required signers; completion is only
    evaluated inside ``sign``, so a document created with no signers stays
    incomplete.

    The new signature and the completion flag are stored together before the
    event sink is called. A failing sink is reported to the caller but leaves
    the document consistent.

    Only the number of signatures is compared, not the set of distinct
    signers: a listed signer may sign more than once while the document is
    still open, and a signer listed twice may fill both slots.
    """

    def __init__(self, events: EventSink, clock: Optional[Clock] = None):
        self.events = events
        self.clock = clock or SystemClock()
        self._lock = threading.RLock()

    def create(self, creator: str, content_hash: str, signers: Sequence[str]) -> int:
        """Register a document and return its id. Emits a creation event."""
        signers = tuple(signers)
        with self._lock:
            document_id = self._insert(creator, content_hash, signers)
            self.events.record_creation(document_id, creator)

        logger.info("Document %s created by %r with %d required signers",
                    document_id, creator, len(signers))
        return document_id

    def sign(self, signer: str, document_id: int) -> None:
        """Record a signature from ``signer``. Emits a signing event.

        Raises:
            DocumentNotFoundError: no document with that id
            AlreadyCompletedError: the document already has all its signatures
            UnauthorizedSignerError: ``signer`` is not among the required signers
        """
        self.record_signature(signer, document_id)

    def record_signature(self, signer: str, document_id: int) -> Document:
        """Same as ``sign``, returning the document as this signature left it."""
        with self._lock:
            try:
                document = self._append_signature(signer, document_id)
            except DocumentError as e:
                logger.warning("Signature from %r rejected: %s", signer, e)
                raise
            self.events.record_signing(document_id, signer)

        logger.info("Document %s signed by %r (%d pending)",
                    document_id, signer, document.pending_signatures)
        if document.is_completed:
            logger.info("Document %s completed", document_id)
        return document

    @abstractmethod
    def _insert(self, creator: str, content_hash: str, signers: Sequence[str]) -> int:
        """Store a new document under the next id and return that id."""

    @abstractmethod
    def _append_signature(self, signer: str, document_id: int) -> Document:
        """Validate, then store the signature and completion flag in one step."""

    @abstractmethod
    def get(self, document_id: int) -> Document:
        """Snapshot of one document; raises DocumentNotFoundError."""

    @abstractmethod
    def get_all(self) -> List[Document]:
        """Snapshots of every document in ascending id order."""

    @abstractmethod
    def count(self) -> int:
        """Number of documents ever created."""

    @staticmethod
    def check_can_sign(document_id: int, document: Optional[Document], signer: str) -> Document:
        """Validate a signing attempt in order: existence, completion, membership."""
        if document is None:
            raise DocumentNotFoundError(document_id)
        if document.is_completed:
            raise AlreadyCompletedError(document_id)
        if signer not in document.signers:
            raise UnauthorizedSignerError(document_id, signer)
        return document

    @staticmethod
    def is_fully_signed(signature_count: int, signer_count: int) -> bool:
        return signature_count == signer_count


class InMemoryDocumentStore(DocumentStore):
    """Process-local store.

    Stored values are frozen snapshots replaced wholesale on each change, so
    reads can hand them out directly without copying.
    """

    def __init__(self, events: EventSink, clock: Optional[Clock] = None):
        super().__init__(events, clock)
        self._documents: Dict[int, Document] = {}
        self._next_id = 0

    def _insert(self, creator: str, content_hash: str, signers: Sequence[str]) -> int:
        document_id = self._next_id
        self._documents[document_id] = Document(
            id=document_id,
            content_hash=content_hash,
            creator=creator,
            signers=tuple(signers),
        )
        self._next_id += 1
        return document_id

    def _append_signature(self, signer: str, document_id: int) -> Document:
        document = self.check_can_sign(document_id, self._documents.get(document_id), signer)

        signatures = document.signatures + (Signature(signer=signer, timestamp=self.clock.now()),)
        document = document.model_copy(update={
            "signatures": signatures,
            "is_completed": self.is_fully_signed(len(signatures), len(document.signers)),
        })
        self._documents[document_id] = document
        return document

    def get(self, document_id: int) -> Document:
        with self._lock:
            document = self._documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def get_all(self) -> List[Document]:
        with self._lock:
            return [self._documents[i] for i in range(self._next_id) if i in self._documents]

    def count(self) -> int:
        with self._lock:
            return self._next_id
