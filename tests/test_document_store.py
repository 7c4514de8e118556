import threading

import pytest
from pydantic import ValidationError

from docledger.documents.exceptions import (
    AlreadyCompletedError,
    DocumentError,
    DocumentNotFoundError,
    UnauthorizedSignerError,
)
from docledger.documents.services import SqlDocumentStore
from docledger.events.models.event import EventKind
from docledger.events.services import EventSink, InMemoryEventSink

from conftest import START_TS

HASH = "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


def event_log(events, document_id=None):
    return [(e.kind, e.document_id, e.account) for e in events.list_events(document_id)]


def test_ids_are_sequential_from_zero(store):
    ids = [store.create("alice", f"hash-{i}", ["bob"]) for i in range(5)]
    assert ids == [0, 1, 2, 3, 4]
    assert store.count() == 5


def test_get_after_create_returns_what_was_stored(store):
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    doc = store.get(doc_id)
    assert doc.id == doc_id
    assert doc.creator == "alice"
    assert doc.content_hash == HASH
    assert doc.signers == ("bob", "carol")
    assert doc.signatures == ()
    assert doc.is_completed is False


def test_create_accepts_any_content_hash(store):
    doc_id = store.create("alice", "", ["bob"])
    assert store.get(doc_id).content_hash == ""


def test_create_emits_creation_event(store, events):
    doc_id = store.create("alice", HASH, ["bob"])
    assert event_log(events) == [(EventKind.CREATED, doc_id, "alice")]


def test_sign_by_outsider_is_rejected_without_changes(store, events):
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    with pytest.raises(UnauthorizedSignerError) as exc:
        store.sign("mallory", doc_id)
    assert exc.value.signer == "mallory"
    assert exc.value.document_id == doc_id
    assert store.get(doc_id).signatures == ()
    assert event_log(events) == [(EventKind.CREATED, doc_id, "alice")]


def test_creator_is_not_implicitly_a_signer(store):
    doc_id = store.create("alice", HASH, ["bob"])
    with pytest.raises(UnauthorizedSignerError):
        store.sign("alice", doc_id)


def test_document_completes_when_all_signers_have_signed(store, events):
    doc_id = store.create("alice", HASH, ["bob", "carol"])

    store.sign("bob", doc_id)
    doc = store.get(doc_id)
    assert doc.is_completed is False
    assert len(doc.signatures) == 1
    assert doc.pending_signatures == 1

    store.sign("carol", doc_id)
    doc = store.get(doc_id)
    assert doc.is_completed is True
    assert [s.signer for s in doc.signatures] == ["bob", "carol"]
    assert event_log(events, doc_id) == [
        (EventKind.CREATED, doc_id, "alice"),
        (EventKind.SIGNED, doc_id, "bob"),
        (EventKind.SIGNED, doc_id, "carol"),
    ]


def test_signatures_are_stamped_by_the_clock(store):
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    store.sign("bob", doc_id)
    store.sign("carol", doc_id)
    stamps = [s.timestamp for s in store.get(doc_id).signatures]
    assert stamps == [START_TS + 1, START_TS + 2]


def test_completed_document_rejects_further_signatures(store):
    doc_id = store.create("alice", HASH, ["bob"])
    store.sign("bob", doc_id)

    with pytest.raises(AlreadyCompletedError):
        store.sign("bob", doc_id)
    # completion is checked before membership
    with pytest.raises(AlreadyCompletedError):
        store.sign("mallory", doc_id)
    assert len(store.get(doc_id).signatures) == 1


def test_document_without_signers_never_completes(store):
    doc_id = store.create("alice", HASH, [])
    assert store.get(doc_id).is_completed is False
    with pytest.raises(UnauthorizedSignerError):
        store.sign("alice", doc_id)
    assert store.get(doc_id).is_completed is False


def test_unknown_document(store):
    with pytest.raises(DocumentNotFoundError) as exc:
        store.get(42)
    assert exc.value.document_id == 42
    with pytest.raises(DocumentNotFoundError):
        store.sign("bob", 42)


def test_store_errors_share_a_base_class():
    for error in (DocumentNotFoundError(1), AlreadyCompletedError(1), UnauthorizedSignerError(1, "x")):
        assert isinstance(error, DocumentError)


def test_get_all_lists_documents_in_id_order(store):
    for i in range(5):
        store.create(f"creator-{i}", f"hash-{i}", ["bob"])
    store.sign("bob", 3)

    docs = store.get_all()
    assert [d.id for d in docs] == [0, 1, 2, 3, 4]
    assert [d.creator for d in docs] == [f"creator-{i}" for i in range(5)]
    assert [d.is_completed for d in docs] == [False, False, False, True, False]
    assert store.count() == 5


def test_empty_store(store):
    assert store.get_all() == []
    assert store.count() == 0


def test_count_includes_completed_documents(store):
    first = store.create("alice", HASH, ["bob"])
    store.create("alice", HASH, ["bob"])
    store.sign("bob", first)
    assert store.count() == 2


def test_snapshots_cannot_be_used_to_mutate_the_store(store):
    doc_id = store.create("alice", HASH, ["bob"])
    doc = store.get(doc_id)

    with pytest.raises(ValidationError):
        doc.is_completed = True
    with pytest.raises(AttributeError):
        doc.signers.append("mallory")

    store.sign("bob", doc_id)
    # an earlier snapshot does not follow later changes
    assert doc.signatures == ()
    assert store.get(doc_id).is_completed is True


def test_signers_are_copied_at_creation(store):
    signers = ["bob"]
    doc_id = store.create("alice", HASH, signers)
    signers.append("mallory")
    assert store.get(doc_id).signers == ("bob",)


def test_listed_signer_may_sign_again_before_completion(store):
    # completion compares counts only, so a repeat signature fills a slot
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    store.sign("bob", doc_id)
    store.sign("bob", doc_id)

    doc = store.get(doc_id)
    assert [s.signer for s in doc.signatures] == ["bob", "bob"]
    assert doc.is_completed is True
    with pytest.raises(AlreadyCompletedError):
        store.sign("carol", doc_id)


def test_duplicated_signer_fills_every_slot(store):
    doc_id = store.create("alice", HASH, ["bob", "bob"])
    store.sign("bob", doc_id)
    assert store.get(doc_id).is_completed is False
    store.sign("bob", doc_id)
    assert store.get(doc_id).is_completed is True


def test_concurrent_signers_are_all_recorded(store):
    signers = [f"signer-{i}" for i in range(8)]
    doc_id = store.create("alice", HASH, signers)
    barrier = threading.Barrier(len(signers))
    errors = []

    def sign(name):
        barrier.wait()
        try:
            store.sign(name, doc_id)
        except DocumentError as e:
            errors.append(e)

    threads = [threading.Thread(target=sign, args=(name,)) for name in signers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    doc = store.get(doc_id)
    assert errors == []
    assert sorted(s.signer for s in doc.signatures) == sorted(signers)
    assert doc.is_completed is True


def test_concurrent_creates_get_distinct_ids(store):
    results = []
    lock = threading.Lock()

    def create(i):
        doc_id = store.create(f"creator-{i}", HASH, ["bob"])
        with lock:
            results.append(doc_id)

    threads = [threading.Thread(target=create, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == list(range(10))
    assert store.count() == 10
    assert [d.id for d in store.get_all()] == list(range(10))


class BrokenSink(EventSink):
    """Passes events through, except for the kinds told to fail."""

    def __init__(self, inner, fail_creation=False, fail_signing=False):
        self.inner = inner
        self.fail_creation = fail_creation
        self.fail_signing = fail_signing

    def record_creation(self, document_id, creator):
        if self.fail_creation:
            raise RuntimeError("event log unavailable")
        self.inner.record_creation(document_id, creator)

    def record_signing(self, document_id, signer):
        if self.fail_signing:
            raise RuntimeError("event log unavailable")
        self.inner.record_signing(document_id, signer)

    def list_events(self, document_id=None):
        return self.inner.list_events(document_id)


def test_failed_signing_event_still_completes_document(store):
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    store.sign("bob", doc_id)
    store.events = BrokenSink(store.events, fail_signing=True)

    with pytest.raises(RuntimeError):
        store.sign("carol", doc_id)

    doc = store.get(doc_id)
    assert [s.signer for s in doc.signatures] == ["bob", "carol"]
    assert doc.is_completed is True
    with pytest.raises(AlreadyCompletedError):
        store.sign("bob", doc_id)
    assert len(store.get(doc_id).signatures) <= len(doc.signers)


def test_failed_signing_event_before_last_signature(store):
    doc_id = store.create("alice", HASH, ["bob", "carol"])
    sink = BrokenSink(store.events, fail_signing=True)
    store.events = sink

    with pytest.raises(RuntimeError):
        store.sign("bob", doc_id)
    doc = store.get(doc_id)
    assert len(doc.signatures) == 1
    assert doc.is_completed is False

    sink.fail_signing = False
    store.sign("carol", doc_id)
    doc = store.get(doc_id)
    assert len(doc.signatures) == 2
    assert doc.is_completed is True


def test_failed_creation_event_keeps_id_sequence(store):
    sink = BrokenSink(store.events, fail_creation=True)
    store.events = sink

    with pytest.raises(RuntimeError):
        store.create("alice", HASH, ["bob"])
    assert store.count() == 1
    assert store.get(0).creator == "alice"

    sink.fail_creation = False
    assert store.create("alice", HASH, ["bob"]) == 1
    assert store.count() == 2


def test_record_signature_returns_document_after_that_signature(store):
    doc_id = store.create("alice", HASH, ["bob", "carol"])

    first = store.record_signature("bob", doc_id)
    assert [s.signer for s in first.signatures] == ["bob"]
    assert first.is_completed is False

    second = store.record_signature("carol", doc_id)
    assert second.is_completed is True
    assert second == store.get(doc_id)


def test_new_sql_store_continues_id_sequence(session_factory, clock):
    first = SqlDocumentStore(session_factory, InMemoryEventSink(), clock)
    for i in range(3):
        first.create("alice", f"hash-{i}", ["bob"])
    first.sign("bob", 1)

    reopened = SqlDocumentStore(session_factory, InMemoryEventSink(), clock)
    assert reopened.count() == 3
    assert reopened.create("carol", HASH, ["dave"]) == 3
    assert reopened.get(1).is_completed is True
    assert [d.id for d in reopened.get_all()] == [0, 1, 2, 3]
