from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from docledger.dependencies import get_event_sink, get_store
from docledger.documents.exceptions import DocumentNotFoundError
from docledger.documents.services.document_store import DocumentStore
from docledger.events.models.schemas import LedgerEvent
from docledger.events.services.event_sink import EventSink

router = APIRouter()


@router.get(
    "/events",
    response_model=List[LedgerEvent],
    summary="All ledger events in the order they were recorded"
)
def list_events(events: EventSink = Depends(get_event_sink)):
    return events.list_events()


@router.get(
    "/documents/{document_id}/events",
    response_model=List[LedgerEvent],
    summary="History of one document"
)
def list_document_events(
    document_id: int,
    events: EventSink = Depends(get_event_sink),
    store: DocumentStore = Depends(get_store)
):
    try:
        store.get(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return events.list_events(document_id)
