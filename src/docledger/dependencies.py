from fastapi import Request

from docledger.documents.services.document_store import DocumentStore
from docledger.events.services.event_sink import EventSink


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_event_sink(request: Request) -> EventSink:
    return request.app.state.events
