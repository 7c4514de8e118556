from .clock import Clock, SystemClock
from .document_store import DocumentStore, InMemoryDocumentStore
from .sql_document_store import SqlDocumentStore

__all__ = ['Clock', 'SystemClock', 'DocumentStore', 'InMemoryDocumentStore', 'SqlDocumentStore']
