from .event import EventKind, EventRecord
from .schemas import LedgerEvent

__all__ = ['EventKind', 'EventRecord', 'LedgerEvent']
