from .event_sink import EventSink, InMemoryEventSink, SqlEventSink

__all__ = ['EventSink', 'InMemoryEventSink', 'SqlEventSink']
