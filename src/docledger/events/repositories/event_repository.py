from typing import List, Optional

from sqlalchemy.orm import Session

from docledger.events.models.event import EventRecord


class EventRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def save(self, event: EventRecord) -> EventRecord:
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def find_all(self, document_id: Optional[int] = None) -> List[EventRecord]:
        query = self.db.query(EventRecord)
        if document_id is not None:
            query = query.filter(EventRecord.document_id == document_id)
        return query.order_by(EventRecord.id).all()
