from datetime import datetime

from pydantic import BaseModel, ConfigDict

from docledger.events.models.event import EventKind


class LedgerEvent(BaseModel):
    kind: EventKind
    document_id: int
    account: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)
