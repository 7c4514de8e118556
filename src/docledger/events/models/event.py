from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, Integer, String

from docledger.database import Base


class EventKind(str, PyEnum):
    CREATED = "CREATED"
    SIGNED = "SIGNED"


class EventRecord(Base):
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True)
    kind = Column(Enum(EventKind), nullable=False)
    document_id = Column(Integer, nullable=False, index=True)
    # creator for CREATED, signer for SIGNED
    account = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
