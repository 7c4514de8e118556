from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from docledger.database import Base


class DocumentRecord(Base):
    __tablename__ = "documents"

    # assigned by the store, not by the database
    id = Column(Integer, primary_key=True, autoincrement=False)
    creator = Column(String, nullable=False)
    content_hash = Column(String, nullable=False)
    signers = Column(JSON, nullable=False, default=list)
    is_completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    signatures = relationship(
        "SignatureRecord",
        back_populates="document",
        order_by="SignatureRecord.order",
        cascade="all, delete-orphan",
    )


class SignatureRecord(Base):
    __tablename__ = "signatures"

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False)
    signer = Column(String, nullable=False)
    ts = Column(BigInteger, nullable=False)
    order = Column(Integer, nullable=False)

    document = relationship("DocumentRecord", back_populates="signatures")
