from typing import List

from pydantic import BaseModel, Field


class CreateDocumentRequest(BaseModel):
    content_hash: str
    signers: List[str] = Field(default_factory=list)


class CreateDocumentResponse(BaseModel):
    message: str
    document_id: int


class SignDocumentResponse(BaseModel):
    message: str
    document_id: int
    signer: str
    is_completed: bool


class DocumentCountResponse(BaseModel):
    count: int
