from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from docledger.auth.dependencies import get_current_account
from docledger.dependencies import get_store
from docledger.documents.exceptions import DocumentNotFoundError
from docledger.documents.models.document import Document
from docledger.documents.models.schemas import (
    CreateDocumentRequest,
    CreateDocumentResponse,
    DocumentCountResponse,
)
from docledger.documents.services.document_store import DocumentStore

router = APIRouter(
    tags=["documents"]
)


@router.post(
    "",
    response_model=CreateDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a document and its required signers"
)
def create_document(
    payload: CreateDocumentRequest,
    account: str = Depends(get_current_account),
    store: DocumentStore = Depends(get_store)
):
    document_id = store.create(account, payload.content_hash, payload.signers)
    return CreateDocumentResponse(message="Document created", document_id=document_id)


@router.get("", response_model=List[Document], summary="List all documents")
def list_documents(store: DocumentStore = Depends(get_store)):
    return store.get_all()


# declared before /{document_id} so "count" is not parsed as an id
@router.get("/count", response_model=DocumentCountResponse, summary="Number of documents created")
def count_documents(store: DocumentStore = Depends(get_store)):
    return DocumentCountResponse(count=store.count())


@router.get("/{document_id}", response_model=Document, summary="Get one document")
def get_document(document_id: int, store: DocumentStore = Depends(get_store)):
    try:
        return store.get(document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
