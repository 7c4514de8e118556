from fastapi import APIRouter, Depends, HTTPException, status

from docledger.auth.dependencies import get_current_account
from docledger.dependencies import get_store
from docledger.documents.exceptions import (
    AlreadyCompletedError,
    DocumentNotFoundError,
    UnauthorizedSignerError,
)
from docledger.documents.models.schemas import SignDocumentResponse
from docledger.documents.services.document_store import DocumentStore

router = APIRouter(
    tags=["documents"]
)


@router.post("/{document_id}/sign", response_model=SignDocumentResponse)
def sign_document(
    document_id: int,
    account: str = Depends(get_current_account),
    store: DocumentStore = Depends(get_store)
):
    """
    Records a signature from the authenticated account.
    """
    try:
        document = store.record_signature(account, document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    except AlreadyCompletedError as e:
        raise HTTPException(status.HTTP_409_CONFLICT, str(e))
    except UnauthorizedSignerError as e:
        raise HTTPException(status.HTTP_403_FORBIDDEN, str(e))

    return SignDocumentResponse(
        message="Signature recorded",
        document_id=document_id,
        signer=account,
        is_completed=document.is_completed,
    )
