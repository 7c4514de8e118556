class DocumentError(Exception):
    """Base class for document store failures"""
    pass


class DocumentNotFoundError(DocumentError):
    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document {document_id} not found")


class AlreadyCompletedError(DocumentError):
    def __init__(self, document_id: int):
        self.document_id = document_id
        super().__init__(f"Document {document_id} is already completed")


class UnauthorizedSignerError(DocumentError):
    def __init__(self, document_id: int, signer: str):
        self.document_id = document_id
        self.signer = signer
        super().__init__(f"'{signer}' is not a required signer of document {document_id}")
