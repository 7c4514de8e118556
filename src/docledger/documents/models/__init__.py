from .document import Document, Signature
from .record import DocumentRecord, SignatureRecord

__all__ = ['Document', 'Signature', 'DocumentRecord', 'SignatureRecord']
