from typing import Tuple

from pydantic import BaseModel, ConfigDict


class Signature(BaseModel):
    """A recorded attestation: who signed and when (microseconds since epoch)."""

    model_config = ConfigDict(frozen=True)

    signer: str
    timestamp: int


class Document(BaseModel):
    """Read-only snapshot of a document held by a store."""

    model_config = ConfigDict(frozen=True)

    id: int
    content_hash: str
    creator: str
    signers: Tuple[str, ...]
    signatures: Tuple[Signature, ...] = ()
    is_completed: bool = False

    @property
    def pending_signatures(self) -> int:
        return max(len(self.signers) - len(self.signatures), 0)
