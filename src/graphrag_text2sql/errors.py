"""
Errors
======

Exception types raised by graph stores and the retrieval engine.
"""

from typing import Optional

from graphrag_text2sql.models import RetrievalErrorKind


class StoreError(Exception):
    """A graph store query could not be completed."""


class StoreUnavailableError(StoreError):
    """The graph store is unreachable or rejected the query."""


class StoreTimeoutError(StoreError):
    """The graph store did not answer in time."""


class AugmentationError(Exception):
    """Keyword augmentation failed. Always recovered by the retriever."""


class RetrievalError(Exception):
    """Structured retrieval failure handed to the caller.

    Carries an error ``kind`` and the underlying ``cause``; formatting a
    user-facing message is left to the caller.
    """

    def __init__(
        self,
        kind: RetrievalErrorKind,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    @classmethod
    def from_store_error(cls, exc: StoreError, stage: str) -> "RetrievalError":
        kind = (
            RetrievalErrorKind.TIMEOUT
            if isinstance(exc, StoreTimeoutError)
            else RetrievalErrorKind.STORE_UNAVAILABLE
        )
        return cls(kind, f"{stage} failed: {exc}", cause=exc)

    def __repr__(self) -> str:
        return f"RetrievalError(kind={self.kind.value!r}, message={self.message!r})"
