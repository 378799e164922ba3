"""
Document store failure classifications.

Transport failures raised by a store adapter are passed through unchanged.
The one exception is a missing ordering/limiting capability (for example a
secondary index that has not been built yet): adapters signal it with
MissingIndexError and the access layer wraps it in QueryCapabilityError so
the caller gets an explanation without losing the original cause.
"""

from typing import Optional, Dict, Any


class StoreError(Exception):
    """Base class for document store collaborator failures."""

    def __init__(self, message: str, path: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.path = path
        self.context = context or {}
        self.recoverable = False


class MissingIndexError(StoreError):
    """Raised by a store adapter when a query needs an index it lacks."""


class QueryCapabilityError(StoreError):
    """An ordered or capped read failed because the store cannot serve it."""

    def __init__(self, message: str, path: Optional[str] = None,
                 operation: Optional[str] = None, **kwargs):
        super().__init__(message, path=path, **kwargs)
        self.operation = operation
