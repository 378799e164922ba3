"""
Document store collaborator: the read-only port and adapters implementing it.
"""

from .base import DocumentSnapshot, DocumentStore
from .memory import InMemoryDocumentStore

__all__ = ["DocumentSnapshot", "DocumentStore", "InMemoryDocumentStore"]
