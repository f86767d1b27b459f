"""
Document store boundary layer.

Provides the Elasticsearch adapter used to index PIT documents.
- DocumentStore: Index bootstrap and PIT document add/update/delete
- project_document: Allow-list projection of field maps into documents

Dependencies: httpx
System role: Document/search index adapter
"""

from histograph.boundary.docstore.connection import get_document_client, get_document_store
from histograph.boundary.docstore.document_schemas import (
    DocumentResponse,
    DocumentUpdateResult,
    UpdatePhase,
)
from histograph.boundary.docstore.document_store import DocumentStore
from histograph.boundary.docstore.projection import project_document

__all__ = [
    "DocumentStore",
    "DocumentResponse",
    "DocumentUpdateResult",
    "UpdatePhase",
    "project_document",
    "get_document_client",
    "get_document_store",
]
