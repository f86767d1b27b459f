"""
Document store connection management.

Provides the httpx client for the Elasticsearch REST API and a
DocumentStore bound to it.

Dependencies: httpx, histograph.configs
System role: Document backend connection lifecycle management
"""

import httpx

from histograph.boundary.docstore.document_store import DocumentStore
from histograph.configs import get_settings
from histograph.configs.document_store import DocumentStoreSettings


def get_document_client(config: DocumentStoreSettings | None = None) -> httpx.Client:
    """
    Create an httpx client for the configured Elasticsearch node.

    The caller owns the client and must close it (or use it as a context
    manager).

    Args:
        config: Document store settings (None reads them from get_settings())

    Returns:
        httpx.Client: Client with base_url and timeout from settings
    """
    config = config or get_settings().document_store
    return httpx.Client(
        base_url=config.base_url,
        timeout=config.timeout,
        headers={"Accept": "application/json"},
    )


def get_document_store(client: httpx.Client | None = None) -> DocumentStore:
    """
    Build a DocumentStore over the given client or a new configured one.

    Args:
        client: Existing client to reuse (None creates one from settings)

    Returns:
        DocumentStore: Adapter bound to the client
    """
    config = get_settings().document_store
    return DocumentStore(client if client is not None else get_document_client(config), config)
