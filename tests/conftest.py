"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite engine, relational store, in-process fake
Elasticsearch backend served through httpx.MockTransport, document store
Dependencies: pytest, sqlalchemy, httpx
System role: Test infrastructure and fixture management
"""

import json
from pathlib import Path
from urllib.parse import unquote

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from histograph.boundary.db.relational_store import RelationalStore
from histograph.boundary.docstore.document_store import DocumentStore
from histograph.configs.document_store import DocumentStoreSettings
from histograph.configs.router import RouterSettings

REPO_SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"


class FakeElasticsearch:
    """
    Minimal in-memory Elasticsearch REST backend.

    Understands the root status call, index creation, mapping retrieval and
    single-document PUT/GET/DELETE. fail_next() makes the next request with
    the given method answer with a 500 error.
    """

    def __init__(self) -> None:
        self.indices: dict[str, dict] = {}
        self.documents: dict[str, dict[str, dict]] = {}
        self.requests: list[httpx.Request] = []
        self._failures: list[str] = []

    def fail_next(self, method: str) -> None:
        self._failures.append(method)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method in self._failures:
            self._failures.remove(request.method)
            return httpx.Response(500, json={"error": "injected failure", "status": 500})

        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        parts = [unquote(part) for part in raw_path.split("/") if part]

        if not parts and request.method == "GET":
            return httpx.Response(200, json={"cluster_name": "fake", "tagline": "You Know, for Search"})

        index = parts[0]

        if len(parts) == 1 and request.method == "PUT":
            if index in self.indices:
                return httpx.Response(
                    400,
                    json={"error": {"type": "resource_already_exists_exception"}, "status": 400},
                )
            self.indices[index] = json.loads(request.content)
            self.documents.setdefault(index, {})
            return httpx.Response(200, json={"acknowledged": True, "index": index})

        if len(parts) == 2 and parts[1] == "_mapping" and request.method == "GET":
            if index not in self.indices:
                return httpx.Response(
                    404,
                    json={"error": {"type": "index_not_found_exception"}, "status": 404},
                )
            return httpx.Response(200, json={index: {"mappings": self.indices[index].get("mappings", {})}})

        if len(parts) == 3:
            doc_id = parts[2]
            docs = self.documents.setdefault(index, {})
            if request.method == "PUT":
                created = doc_id not in docs
                docs[doc_id] = json.loads(request.content)
                return httpx.Response(
                    201 if created else 200,
                    json={"_index": index, "_id": doc_id, "result": "created" if created else "updated"},
                )
            if request.method == "GET":
                if doc_id not in docs:
                    return httpx.Response(404, json={"_index": index, "_id": doc_id, "found": False})
                return httpx.Response(
                    200,
                    json={"_index": index, "_id": doc_id, "found": True, "_source": docs[doc_id]},
                )
            if request.method == "DELETE":
                if docs.pop(doc_id, None) is None:
                    return httpx.Response(404, json={"_index": index, "_id": doc_id, "result": "not_found"})
                return httpx.Response(200, json={"_index": index, "_id": doc_id, "result": "deleted"})

        return httpx.Response(400, json={"error": "unsupported request", "status": 400})


@pytest.fixture
def engine():
    """
    Create in-memory SQLite engine shared by every connection checkout.

    Yields:
        Engine: SQLite engine backed by a single static connection
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def executed_statements(engine) -> list[str]:
    """Record the SQL text of every statement sent to the engine."""
    statements: list[str] = []

    @event.listens_for(engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    return statements


@pytest.fixture
def relational_store(engine) -> RelationalStore:
    """Provide RelationalStore over the in-memory engine."""
    return RelationalStore(engine)


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    """Provide an empty fake Elasticsearch backend."""
    return FakeElasticsearch()


@pytest.fixture
def document_settings() -> DocumentStoreSettings:
    """Provide document store settings pointing at the repository schema directory."""
    return DocumentStoreSettings(
        host="localhost",
        port=9200,
        index="histograph",
        doc_type="_doc",
        schema_dir=REPO_SCHEMA_DIR,
    )


@pytest.fixture
def es_client(fake_es: FakeElasticsearch, document_settings: DocumentStoreSettings):
    """
    Create httpx client routed to the fake backend.

    Yields:
        httpx.Client: Client with base_url set like a real deployment
    """
    client = httpx.Client(
        transport=httpx.MockTransport(fake_es.handler),
        base_url=document_settings.base_url,
    )
    yield client
    client.close()


@pytest.fixture
def document_store(es_client: httpx.Client, document_settings: DocumentStoreSettings) -> DocumentStore:
    """Provide DocumentStore over the fake backend."""
    return DocumentStore(es_client, document_settings)


@pytest.fixture
def router_settings() -> RouterSettings:
    """Provide default bookkeeping table names."""
    return RouterSettings(
        pit_table="pits",
        relation_table="relations",
        rejected_relation_table="rejected_relations",
    )
