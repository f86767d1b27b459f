"""
Elasticsearch document store adapter.

Provides connectivity probing, index bootstrap from the declarative schema
file, and PIT document add/update/delete over the Elasticsearch REST API.
Documents are addressed by hgid; an update is a delete followed by an add.

Dependencies: httpx, histograph.configs, histograph.core.exceptions
System role: Document/search index adapter
"""

import json
import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from histograph.boundary.docstore.document_schemas import (
    DocumentResponse,
    DocumentUpdateResult,
    UpdatePhase,
)
from histograph.boundary.docstore.projection import project_document
from histograph.configs.document_store import DocumentStoreSettings
from histograph.core.exceptions import (
    ConfigError,
    ConnectivityError,
    DocumentUpdateError,
    HistographError,
    ProtocolError,
    ValidationError,
)
from histograph.core.tokens import General, PITTokens

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    PIT document operations against one Elasticsearch index.

    The httpx client is owned by the caller and must have base_url set to the
    backend root. No state besides the client and settings is kept between
    calls, and nothing is retried here.

    Attributes:
        client: httpx client bound to the backend
        config: Index, document type, schema location and address settings
    """

    def __init__(self, client: httpx.Client, config: DocumentStoreSettings) -> None:
        """
        Initialize store over an HTTP client.

        Args:
            client: httpx.Client with base_url pointing at Elasticsearch
            config: Document store settings
        """
        self.client = client
        self.config = config

    # =========================================================================
    # Index management
    # =========================================================================

    def test_connection(self) -> None:
        """
        Probe the backend root endpoint.

        Raises:
            ConnectivityError: If the request fails or the backend answers
                with a non-success status
        """
        response = self._request("GET", "/", operation="status")
        if not response.is_success:
            raise ConnectivityError(
                "Could not connect to Elasticsearch",
                host=self.config.host,
                port=self.config.port,
                details={"status_code": response.status_code},
            )

    def create_index(self) -> None:
        """
        Create the index from the settings/mappings schema file.

        The file is sent verbatim as the PUT body.

        Raises:
            ConfigError: If the schema file cannot be read or is not JSON
            ConnectivityError: If the PUT request fails
        """
        mapping_file = self.config.mapping_file
        try:
            mapping = mapping_file.read_bytes()
        except OSError as e:
            raise ConfigError(
                "Unable to read Elasticsearch mapping and settings file",
                path=str(mapping_file),
                details={"error": str(e)},
            ) from e

        try:
            json.loads(mapping)
        except ValueError as e:
            raise ConfigError(
                "Elasticsearch mapping and settings file is not valid JSON",
                path=str(mapping_file),
                details={"error": str(e)},
            ) from e

        response = self._request(
            "PUT",
            self._index_path() + "/",
            operation="create_index",
            content=mapping,
            headers={"Content-Type": "application/json"},
        )
        if not response.is_success:
            raise ConnectivityError(
                "Unable to send PUT request to Elasticsearch",
                host=self.config.host,
                port=self.config.port,
                details={"status_code": response.status_code, "body": response.text},
            )

        logger.info(f"{__name__}:create_index - Created index {self.config.index}")

    def index_exists(self) -> bool:
        """
        Check whether the index exists by probing its mapping.

        Returns:
            bool: False for a 404 error response, True when the index name is
            a top-level key of the mapping response

        Raises:
            ProtocolError: If the response matches neither case
        """
        response = self._request("GET", self._index_path() + "/_mapping", operation="get_mapping")
        body = self._decode(response)

        if "error" in body and body.get("status") == 404:
            return False
        if self.config.index in body:
            return True

        raise ProtocolError(
            "Unexpected response received while trying to poll index",
            response=body,
        )

    # =========================================================================
    # Documents
    # =========================================================================

    def add_document(self, fields: Mapping[str, Any]) -> DocumentResponse:
        """
        Index a PIT document under its hgid.

        The raw "data" payload is never stored; only the allow-listed fields
        of the input are (see project_document). Re-adding an existing hgid
        overwrites the stored document.

        Args:
            fields: Field map of the PIT

        Returns:
            DocumentResponse: Backend status and body for caller inspection

        Raises:
            ValidationError: If hgid is missing or geometry is not JSON
            ConnectivityError: If the request fails
        """
        hgid = self._require_hgid(fields)
        document = project_document(
            {key: value for key, value in fields.items() if key != PITTokens.DATA.value}
        )

        response = self._request(
            "PUT",
            self._document_path(hgid),
            operation="index",
            json=document,
        )
        result = DocumentResponse(status_code=response.status_code, body=self._decode(response))

        logger.debug(
            f"{__name__}:add_document - Indexed {hgid}",
            extra={"hgid": hgid, "status_code": result.status_code},
        )
        return result

    def update_document(self, fields: Mapping[str, Any]) -> DocumentUpdateResult:
        """
        Replace a PIT document by deleting it and adding it again.

        Not atomic. A delete that finds no document is a normal first phase.
        Re-issuing the update after a failure in either phase is safe.

        Args:
            fields: Field map of the replacement PIT

        Returns:
            DocumentUpdateResult: Both sub-responses

        Raises:
            ValidationError: If hgid is missing (nothing was sent)
            DocumentUpdateError: phase "delete" if the old document could not
                be removed (document unchanged); phase "add" if it was removed
                but the replacement could not be stored (document now missing)
        """
        hgid = self._require_hgid(fields)

        try:
            delete_response = self.delete_document(fields)
        except HistographError as e:
            raise DocumentUpdateError(
                "Update failed while deleting the stored document",
                phase=UpdatePhase.DELETE.value,
                hgid=hgid,
                details={"error": str(e)},
            ) from e

        if not (delete_response.ok or delete_response.not_found):
            raise DocumentUpdateError(
                "Update failed while deleting the stored document",
                phase=UpdatePhase.DELETE.value,
                hgid=hgid,
                delete_response=delete_response,
                details={"status_code": delete_response.status_code},
            )

        try:
            add_response = self.add_document(fields)
        except HistographError as e:
            raise DocumentUpdateError(
                "Update deleted the stored document but could not add the replacement",
                phase=UpdatePhase.ADD.value,
                hgid=hgid,
                delete_response=delete_response,
                details={"error": str(e)},
            ) from e

        if not add_response.ok:
            raise DocumentUpdateError(
                "Update deleted the stored document but could not add the replacement",
                phase=UpdatePhase.ADD.value,
                hgid=hgid,
                delete_response=delete_response,
                add_response=add_response,
                details={"status_code": add_response.status_code},
            )

        return DocumentUpdateResult(delete_response=delete_response, add_response=add_response)

    def delete_document(self, fields: Mapping[str, Any]) -> DocumentResponse:
        """
        Delete the document stored under the field map's hgid.

        Returns:
            DocumentResponse: Backend status and body; status 404 when no
            document was stored under the hgid

        Raises:
            ValidationError: If hgid is missing
            ConnectivityError: If the request fails
        """
        hgid = self._require_hgid(fields)
        response = self._request("DELETE", self._document_path(hgid), operation="delete")
        return DocumentResponse(status_code=response.status_code, body=self._decode(response))

    def get_document(self, hgid: str) -> dict[str, Any] | None:
        """
        Fetch the stored document for an hgid.

        Returns:
            dict | None: The stored document, or None if there is none

        Raises:
            ProtocolError: If the backend answers with anything but a hit or 404
        """
        response = self._request("GET", self._document_path(hgid), operation="get")
        if response.status_code == 404:
            return None

        body = self._decode(response)
        if not response.is_success or "_source" not in body:
            raise ProtocolError(
                "Unexpected response received while fetching document",
                response=body,
                details={"hgid": hgid, "status_code": response.status_code},
            )
        return body["_source"]

    # =========================================================================
    # Internals
    # =========================================================================

    def _index_path(self) -> str:
        return "/" + quote(self.config.index, safe="")

    def _document_path(self, hgid: str) -> str:
        return "/".join(
            (
                self._index_path(),
                quote(self.config.doc_type, safe=""),
                quote(hgid, safe=""),
            )
        )

    @staticmethod
    def _require_hgid(fields: Mapping[str, Any]) -> str:
        hgid = fields.get(General.HGID.value)
        if not hgid:
            raise ValidationError("Field map carries no hgid", field=General.HGID.value)
        return str(hgid)

    def _request(self, method: str, path: str, operation: str, **kwargs: Any) -> httpx.Response:
        try:
            return self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            raise ConnectivityError(
                "Could not connect to Elasticsearch",
                host=self.config.host,
                port=self.config.port,
                details={"operation": operation, "error": str(e)},
            ) from e

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(
                "Backend response is not JSON",
                response=response.text,
                details={"status_code": response.status_code},
            ) from e
        if not isinstance(body, dict):
            raise ProtocolError("Backend response is not a JSON object", response=body)
        return body
