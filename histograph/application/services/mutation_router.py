"""
Mutation router service.

Dispatches one translated mutation record to the storage adapters named by
its target. PITs and relations are kept as bookkeeping rows in the relational
store; PITs are additionally indexed as documents. The two backends are
written one after the other with no cross-backend transaction: if the second
write fails the first is not undone, and the caller decides whether to retry.

Dependencies: histograph.boundary.db, histograph.boundary.docstore, histograph.configs
System role: Caller-side control flow over both storage adapters
"""

import logging
from typing import Any, Mapping

from pydantic import BaseModel, Field

from histograph.boundary.db.relational_store import RelationalStore
from histograph.boundary.db.row_shapes import KeyedRow
from histograph.boundary.docstore.document_schemas import DocumentResponse, DocumentUpdateResult
from histograph.boundary.docstore.document_store import DocumentStore
from histograph.configs.router import RouterSettings
from histograph.core.exceptions import ValidationError
from histograph.core.tokens import Actions, General, RelationTokens, Targets, Types
from histograph.observability.log_utils import log_record

logger = logging.getLogger(__name__)

PIT_COLUMNS: tuple[tuple[str, str], ...] = (
    (General.HGID.value, "text primary key"),
    (General.SOURCEID.value, "text"),
    (General.TYPE.value, "text"),
    (General.NAME.value, "text"),
)

RELATION_COLUMNS: tuple[tuple[str, str], ...] = (
    (General.HGID.value, "text primary key"),
    (RelationTokens.FROM.value, "text"),
    (RelationTokens.TO.value, "text"),
    (RelationTokens.LABEL.value, "text"),
)

REJECTED_RELATION_COLUMNS: tuple[tuple[str, str], ...] = (
    (General.HGID.value, "text"),
    (RelationTokens.FROM.value, "text"),
    (RelationTokens.TO.value, "text"),
    (RelationTokens.LABEL.value, "text"),
    (RelationTokens.FROM_IDENTIFYING_METHOD.value, "text"),
    (RelationTokens.TO_IDENTIFYING_METHOD.value, "text"),
    (RelationTokens.REJECTION_CAUSE.value, "text"),
    (RelationTokens.REJECTION_CAUSE_ID_METHOD.value, "text"),
)


class RouteResult(BaseModel):
    """What a routed record did on each backend."""

    hgid: str = Field(description="Identifier of the routed record")
    action: Actions = Field(description="Mutation kind")
    target: Targets = Field(description="Backends the record was routed to")
    table: str | None = Field(default=None, description="Relational table written, if any")
    rows_deleted: int | None = Field(
        default=None,
        description="Rows removed by a relational delete",
    )
    document_response: DocumentResponse | None = Field(
        default=None,
        description="Backend response to a document add or delete",
    )
    document_update: DocumentUpdateResult | None = Field(
        default=None,
        description="Both sub-responses of a document update",
    )


def _parse_token(enum_cls, fields: Mapping[str, Any], token: General):
    value = fields.get(token.value)
    try:
        return enum_cls(value)
    except ValueError as e:
        raise ValidationError(f"Unknown {token.value} token: {value!r}", field=token.value) from e


class MutationRouter:
    """
    Routes mutation records to the relational and document adapters.

    Holds the two adapters and the bookkeeping table names. Errors from either
    adapter propagate unchanged; nothing is retried.
    """

    def __init__(
        self,
        relational_store: RelationalStore,
        document_store: DocumentStore,
        config: RouterSettings | None = None,
    ) -> None:
        """
        Initialize router.

        Args:
            relational_store: Adapter for the bookkeeping tables
            document_store: Adapter for the PIT index
            config: Table names (defaults read from the environment)
        """
        self.relational_store = relational_store
        self.document_store = document_store
        self.config = config or RouterSettings()

    def ensure_schema(self) -> None:
        """
        Create missing bookkeeping tables and the document index.

        hgid is the primary key of the PIT and relation tables, so the backend
        indexes it there. Rejected relations may repeat an hgid; that table
        gets a separate non-unique hgid index.
        """
        tables = (
            (self.config.pit_table, PIT_COLUMNS),
            (self.config.relation_table, RELATION_COLUMNS),
            (self.config.rejected_relation_table, REJECTED_RELATION_COLUMNS),
        )
        for table_name, columns in tables:
            if not self.relational_store.table_exists(table_name):
                flat = [token for pair in columns for token in pair]
                self.relational_store.create_table(table_name, *flat)

        rejected = self.config.rejected_relation_table
        if not self.relational_store.index_exists(rejected, General.HGID.value):
            self.relational_store.create_index(rejected, General.HGID.value)

        if not self.document_store.index_exists():
            self.document_store.create_index()

        logger.info(f"{__name__}:ensure_schema - Storage schema ready")

    def route(self, record: Mapping[str, Any]) -> RouteResult:
        """
        Apply one mutation record to the backends named by its target.

        Args:
            record: Internal field map carrying action, type, target and hgid

        Returns:
            RouteResult: Per-backend outcome

        Raises:
            ValidationError: If a routing token is unknown or hgid is missing
            HistographError: Any adapter failure, unchanged
        """
        action = _parse_token(Actions, record, General.ACTION)
        record_type = _parse_token(Types, record, General.TYPE)
        target = _parse_token(Targets, record, General.TARGET)

        hgid = record.get(General.HGID.value)
        if not hgid:
            raise ValidationError("Record carries no hgid", field=General.HGID.value)

        if action is Actions.ADD_TO_REJECTED and record_type is not Types.RELATION:
            raise ValidationError(
                "Only relations can be added to the rejected relations",
                field=General.TYPE.value,
            )

        log_record(
            logger,
            logging.INFO,
            f"{__name__}:route - Routing {action.value} {record_type.value} to {target.value}",
            record,
        )

        result = RouteResult(hgid=str(hgid), action=action, target=target)

        if target.includes_relational:
            self._apply_relational(action, record_type, record, result)

        # Only PITs are indexed; rejected relations never reach the index.
        if target.includes_document and record_type is Types.PIT:
            self._apply_document(action, record, result)

        return result

    def _table_for(self, action: Actions, record_type: Types) -> str:
        if action is Actions.ADD_TO_REJECTED:
            return self.config.rejected_relation_table
        if record_type is Types.PIT:
            return self.config.pit_table
        return self.config.relation_table

    def _apply_relational(
        self,
        action: Actions,
        record_type: Types,
        record: Mapping[str, Any],
        result: RouteResult,
    ) -> None:
        table_name = self._table_for(action, record_type)
        result.table = table_name

        if action is Actions.DELETE:
            result.rows_deleted = self.relational_store.delete_rows_where(
                table_name, General.HGID.value, record[General.HGID.value]
            )
            return

        # Row built against the live columns so added columns are filled when present.
        columns = self.relational_store.column_names(table_name)
        row = KeyedRow({name: record.get(name) for name in columns})

        if action is Actions.UPDATE:
            self.relational_store.upsert_row(table_name, General.HGID.value, row)
        else:
            self.relational_store.insert_row(table_name, row)

    def _apply_document(
        self,
        action: Actions,
        record: Mapping[str, Any],
        result: RouteResult,
    ) -> None:
        if action is Actions.ADD:
            result.document_response = self.document_store.add_document(record)
        elif action is Actions.UPDATE:
            result.document_update = self.document_store.update_document(record)
        elif action is Actions.DELETE:
            result.document_response = self.document_store.delete_document(record)
