"""
Schema-introspecting relational store adapter.

Provides generic table, row and index operations over any table shape.
Column lists are read from the live catalog on every call and never cached,
so tables can gain columns without code changes.

SQL identifiers (table, column, index names) only ever come from catalog
introspection or from caller-controlled constants, and are rendered through
SQLAlchemy constructs so the dialect quotes them. Row values and lookup
values are always bound parameters.

Dependencies: sqlalchemy, histograph.core.exceptions
System role: Relational bookkeeping store adapter
"""

import logging
from typing import Any, Sequence

from sqlalchemy import Engine, Index, MetaData, Table, column, delete, insert, inspect, select, table, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlalchemy.sql.expression import TableClause

from histograph.boundary.db.row_shapes import KeyedRow, OrderedRow, Row
from histograph.core.exceptions import PersistenceError, SchemaError, ShapeError, ValidationError

logger = logging.getLogger(__name__)

# Column types are spliced into the DDL text; these end or comment out the statement.
_STATEMENT_BREAKS = (";", "--", "/*")


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def index_name(table_name: str, column_name: str) -> str:
    """Name of the single-column index created by RelationalStore.create_index."""
    return f"{table_name}_{column_name}_idx"


class RelationalStore:
    """
    Generic CRUD over tables discovered at call time.

    Every operation checks a connection out of the engine for the duration of
    the call only (engine.begin() for writes, engine.connect() for reads), so
    cursors, connections and transactions are released on every exit path.
    The adapter holds no other state.

    Attributes:
        engine: SQLAlchemy engine for the relational backend
    """

    def __init__(self, engine: Engine) -> None:
        """
        Initialize store over an engine.

        Args:
            engine: Open SQLAlchemy engine (connection pool owned by the caller)
        """
        self.engine = engine

    # =========================================================================
    # Catalog introspection
    # =========================================================================

    def list_tables(self) -> set[str]:
        """
        Enumerate user tables in the default schema.

        Returns:
            set[str]: Table names
        """
        with self.engine.connect() as conn:
            return set(inspect(conn).get_table_names())

    def table_exists(self, table_name: str) -> bool:
        with self.engine.connect() as conn:
            return inspect(conn).has_table(table_name)

    def column_names(self, table_name: str) -> list[str]:
        """
        Read the table's column names from the live catalog.

        Args:
            table_name: Table to inspect

        Returns:
            list[str]: Column names in catalog order (empty if the table is missing)
        """
        with self.engine.connect() as conn:
            return self._live_columns(conn, table_name)

    def column_count(self, table_name: str) -> int:
        return len(self.column_names(table_name))

    # =========================================================================
    # DDL
    # =========================================================================

    def create_table(self, table_name: str, *fields: str) -> None:
        """
        Create a table from alternating column name / SQL type arguments.

        Args:
            table_name: Name of the new table
            *fields: name1, type1, name2, type2, ...

        Raises:
            SchemaError: If no column is given, a column lacks a type, a type
                contains a statement separator or comment, or the backend
                rejects the DDL

        Usage:
            store.create_table("rejects", "hgid", "text", "cause", "text")
        """
        if len(fields) % 2 != 0:
            raise SchemaError(
                "All fields need a datatype parameter supplied as well",
                table=table_name,
                details={"field_count": len(fields)},
            )
        if len(fields) < 2:
            raise SchemaError("At least one column needs to be specified", table=table_name)

        names = fields[0::2]
        types = fields[1::2]
        for name, type_name in zip(names, types):
            if not name:
                raise SchemaError("Column names must not be empty", table=table_name)
            if any(token in type_name for token in _STATEMENT_BREAKS):
                raise SchemaError(
                    f"Column definition must be a single clause: {type_name!r}",
                    table=table_name,
                    details={"column": name},
                )

        try:
            with self.engine.begin() as conn:
                quote = conn.dialect.identifier_preparer.quote
                column_defs = ", ".join(
                    f"{quote(name)} {type_name.strip()}" for name, type_name in zip(names, types)
                )
                conn.execute(text(f"CREATE TABLE {quote(table_name)} ({column_defs})"))
        except SQLAlchemyError as e:
            raise SchemaError(
                "Could not create new table",
                table=table_name,
                details={"error": str(e)},
            ) from e

        logger.info(
            f"{__name__}:create_table - Created table {table_name} with {len(names)} columns"
        )

    def index_exists(self, table_name: str, column_name: str) -> bool:
        """
        Check for the single-column index created by create_index.

        Args:
            table_name: Indexed table
            column_name: Indexed column

        Returns:
            bool: True if an index named <table>_<column>_idx exists on the table
        """
        expected = index_name(table_name, column_name)
        with self.engine.connect() as conn:
            try:
                indexes = inspect(conn).get_indexes(table_name)
            except NoSuchTableError:
                return False
        return any(index["name"] == expected for index in indexes)

    def create_index(self, table_name: str, column_name: str) -> None:
        """
        Create a single-column index named <table>_<column>_idx.

        Raises:
            ValidationError: If column_name is not a live column of the table
            PersistenceError: If the backend rejects the index creation
        """
        try:
            with self.engine.begin() as conn:
                columns = self._live_columns(conn, table_name)
                self._require_column(table_name, column_name, columns)
                reflected = Table(table_name, MetaData(), autoload_with=conn)
                Index(index_name(table_name, column_name), reflected.c[column_name]).create(conn)
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Could not create index",
                operation="create_index",
                table=table_name,
                details={"column": column_name, "error": str(e)},
            ) from e

        logger.info(f"{__name__}:create_index - Created index on {table_name}({column_name})")

    # =========================================================================
    # Rows
    # =========================================================================

    def insert_row(self, table_name: str, row: Row) -> None:
        """
        Insert exactly one row.

        The insert column list is derived from the live schema. Shape and key
        checks run before any statement is sent, so a rejected row never
        partially writes.

        Args:
            table_name: Target table
            row: OrderedRow with one value per column in live column order, or
                KeyedRow with one value per column by name

        Raises:
            ShapeError: If the row does not supply exactly one value per column
            ValidationError: If a KeyedRow names a column the table does not have
            PersistenceError: If the backend rejects the insert or does not
                report exactly one affected row
        """
        try:
            with self.engine.begin() as conn:
                self._insert(conn, table_name, row)
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Could not add data to table",
                operation="insert",
                table=table_name,
                details={"error": str(e)},
            ) from e

    def upsert_row(self, table_name: str, key: str, row: Row) -> None:
        """
        Replace the rows sharing row's value for key with row.

        Runs delete-then-insert on one connection inside one transaction.

        Args:
            table_name: Target table
            key: Column identifying the row (usually "hgid")
            row: Full replacement row

        Raises:
            ShapeError, ValidationError, PersistenceError: As for insert_row
        """
        try:
            with self.engine.begin() as conn:
                columns = self._live_columns(conn, table_name)
                self._require_column(table_name, key, columns)
                values = self._bind_values(table_name, columns, row)
                tbl = self._table_clause(table_name, columns)
                conn.execute(delete(tbl).where(tbl.c[key] == values[key]))
                self._execute_insert(conn, table_name, tbl, values)
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Could not upsert data into table",
                operation="upsert",
                table=table_name,
                details={"key": key, "error": str(e)},
            ) from e

    def rows_where(self, table_name: str, key: str, value: str) -> list[dict[str, str | None]]:
        """
        Fetch all rows whose key column equals value.

        key is checked against the live column list before any row query is
        built; value is always bound as a parameter.

        Args:
            table_name: Table to query
            key: Column name to filter on
            value: Value to match

        Returns:
            list[dict]: One column-name to value mapping per matching row

        Raises:
            ValidationError: If key is not a column of the table
        """
        with self.engine.connect() as conn:
            columns = self._live_columns(conn, table_name)
            self._require_column(table_name, key, columns)
            tbl = self._table_clause(table_name, columns)
            stmt = select(tbl).where(tbl.c[key] == value)
            return self._fetch(conn, stmt, columns)

    def all_rows(self, table_name: str) -> list[dict[str, str | None]]:
        """
        Fetch every row of a table.

        Raises:
            ValidationError: If the table does not exist
        """
        with self.engine.connect() as conn:
            columns = self._live_columns(conn, table_name)
            if not columns:
                raise ValidationError(
                    f"Table does not exist: {table_name}",
                    field="table",
                )
            tbl = self._table_clause(table_name, columns)
            return self._fetch(conn, select(tbl), columns)

    def delete_rows_where(self, table_name: str, key: str, value: str) -> int:
        """
        Physically delete the rows whose key column equals value.

        Returns:
            int: Number of deleted rows (0 if none matched)

        Raises:
            ValidationError: If key is not a column of the table
            PersistenceError: If the backend rejects the delete
        """
        try:
            with self.engine.begin() as conn:
                columns = self._live_columns(conn, table_name)
                self._require_column(table_name, key, columns)
                tbl = self._table_clause(table_name, columns)
                result = conn.execute(delete(tbl).where(tbl.c[key] == value))
                deleted = result.rowcount
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Could not delete data from table",
                operation="delete",
                table=table_name,
                details={"key": key, "error": str(e)},
            ) from e

        logger.debug(f"{__name__}:delete_rows_where - Deleted {deleted} rows from {table_name}")
        return deleted

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _live_columns(conn: Connection, table_name: str) -> list[str]:
        # A fresh inspector per call: Inspector caches reflection results.
        try:
            return [col["name"] for col in inspect(conn).get_columns(table_name)]
        except NoSuchTableError:
            return []

    @staticmethod
    def _require_column(table_name: str, key: str, columns: Sequence[str]) -> None:
        if key not in columns:
            raise ValidationError(
                "Supplied key is not a valid column name in the table",
                field=key,
                details={"table": table_name},
            )

    @staticmethod
    def _table_clause(table_name: str, columns: Sequence[str]) -> TableClause:
        return table(table_name, *(column(name) for name in columns))

    @staticmethod
    def _bind_values(
        table_name: str,
        columns: Sequence[str],
        row: Row,
    ) -> dict[str, str | None]:
        if len(row) != len(columns):
            raise ShapeError(
                "The number of fields should be equal to the number of columns in the table",
                table=table_name,
                expected=len(columns),
                actual=len(row),
            )

        if isinstance(row, OrderedRow):
            return dict(zip(columns, row.values))

        if isinstance(row, KeyedRow):
            for key in row.pairs:
                RelationalStore._require_column(table_name, key, columns)
            return {name: row.pairs[name] for name in columns}

        raise ShapeError(
            f"Unsupported row shape: {type(row).__name__}",
            table=table_name,
        )

    def _insert(self, conn: Connection, table_name: str, row: Row) -> None:
        columns = self._live_columns(conn, table_name)
        values = self._bind_values(table_name, columns, row)
        self._execute_insert(conn, table_name, self._table_clause(table_name, columns), values)

    @staticmethod
    def _execute_insert(
        conn: Connection,
        table_name: str,
        tbl: TableClause,
        values: dict[str, str | None],
    ) -> None:
        result = conn.execute(insert(tbl).values(values))
        if result.rowcount != 1:
            raise PersistenceError(
                f"Unexpected response received when adding data to table: {result.rowcount}",
                operation="insert",
                table=table_name,
            )
        logger.debug(f"{__name__}:insert - Inserted row into {table_name}")

    @staticmethod
    def _fetch(conn: Connection, stmt, columns: Sequence[str]) -> list[dict[str, str | None]]:
        rows = conn.execute(stmt).mappings().all()
        return [{name: _as_text(row[name]) for name in columns} for row in rows]
