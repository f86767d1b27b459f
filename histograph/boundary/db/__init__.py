"""
Relational boundary layer: schema-introspecting table store and connection management.

Exports:
  - RelationalStore: Generic table/row/index operations over live schemas
  - OrderedRow, KeyedRow, coerce_row: Explicit insert row shapes
  - get_engine(), get_relational_store(): Connection management

Dependencies: sqlalchemy, histograph.configs
System role: Relational bookkeeping store adapter
"""

from histograph.boundary.db.connection import get_engine, get_relational_store
from histograph.boundary.db.relational_store import RelationalStore, index_name
from histograph.boundary.db.row_shapes import KeyedRow, OrderedRow, Row, coerce_row

__all__ = [
    "RelationalStore",
    "index_name",
    "OrderedRow",
    "KeyedRow",
    "Row",
    "coerce_row",
    "get_engine",
    "get_relational_store",
]
