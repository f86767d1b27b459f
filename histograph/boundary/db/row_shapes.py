"""
Insert row shapes for the relational store.

A row is either an OrderedRow (one value per live column, in live column
order) or a KeyedRow (one value per live column, addressed by column name).
Callers pick the shape explicitly; coerce_row maps the flat argument form
(n values or n key/value pairs) onto the two shapes.

Dependencies: dataclasses (stdlib), histograph.core.exceptions
System role: Tagged input for RelationalStore.insert_row
"""

from dataclasses import dataclass
from typing import Mapping, Sequence, Union

from histograph.core.exceptions import ShapeError


@dataclass(frozen=True)
class OrderedRow:
    """Full row given positionally, matched against the live column order."""

    values: Sequence[str | None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class KeyedRow:
    """Full row given as column name to value pairs, in any order."""

    pairs: Mapping[str, str | None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", dict(self.pairs))

    def __len__(self) -> int:
        return len(self.pairs)


Row = Union[OrderedRow, KeyedRow]


def coerce_row(values: Sequence[str | None], column_count: int) -> Row:
    """
    Map a flat value list onto an explicit row shape.

    Args:
        values: Either column_count values, or column_count key/value pairs
            flattened as [key1, value1, key2, value2, ...]
        column_count: Number of live columns in the target table

    Returns:
        OrderedRow or KeyedRow

    Raises:
        ShapeError: If len(values) is neither column_count nor 2 * column_count
    """
    if column_count > 0 and len(values) == column_count:
        return OrderedRow(values)

    if column_count > 0 and len(values) == column_count * 2:
        keys = values[0::2]
        if any(not isinstance(key, str) for key in keys):
            raise ShapeError(
                "Keyed row must alternate column names and values",
                expected=column_count * 2,
                actual=len(values),
            )
        return KeyedRow(dict(zip(keys, values[1::2])))

    raise ShapeError(
        "The number of fields should be equal to the number of columns in the table",
        expected=column_count,
        actual=len(values),
    )
