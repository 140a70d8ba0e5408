from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ColumnSet:
    """
    Key and value columns of one record, index-aligned pairwise.

    ``key_columns[i]`` belongs to ``key_values[i]`` and ``value_columns[i]``
    to ``value_values[i]``. No value column is also a key column.
    """
    key_columns: tuple[str, ...]
    key_values: tuple[Any, ...]
    value_columns: tuple[str, ...]
    value_values: tuple[Any, ...]


def split_columns(
    key: Mapping[str, Any],
    after: Optional[Mapping[str, Any]] = None,
) -> ColumnSet:
    """
    Partition a record's key and after-image into key and value columns.

    Every key entry becomes a key column. Every after-image entry becomes a
    value column unless a key column has exactly the same name. Both
    sequences come out in lexicographic column order, so the same record
    always yields the same statement text.

    Neither mapping is mutated.

    Example:
        >>> split_columns({"id": "6"}, {"id": "6", "id2value": 1, "age": 22})
        ColumnSet(key_columns=('id',), key_values=('6',),
                  value_columns=('age', 'id2value'), value_values=(22, 1))
    """
    key_items = sorted(key.items())
    key_names = {col for col, _ in key_items}

    value_items = []
    if after:
        value_items = sorted(
            (col, val) for col, val in after.items() if col not in key_names
        )

    return ColumnSet(
        key_columns=tuple(col for col, _ in key_items),
        key_values=tuple(val for _, val in key_items),
        value_columns=tuple(col for col, _ in value_items),
        value_values=tuple(val for _, val in value_items),
    )
