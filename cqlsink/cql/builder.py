from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .models import Statement, StatementType
from .normalizer import split_columns
from ..errors import EmptyAssignmentError, EmptyPredicateError

INSERT_QUERY = "INSERT INTO {table} ({columns}) VALUES ({placeholders})"
UPDATE_QUERY = "UPDATE {table} SET {assignments} WHERE {predicate}"
DELETE_QUERY = "DELETE FROM {table} WHERE {predicate}"

IF_NOT_EXISTS = " IF NOT EXISTS"
IF_EXISTS = " IF EXISTS"

SET_SEPARATOR = ", "
WHERE_SEPARATOR = " AND "


def placeholders(count: int) -> str:
    """Return ``count`` positional placeholders separated by commas."""
    return ", ".join("?" for _ in range(count))


def pair_with_placeholders(columns: Sequence[str], separator: str) -> str:
    """
    Pair every column with a placeholder as ``col = ?``, joined by ``separator``.

    Returns an empty string for no columns; callers decide whether that is
    acceptable.
    """
    return separator.join(f"{col} = ?" for col in columns)


class QueryBuilder:
    """
    Builds CQL write statements from a record's key and after-image.

    Parameters are always ordered to match the placeholders left to right,
    since the driver binds them positionally. Column order is lexicographic
    (see ``split_columns``).

    Existence guards model at-least-once delivery: a redelivered create must
    not overwrite a row (``IF NOT EXISTS``) and a stale update must not
    create a phantom row (``IF EXISTS``). Both are on by default and can be
    switched off for stores or tables that do not want lightweight
    transactions.

    The builder is stateless and safe to share between threads.
    """

    def build_insert(
        self,
        key: Mapping[str, Any],
        after: Optional[Mapping[str, Any]],
        table: str,
        *,
        if_not_exists: bool = True,
    ) -> Statement:
        """
        Build an INSERT for a create or snapshot record.

        Value columns come first, key columns are appended after them.

        Raises:
            EmptyAssignmentError: If the record has no columns at all
        """
        cs = split_columns(key, after)
        columns = cs.value_columns + cs.key_columns
        params = cs.value_values + cs.key_values
        if not columns:
            raise EmptyAssignmentError(f"INSERT into {table} has no columns")

        template = INSERT_QUERY.format(
            table=table,
            columns=", ".join(columns),
            placeholders=placeholders(len(columns)),
        )
        if if_not_exists:
            template += IF_NOT_EXISTS

        return Statement(
            template=template,
            params=params,
            op_type=StatementType.INSERT,
            table=table,
            conditional=if_not_exists,
        )

    def build_update(
        self,
        key: Mapping[str, Any],
        after: Optional[Mapping[str, Any]],
        table: str,
        *,
        if_exists: bool = True,
    ) -> Statement:
        """
        Build an UPDATE for an update record.

        Key columns never appear in the SET clause, even when the
        after-image repeats them.

        Raises:
            EmptyPredicateError: If the record has no key columns
            EmptyAssignmentError: If no non-key columns are left to set
        """
        cs = split_columns(key, after)
        if not cs.key_columns:
            raise EmptyPredicateError(f"UPDATE of {table} requires at least one key column")
        if not cs.value_columns:
            raise EmptyAssignmentError(f"UPDATE of {table} has no non-key columns to set")

        template = UPDATE_QUERY.format(
            table=table,
            assignments=pair_with_placeholders(cs.value_columns, SET_SEPARATOR),
            predicate=pair_with_placeholders(cs.key_columns, WHERE_SEPARATOR),
        )
        if if_exists:
            template += IF_EXISTS

        return Statement(
            template=template,
            params=cs.value_values + cs.key_values,
            op_type=StatementType.UPDATE,
            table=table,
            conditional=if_exists,
        )

    def build_delete(self, key: Mapping[str, Any], table: str) -> Statement:
        """
        Build a DELETE for a delete record.

        Only the key is used; a delete's after-image is not a payload.

        Raises:
            EmptyPredicateError: If the record has no key columns
        """
        cs = split_columns(key)
        if not cs.key_columns:
            raise EmptyPredicateError(f"DELETE from {table} requires at least one key column")

        template = DELETE_QUERY.format(
            table=table,
            predicate=pair_with_placeholders(cs.key_columns, WHERE_SEPARATOR),
        )
        return Statement(
            template=template,
            params=cs.key_values,
            op_type=StatementType.DELETE,
            table=table,
        )
