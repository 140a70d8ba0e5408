from __future__ import annotations

import logging
import re
import time
from typing import Any, Iterable, Mapping, Optional

from .builder import QueryBuilder
from .metrics import observe_cql_write, observe_not_applied, observe_rejected
from .models import METADATA_COLLECTION, ChangeRecord, Operation, Statement, StatementType
from .session import StatementExecutor
from ..errors import CqlWriteError, MalformedRecordError, StatementBuildError

logger = logging.getLogger(__name__)

# Unquoted CQL identifiers are case-insensitive; only their lowercase form is
# accepted so that two names never refer to the same column.
_IDENTIFIER_RE = re.compile(r"[a-z_][a-z0-9_]*")

# Cassandra rejects table names longer than this.
MAX_TABLE_NAME_LENGTH = 48


def _validate_identifier(name: Any, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for CQL interpolation.

    Column and table names are written into statement text unquoted, so they
    are restricted to lowercase unquoted CQL identifiers: a lowercase
    letter or underscore followed by lowercase letters, digits and
    underscores.

    Raises:
        MalformedRecordError: If the identifier is not a string or unsafe
    """
    if not isinstance(name, str):
        raise MalformedRecordError(
            f"{identifier_type} must be a string, got {type(name).__name__}"
        )
    if not _IDENTIFIER_RE.fullmatch(name):
        raise MalformedRecordError(
            f"Invalid {identifier_type} {name!r}: "
            "must start with a lowercase letter or underscore and contain only "
            "lowercase letters, digits and underscores"
        )
    return name


def resolve_table(record: ChangeRecord, default: str) -> str:
    """Per-record ``opencdc.collection`` metadata wins over the configured table."""
    metadata = record.metadata or {}
    table = metadata.get(METADATA_COLLECTION) or default
    table = _validate_identifier(table, "table")
    if len(table) > MAX_TABLE_NAME_LENGTH:
        raise MalformedRecordError(
            f"table {table!r} exceeds Cassandra's {MAX_TABLE_NAME_LENGTH}-character limit"
        )
    return table


def _structured(value: Any, field_name: str, operation: Operation) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise MalformedRecordError(
            f"{operation.value} record {field_name} must be structured data, "
            f"got {type(value).__name__}"
        )
    for col in value:
        _validate_identifier(col, f"{field_name} column")
    return value


class RecordWriter:
    """
    Turns change records into CQL writes.

    For each record it:
    - validates the key and after-image shapes for the record's operation
    - resolves the target table
    - routes to the matching QueryBuilder method
    - hands the statement to the executor

    Create and snapshot records become INSERTs, updates become UPDATEs and
    deletes become DELETEs. Only deletes may carry an after-image that is
    not structured data; it is ignored.

    Conditional writes that are not applied are expected under at-least-once
    delivery and are logged, not raised.

    Usage:
        with CqlSession(config) as session:
            writer = RecordWriter(session, config.table)
            written = writer.write(records)
    """

    def __init__(
        self,
        executor: StatementExecutor,
        table: str,
        *,
        builder: Optional[QueryBuilder] = None,
        if_not_exists: bool = True,
        if_exists: bool = True,
    ) -> None:
        self.executor = executor
        self.table = table
        self.builder = builder or QueryBuilder()
        self.if_not_exists = if_not_exists
        self.if_exists = if_exists

    def build(self, record: ChangeRecord) -> Statement:
        """
        Validate a record and build its statement.

        Raises:
            MalformedRecordError: If the record shape does not fit its operation
            EmptyPredicateError: If an update or delete has no key columns
            EmptyAssignmentError: If there is nothing to write
        """
        try:
            operation = Operation(record.operation)
        except ValueError:
            raise MalformedRecordError(f"unsupported operation {record.operation!r}") from None

        key = _structured(record.key, "key", operation)
        table = resolve_table(record, self.table)

        if operation == Operation.DELETE:
            return self.builder.build_delete(key, table)

        after = _structured(record.after, "after", operation)
        if operation in (Operation.CREATE, Operation.SNAPSHOT):
            return self.builder.build_insert(key, after, table, if_not_exists=self.if_not_exists)
        return self.builder.build_update(key, after, table, if_exists=self.if_exists)

    def write(self, records: Iterable[ChangeRecord]) -> int:
        """
        Write records in order, one statement each.

        Stops at the first failure. Records after it are not attempted.

        Returns:
            Number of records written

        Raises:
            CqlWriteError: Wrapping the specific failure, with the failing
                record's index and position and the count written before it
        """
        written = 0
        for index, record in enumerate(records):
            try:
                statement = self.build(record)
            except (MalformedRecordError, StatementBuildError) as exc:
                observe_rejected(type(exc).__name__)
                raise CqlWriteError(
                    f"record {index} (position {record.position!r}) rejected: {exc}",
                    index=index,
                    position=record.position,
                    written=written,
                ) from exc

            try:
                self._execute(statement, record)
            except Exception as exc:
                raise CqlWriteError(
                    f"record {index} (position {record.position!r}) failed: {exc}",
                    index=index,
                    position=record.position,
                    written=written,
                ) from exc
            written += 1
        return written

    def _execute(self, statement: Statement, record: ChangeRecord) -> None:
        start_time = time.monotonic()
        status = "success"
        logger.debug("Executing %s with %d params", statement.template, len(statement.params))

        try:
            applied = self.executor.execute(statement)
        except Exception:
            status = "error"
            raise
        finally:
            latency = time.monotonic() - start_time
            observe_cql_write(statement.table, statement.op_type.value, status, latency)

        if not applied:
            observe_not_applied(statement.table, statement.op_type.value)
            if statement.op_type == StatementType.INSERT:
                logger.info(
                    "Row already exists, INSERT into %s not applied for position %r",
                    statement.table,
                    record.position,
                )
            else:
                logger.warning(
                    "Row not found, %s of %s not applied for position %r",
                    statement.op_type.value.upper(),
                    statement.table,
                    record.position,
                )
