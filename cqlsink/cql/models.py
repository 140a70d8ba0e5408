from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

# Metadata key carrying the per-record target table.
METADATA_COLLECTION = "opencdc.collection"


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SNAPSHOT = "snapshot"


class StatementType(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class ChangeRecord:
    """
    A single change-data-capture record.

    ``key`` and ``after`` are typed loosely on purpose: records arrive from
    upstream unvalidated and RecordWriter rejects malformed shapes.
    """
    operation: Operation
    key: Any  # column -> value
    after: Any = None  # column -> value; may be raw data for deletes
    position: Any = None  # opaque upstream position
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Statement:
    """
    A CQL template with positional ``?`` placeholders and its bound params.
    """
    template: str
    params: tuple[Any, ...]
    op_type: StatementType
    table: str
    # True when an IF [NOT] EXISTS guard is part of the template
    conditional: bool = False
