from .builder import QueryBuilder
from .models import ChangeRecord, Operation, Statement, StatementType
from .normalizer import ColumnSet, split_columns
from .session import CqlSession, StatementExecutor
from .writer import RecordWriter

__all__ = [
    "QueryBuilder",
    "ChangeRecord",
    "Operation",
    "Statement",
    "StatementType",
    "ColumnSet",
    "split_columns",
    "CqlSession",
    "StatementExecutor",
    "RecordWriter",
]
