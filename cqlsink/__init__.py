from .cql.builder import QueryBuilder
from .cql.models import ChangeRecord, Operation
from .cql.writer import RecordWriter
from .destination import Destination

__all__ = ["QueryBuilder", "ChangeRecord", "Operation", "RecordWriter", "Destination"]
