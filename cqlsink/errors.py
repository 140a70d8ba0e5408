from __future__ import annotations

from typing import Any


class CqlSinkError(Exception):
    """Base exception for cqlsink errors."""


class MalformedRecordError(CqlSinkError):
    """A change record does not have the shape required by its operation."""


class StatementBuildError(CqlSinkError):
    """A statement cannot be built from the given columns."""


class EmptyPredicateError(StatementBuildError):
    """An UPDATE or DELETE was requested without any key columns."""


class EmptyAssignmentError(StatementBuildError):
    """A write was requested without any columns to assign."""


class CqlWriteError(CqlSinkError):
    """
    Any failure while writing a record.

    The specific condition is available as ``__cause__``.
    """

    def __init__(self, message: str, *, index: int, position: Any, written: int) -> None:
        super().__init__(message)
        self.index = index
        self.position = position
        self.written = written
