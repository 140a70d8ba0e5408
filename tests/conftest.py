from __future__ import annotations

from collections.abc import Callable

import pytest

from cqlsink.cql.models import Statement


class FakeExecutor:
    """
    In-memory stand-in for CqlSession.

    Records every executed statement. ``applied`` is returned for conditional
    statements; ``fail_on`` makes the n-th call (0-based) raise ``error``.
    """

    def __init__(self, applied: bool = True, fail_on: int | None = None, error: Exception | None = None) -> None:
        self.applied = applied
        self.fail_on = fail_on
        self.error = error or RuntimeError("write timeout")
        self.statements: list[Statement] = []

    def execute(self, statement: Statement) -> bool:
        if self.fail_on is not None and len(self.statements) == self.fail_on:
            self.statements.append(statement)
            raise self.error
        self.statements.append(statement)
        if not statement.conditional:
            return True
        return self.applied


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def executor_factory() -> Callable[..., FakeExecutor]:
    return FakeExecutor


@pytest.fixture
def config_map() -> dict[str, str]:
    return {
        "nodes": "127.0.0.1:9042",
        "keyspace": "store",
        "table": "orders",
    }
