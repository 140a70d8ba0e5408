from __future__ import annotations

import pytest

from cqlsink import ChangeRecord, Destination, Operation

SCHEMA = "id1 text, id2 int, column1 int, column2 boolean, PRIMARY KEY ((id1, id2))"


@pytest.fixture
def table(table_factory) -> str:
    return table_factory(SCHEMA)


@pytest.fixture
def destination(cassandra_nodes: str, keyspace: str, table: str):
    dest = Destination()
    dest.configure({"nodes": cassandra_nodes, "keyspace": keyspace, "table": table})
    dest.open()
    yield dest
    dest.teardown()


def _row(session, table: str, id1: str, id2: int):
    return session.execute(
        f"SELECT column1, column2 FROM {table} WHERE id1 = %s AND id2 = %s", (id1, id2)
    ).one()


def test_records_round_trip_through_the_table(destination, cassandra_session, table) -> None:
    key = {"id1": "6", "id2": 6}

    assert destination.write([ChangeRecord(Operation.SNAPSHOT, key, {"column1": 22, "column2": False})]) == 1
    row = _row(cassandra_session, table, "6", 6)
    assert (row.column1, row.column2) == (22, False)

    assert destination.write([ChangeRecord(Operation.UPDATE, key, {"column1": 44, "id1": "6"})]) == 1
    row = _row(cassandra_session, table, "6", 6)
    assert (row.column1, row.column2) == (44, False)

    assert destination.write([ChangeRecord(Operation.DELETE, key, b"")]) == 1
    assert _row(cassandra_session, table, "6", 6) is None


def test_redelivered_create_does_not_overwrite(destination, cassandra_session, table) -> None:
    key = {"id1": "7", "id2": 7}
    destination.write([ChangeRecord(Operation.CREATE, key, {"column1": 1, "column2": True})])

    assert destination.write([ChangeRecord(Operation.CREATE, key, {"column1": 2, "column2": False})]) == 1

    row = _row(cassandra_session, table, "7", 7)
    assert (row.column1, row.column2) == (1, True)


def test_stale_update_does_not_create_a_row(destination, cassandra_session, table) -> None:
    destination.write([ChangeRecord(Operation.UPDATE, {"id1": "8", "id2": 8}, {"column1": 3})])

    assert _row(cassandra_session, table, "8", 8) is None
