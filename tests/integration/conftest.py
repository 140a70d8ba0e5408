from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Iterator

import pytest
from cassandra.cluster import Cluster, Session
from cassandra.connection import DefaultEndPoint

from cqlsink.config import parse_node

TEST_KEYSPACE = "cqlsink_test"


@pytest.fixture(scope="session")
def cassandra_nodes() -> str:
    """
    Comma-separated node list for integration tests.

    Integration tests run only when CQLSINK_TEST_NODES is set, e.g.
    ``CQLSINK_TEST_NODES=127.0.0.1:9042``.
    """
    nodes = os.environ.get("CQLSINK_TEST_NODES")
    if not nodes:
        pytest.skip("CQLSINK_TEST_NODES is not set")
    return nodes


@pytest.fixture(scope="session")
def keyspace() -> str:
    return TEST_KEYSPACE


@pytest.fixture(scope="session")
def cassandra_session(cassandra_nodes: str) -> Iterator[Session]:
    """
    Session-scoped raw driver session used to set up and inspect tables.

    We fail fast if the cluster is unreachable, so failures are actionable.
    """
    endpoints = [DefaultEndPoint(n.host, n.port) for n in map(parse_node, cassandra_nodes.split(","))]
    cluster = Cluster(contact_points=endpoints)
    try:
        session = cluster.connect()
    except Exception as exc:  # pragma: no cover
        cluster.shutdown()
        pytest.fail(
            "Cassandra test cluster is not reachable.\n"
            f"- CQLSINK_TEST_NODES={cassandra_nodes!r}\n"
            f"- Underlying error: {exc}",
            pytrace=False,
        )

    session.execute(
        f"CREATE KEYSPACE IF NOT EXISTS {TEST_KEYSPACE} "
        "WITH replication = {'class': 'SimpleStrategy', 'replication_factor': 1}"
    )
    session.set_keyspace(TEST_KEYSPACE)
    yield session
    cluster.shutdown()


@pytest.fixture
def table_factory(cassandra_session: Session) -> Iterator[Callable[[str], str]]:
    """
    Factory fixture creating per-test tables.

    Usage:
        table = table_factory("id1 text, id2 int, v int, PRIMARY KEY ((id1, id2))")
    """
    created: list[str] = []

    def _create(schema_cql: str) -> str:
        table = f"t_{uuid.uuid4().hex[:12]}"
        cassandra_session.execute(f"CREATE TABLE {table} ({schema_cql})")
        created.append(table)
        return table

    yield _create

    for table in created:
        cassandra_session.execute(f"DROP TABLE IF EXISTS {table}")
