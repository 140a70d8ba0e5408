from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from cassandra import ConsistencyLevel
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session
from cassandra.connection import DefaultEndPoint
from cassandra.query import PreparedStatement

from .models import Statement
from ..config import AUTH_MECHANISM_BASIC, DestinationConfig

logger = logging.getLogger(__name__)


class StatementExecutor(Protocol):
    """
    Anything able to run a built Statement.

    Returns whether the write was applied. Unconditional statements always
    report True; conditional ones report the outcome of their guard.
    """

    def execute(self, statement: Statement) -> bool:
        ...


class CqlSession:
    """
    Owns a cassandra-driver Cluster and Session for one keyspace.

    Templates are prepared once and cached by their text, which is stable
    because column order is deterministic.

    Use as:
        with CqlSession(config) as session:
            applied = session.execute(statement)
    """

    def __init__(
        self,
        config: DestinationConfig,
        *,
        cluster_factory: Callable[..., Cluster] = Cluster,
    ) -> None:
        self.config = config
        self._cluster_factory = cluster_factory
        self._cluster: Cluster | None = None
        self._session: Session | None = None
        self._prepared: dict[str, PreparedStatement] = {}
        self._lock = threading.Lock()
        self._consistency = ConsistencyLevel.name_to_value[config.consistency]

    def __enter__(self) -> "CqlSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
        # propagate exceptions (if any)
        return False

    def open(self) -> None:
        """
        Connect to the cluster and switch to the configured keyspace.

        Raises:
            RuntimeError: If the session is already open
        """
        if self._session is not None:
            raise RuntimeError("CqlSession is already open")

        auth_provider = None
        if self.config.auth_mechanism == AUTH_MECHANISM_BASIC:
            auth_provider = PlainTextAuthProvider(
                username=self.config.auth_username,
                password=self.config.auth_password,
            )

        cluster = self._cluster_factory(
            contact_points=[DefaultEndPoint(n.host, n.port) for n in self.config.parsed_nodes],
            auth_provider=auth_provider,
            connect_timeout=self.config.connect_timeout_s,
        )
        try:
            self._session = cluster.connect(self.config.keyspace)
        except Exception:
            cluster.shutdown()
            raise
        self._cluster = cluster
        logger.info(
            "Connected to keyspace %s via %s",
            self.config.keyspace,
            ", ".join(self.config.nodes),
        )

    def close(self) -> None:
        """Shut the cluster down. Safe to call when never opened."""
        cluster = self._cluster
        self._cluster = None
        self._session = None
        with self._lock:
            self._prepared.clear()
        if cluster is not None:
            cluster.shutdown()
            logger.info("Closed connection to keyspace %s", self.config.keyspace)

    def _connection(self) -> Session:
        if self._session is None:
            raise RuntimeError("CqlSession is not open; call open() or use it as a context manager")
        return self._session

    def _prepare(self, session: Session, template: str) -> PreparedStatement:
        with self._lock:
            prepared = self._prepared.get(template)
        if prepared is None:
            # Racing threads may both prepare; the driver tolerates that.
            prepared = session.prepare(template)
            prepared.consistency_level = self._consistency
            with self._lock:
                self._prepared.setdefault(template, prepared)
        return prepared

    def execute(self, statement: Statement) -> bool:
        """
        Execute a statement with its params bound positionally.

        Returns:
            ``was_applied`` for conditional statements, True otherwise

        Raises:
            RuntimeError: If the session is not open
            cassandra.DriverException: Any driver failure, unchanged
        """
        session = self._connection()
        prepared = self._prepare(session, statement.template)
        result: Any = session.execute(prepared, list(statement.params))
        if not statement.conditional:
            return True
        return bool(result.was_applied)
