from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Sequence

from cassandra.cluster import Cluster

from .config import DestinationConfig
from .cql.models import ChangeRecord
from .cql.session import CqlSession
from .cql.writer import RecordWriter

logger = logging.getLogger(__name__)


class Destination:
    """
    Connector lifecycle around a RecordWriter.

    Usage:
        dest = Destination()
        dest.configure({"nodes": "127.0.0.1:9042", "keyspace": "store", "table": "orders"})
        dest.open()
        try:
            written = dest.write(records)
        finally:
            dest.teardown()
    """

    def __init__(self, *, cluster_factory: Callable[..., Cluster] = Cluster) -> None:
        self.config: Optional[DestinationConfig] = None
        self._cluster_factory = cluster_factory
        self._session: Optional[CqlSession] = None
        self._writer: Optional[RecordWriter] = None

    def configure(self, cfg: Mapping[str, str]) -> None:
        """
        Parse and validate the connector configuration.

        Raises:
            ValueError: If the configuration is invalid
        """
        logger.info("Configuring destination")
        self.config = DestinationConfig.from_mapping(cfg)

    def open(self) -> None:
        """
        Connect to the cluster.

        Raises:
            RuntimeError: If configure() was not called first, or the
                destination is already open
        """
        if self.config is None:
            raise RuntimeError("Destination is not configured; call configure() first")
        if self._session is not None:
            raise RuntimeError("Destination is already open; call teardown() first")

        session = CqlSession(self.config, cluster_factory=self._cluster_factory)
        session.open()
        self._session = session
        self._writer = RecordWriter(session, self.config.table)

    def write(self, records: Sequence[ChangeRecord]) -> int:
        """
        Write records right away, in order.

        Returns:
            Number of records written

        Raises:
            RuntimeError: If open() was not called first
            CqlWriteError: If a record fails; earlier records stay written
        """
        if self._writer is None:
            raise RuntimeError("Destination is not open; call open() first")
        return self._writer.write(records)

    def teardown(self) -> None:
        """Close the connection. A no-op when the destination was never opened."""
        if self._session is not None:
            self._session.close()
        self._session = None
        self._writer = None
