from __future__ import annotations

import ipaddress
import math
import re
from dataclasses import dataclass, field
from typing import Mapping

from cassandra import ConsistencyLevel

DEFAULT_PORT = 9042

AUTH_MECHANISM_NONE = "none"
AUTH_MECHANISM_BASIC = "basic"

_HOST_LABEL_RE = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")

# Serial levels only apply to the Paxos phase of conditional writes; Cassandra
# rejects them as the consistency of a write itself.
_SERIAL_CONSISTENCY_LEVELS = frozenset({"SERIAL", "LOCAL_SERIAL"})
_CONSISTENCY_LEVELS = frozenset(ConsistencyLevel.name_to_value) - _SERIAL_CONSISTENCY_LEVELS


@dataclass(frozen=True)
class Node:
    host: str
    port: int = DEFAULT_PORT


def _validate_host(host: str) -> None:
    try:
        ipaddress.ip_address(host.strip("[]"))
        return
    except ValueError:
        pass

    if len(host) > 253:
        raise ValueError(f"invalid host {host!r}: exceeds 253 characters")
    # A trailing dot would yield an empty last label and is rejected here.
    for label in host.split("."):
        if not _HOST_LABEL_RE.fullmatch(label):
            raise ValueError(f"invalid host {host!r}")


def parse_node(address: str) -> Node:
    """
    Parse a ``host[:port]`` node address.

    Raises:
        ValueError: If the host is not a hostname or IP literal, or the port
            is not an integer in 1..65535.
    """
    address = address.strip()
    if not address:
        raise ValueError("node address cannot be empty")

    host, port = address, DEFAULT_PORT
    if address.startswith("["):
        # [v6]:port
        end = address.find("]")
        if end == -1:
            raise ValueError(f"invalid node address {address!r}")
        host = address[1:end]
        rest = address[end + 1 :]
        if rest:
            if not rest.startswith(":"):
                raise ValueError(f"invalid node address {address!r}")
            port = _parse_port(address, rest[1:])
    elif address.count(":") == 1:
        host, raw_port = address.split(":")
        port = _parse_port(address, raw_port)

    _validate_host(host)
    return Node(host=host, port=port)


def _parse_port(address: str, raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"invalid port in node address {address!r}: not an integer") from None
    if not 1 <= port <= 65535:
        raise ValueError(f"invalid port in node address {address!r}: must be in 1..65535")
    return port


@dataclass
class DestinationConfig:
    keyspace: str
    table: str
    nodes: list[str] = field(default_factory=list)
    auth_mechanism: str = AUTH_MECHANISM_NONE
    auth_username: str = ""
    auth_password: str = ""
    consistency: str = "QUORUM"
    connect_timeout_s: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.keyspace:
            raise ValueError("keyspace is required")
        if not self.table:
            raise ValueError("table is required")
        if not self.nodes:
            raise ValueError("at least one node is required")
        for address in self.nodes:
            parse_node(address)

        if self.auth_mechanism not in (AUTH_MECHANISM_NONE, AUTH_MECHANISM_BASIC):
            raise ValueError(
                f"auth.mechanism must be one of 'none', 'basic'; got {self.auth_mechanism!r}"
            )
        if self.auth_mechanism == AUTH_MECHANISM_BASIC and (
            not self.auth_username or not self.auth_password
        ):
            raise ValueError(
                "auth.basic.username and auth.basic.password should be provided "
                "for basic authentication mechanism"
            )

        self.consistency = self.consistency.upper()
        if self.consistency not in _CONSISTENCY_LEVELS:
            raise ValueError(
                f"consistency must be one of {sorted(_CONSISTENCY_LEVELS)}; got {self.consistency!r}"
            )
        if not 0 < self.connect_timeout_s < math.inf:
            raise ValueError("connect.timeout must be a finite number > 0")

    @property
    def parsed_nodes(self) -> list[Node]:
        return [parse_node(address) for address in self.nodes]

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, str]) -> "DestinationConfig":
        """
        Build a config from the flat string map a connector receives.

        Recognized keys: ``nodes`` (comma separated), ``keyspace``, ``table``,
        ``auth.mechanism``, ``auth.basic.username``, ``auth.basic.password``,
        ``consistency`` and ``connect.timeout`` (seconds).
        """
        nodes = [n.strip() for n in cfg.get("nodes", "").split(",") if n.strip()]

        raw_timeout = cfg.get("connect.timeout", "5")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"connect.timeout must be a number, got {raw_timeout!r}") from None

        return cls(
            keyspace=cfg.get("keyspace", ""),
            table=cfg.get("table", ""),
            nodes=nodes,
            auth_mechanism=cfg.get("auth.mechanism", AUTH_MECHANISM_NONE),
            auth_username=cfg.get("auth.basic.username", ""),
            auth_password=cfg.get("auth.basic.password", ""),
            consistency=cfg.get("consistency", "QUORUM"),
            connect_timeout_s=timeout,
        )
