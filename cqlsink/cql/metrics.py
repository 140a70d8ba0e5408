from ..metrics.registry import (
    CQL_WRITE_LATENCY_SECONDS,
    CQL_WRITE_NOT_APPLIED_TOTAL,
    CQL_WRITE_TOTAL,
    RECORDS_REJECTED_TOTAL,
)


def observe_cql_write(table: str, op_type: str, status: str, latency_s: float) -> None:
    """Record one executed write statement."""
    CQL_WRITE_TOTAL.labels(table=table, op_type=op_type, status=status).inc()
    CQL_WRITE_LATENCY_SECONDS.labels(table=table, op_type=op_type).observe(latency_s)


def observe_not_applied(table: str, op_type: str) -> None:
    """Record a conditional write whose IF [NOT] EXISTS guard did not hold."""
    CQL_WRITE_NOT_APPLIED_TOTAL.labels(table=table, op_type=op_type).inc()


def observe_rejected(reason: str) -> None:
    """Record a record rejected before a statement could be built."""
    RECORDS_REJECTED_TOTAL.labels(reason=reason).inc()
