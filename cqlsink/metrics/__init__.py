from .registry import (
    CQL_WRITE_LATENCY_SECONDS,
    CQL_WRITE_NOT_APPLIED_TOTAL,
    CQL_WRITE_TOTAL,
    RECORDS_REJECTED_TOTAL,
)

__all__ = [
    "CQL_WRITE_TOTAL",
    "CQL_WRITE_LATENCY_SECONDS",
    "CQL_WRITE_NOT_APPLIED_TOTAL",
    "RECORDS_REJECTED_TOTAL",
]
