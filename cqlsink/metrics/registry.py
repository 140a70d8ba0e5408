from prometheus_client import Counter, Histogram

CQL_WRITE_TOTAL = Counter(
    "cqlsink_cql_write_total",
    "CQL write statements executed, by outcome",
    ["table", "op_type", "status"],
)

CQL_WRITE_LATENCY_SECONDS = Histogram(
    "cqlsink_cql_write_latency_seconds",
    "Latency of CQL write statements",
    ["table", "op_type"],
)

CQL_WRITE_NOT_APPLIED_TOTAL = Counter(
    "cqlsink_cql_write_not_applied_total",
    "Conditional CQL writes rejected by their IF [NOT] EXISTS guard",
    ["table", "op_type"],
)

RECORDS_REJECTED_TOTAL = Counter(
    "cqlsink_records_rejected_total",
    "Records that could not be turned into a statement",
    ["reason"],
)
