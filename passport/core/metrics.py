"""Application metrics using the Prometheus client library.

All metrics are defined here so there is one inventory of what the
service measures.  Other modules import a metric and increment or
observe it where the behaviour happens.

Label values are always bounded sets (reason codes, roles, operation
names, route templates).  Never label by credential id, address or
commitment: each distinct label value is a new time series.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, route template, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential engine metrics
# ---------------------------------------------------------------------------

COMMITMENTS_COMPUTED = Counter(
    "passport_commitments_computed_total",
    "Credential commitments derived",
)

PROOFS_GENERATED = Counter(
    "passport_disclosure_proofs_total",
    "Selective-disclosure proof bundles produced",
)

VERIFICATIONS = Counter(
    "passport_verifications_total",
    "Verification outcomes by path and reason",
    ["kind", "reason"],  # kind: proof|credential; reason: "ok" or a ReasonCode
)

ACCESS_DENIALS = Counter(
    "passport_access_denied_total",
    "Operations rejected by the access controller",
    ["role", "operation"],
)

LEDGER_ERRORS = Counter(
    "passport_ledger_errors_total",
    "Ledger accessor calls that failed with an I/O error",
    ["operation"],
)

CREDENTIALS_ISSUED = Counter(
    "passport_credentials_issued_total",
    "Credentials written to the ledger",
)

CREDENTIALS_REVOKED = Counter(
    "passport_credentials_revoked_total",
    "Credentials transitioned to revoked",
)
