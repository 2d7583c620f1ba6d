"""API-related constants."""

API_PREFIX = "/api"

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Health endpoint status codes by overall status
HTTP_206_PARTIAL_CONTENT = 206
HTTP_503_SERVICE_UNAVAILABLE = 503
