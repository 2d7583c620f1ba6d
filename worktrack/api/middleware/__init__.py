"""Middleware and exception handlers shared by every endpoint.

Execution order for a request:
1. RequestContextMiddleware sets up the correlation ID
2. RequestLoggingMiddleware logs with that correlation context
3. Exception handlers turn errors into ErrorResponse bodies
"""
