"""Type aliases for dynamic data structures throughout the application."""

from typing import Any

# Diagnostic key/value data attached to a health check result
type HealthData = dict[str, Any]
