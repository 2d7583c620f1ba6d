"""Core application constants."""

# Redaction marker used in logs, health data and error context
REDACTED = "[REDACTED]"
