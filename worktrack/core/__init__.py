"""Cross-cutting building blocks shared by every layer of Worktrack.

- **config**: typed settings, including the data access technology selector
- **context**: correlation ID storage
- **exceptions**: error codes, severities and the exception hierarchy
- **error_context**: redaction of secrets in logs and health output
- **logging**: loguru setup with console and JSON output
- **observability**: OpenTelemetry tracing
- **types**: shared type aliases
"""
