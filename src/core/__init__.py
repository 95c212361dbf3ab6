"""Cross-cutting functionality shared by every layer of the catalog service.

- **config**: Typed settings loaded from the environment
- **context**: Correlation and request IDs carried across await points
- **exceptions**: Application error hierarchy with error codes
- **error_context**: Redaction of sensitive values before logging
- **logging**: Loguru setup with console and JSON formatters
- **observability**: OpenTelemetry tracing
"""
