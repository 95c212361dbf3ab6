"""Middleware and exception handlers shared by every endpoint.

- **RequestContextMiddleware**: correlation ID propagation
- **RequestLoggingMiddleware**: request ID, timing and slow request warnings
- **error_handler**: maps exceptions to the catalog's response contract

Middleware run in reverse order of registration, so the request context is
established before the logging middleware binds its fields.
"""
