"""Pydantic models for request parsing, response serialization and OpenAPI docs."""
