"""Product Catalog API.

A FastAPI service exposing CRUD operations for products stored in a
relational database.

Architecture Overview:
- **API Layer**: Routers, request validation rules, middleware and error handlers
- **Core Layer**: Configuration, logging, tracing and the error hierarchy
- **Domain Layer**: The Product model and its repository
- **Infrastructure Layer**: Async SQLAlchemy engine, sessions and base repository
"""
