"""Infrastructure layer: persistence and other external integrations.

The only external system today is the relational database, reached through
the async SQLAlchemy engine in ``src.infrastructure.database``.
"""
