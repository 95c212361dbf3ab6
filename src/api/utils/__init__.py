"""API-level helpers shared by the routers and exception handlers."""
