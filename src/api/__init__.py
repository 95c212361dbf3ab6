"""HTTP layer of the product catalog.

- **main**: application factory and lifespan
- **routers**: the ``/api/products`` endpoints
- **validation**: declarative request validation rules
- **middleware**: correlation IDs, request logging and exception handlers
- **schemas**: Pydantic request, response and error bodies
- **utils**: orjson response class
"""
