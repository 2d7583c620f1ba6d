"""HTTP API layer built on FastAPI.

Key components:
- **main**: application factory, technology binding and lifespan
- **routers**: employee, project, ticket and health endpoints
- **middleware**: correlation IDs, request logging and error handlers
- **schemas**: error responses and request bodies that are not domain records
- **utils**: orjson response rendering
"""
