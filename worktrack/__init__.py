"""Worktrack - employee, project and ticket tracking service.

The same CRUD surface is served by one of three interchangeable data access
technologies (SQLAlchemy ORM, SQLAlchemy Core or raw SQL), chosen once at
startup. Health diagnostics probe all three and grade each failure by
whether that technology is the one serving live traffic.

Architecture Overview:
- **API Layer**: FastAPI routers, middleware and error responses
- **Core Layer**: configuration, logging, tracing and the exception hierarchy
- **Domain Layer**: records, repository contracts and health models
- **Infrastructure Layer**: providers, repositories and health checkers
"""
