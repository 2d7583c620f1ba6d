"""Infrastructure-related constants, particularly for the database."""

POOL_RECYCLE_SECONDS = 3600  # 1 hour
COMMAND_TIMEOUT_SECONDS = 60

# Naming convention for constraints so Alembic autogenerate stays stable
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

EMPLOYEES_TABLE = "employees"
PROJECTS_TABLE = "projects"
TICKETS_TABLE = "tickets"
SCHEMA_MIGRATIONS_TABLE = "schema_migrations"

DIAGNOSTIC_QUERY = "SELECT 1"

# Textual server version query per SQLAlchemy dialect name
SERVER_VERSION_QUERIES = {
    "postgresql": "SELECT version()",
    "sqlite": "SELECT sqlite_version()",
}

ENTITY_TABLES = (EMPLOYEES_TABLE, PROJECTS_TABLE, TICKETS_TABLE)
