"""Data access technologies that can serve CRUD traffic.

Every technology is a complete strategy family: one repository per entity
plus one health checker. Exactly one of them is active per process.
"""

from enum import Enum


class DataAccessTechnology(Enum):
    """Interchangeable query execution mechanisms over the same schema."""

    ORM = "orm"
    """SQLAlchemy ORM sessions with mapped classes."""

    CORE = "core"
    """SQLAlchemy Core expression language on plain connections."""

    RAW_SQL = "raw_sql"
    """Hand-written textual SQL with bound parameters."""

    @property
    def component_name(self) -> str:
        """Human-readable name used in health reports."""
        return _COMPONENT_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> "DataAccessTechnology":
        """Resolve a configured value, accepting common aliases.

        Args:
            value: Configured technology name (case-insensitive).

        Returns:
            DataAccessTechnology: The matching technology.

        Raises:
            ValueError: If the value names no known technology.
        """
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return _ALIASES[key]
        except KeyError:
            known = ", ".join(member.value for member in cls)
            msg = f"Unknown data access technology '{value}' (expected one of: {known})"
            raise ValueError(msg) from None


_COMPONENT_NAMES = {
    DataAccessTechnology.ORM: "SQLAlchemy ORM",
    DataAccessTechnology.CORE: "SQLAlchemy Core",
    DataAccessTechnology.RAW_SQL: "Raw SQL",
}

_ALIASES = {
    "orm": DataAccessTechnology.ORM,
    "sqlalchemy_orm": DataAccessTechnology.ORM,
    "core": DataAccessTechnology.CORE,
    "sqlalchemy_core": DataAccessTechnology.CORE,
    "raw_sql": DataAccessTechnology.RAW_SQL,
    "raw": DataAccessTechnology.RAW_SQL,
    "text": DataAccessTechnology.RAW_SQL,
}
