"""SQLAlchemy declarative base and the fields shared by every table.

Timestamps are stored as naive UTC ``DateTime`` so that SQLite and PostgreSQL
return identical values through all three data access technologies. They are
set by the repositories, not by server defaults.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from worktrack.infrastructure.constants import NAMING_CONVENTION

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """Declarative base carrying the constraint naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class EntityModel(Base):
    """Abstract table with a surrogate key and audit timestamps."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        IdType,
        primary_key=True,
        autoincrement=True,
        doc="Database-assigned primary key",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(),
        nullable=False,
        doc="Set by the repository when the row is added (UTC)",
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(),
        nullable=True,
        doc="Set by the repository on every update (UTC)",
    )

    def __repr__(self) -> str:
        """Return ``<ClassName(id=...)>``."""
        return f"<{self.__class__.__name__}(id={self.id})>"
