"""Table mappings for employees, projects, tickets and migration history.

The mapped classes serve the ORM technology directly. Their ``__table__``
objects are what the Core technology builds statements from, and the raw SQL
technology writes its text against the same table and column names.

No ``relationship()`` is declared: related rows are always fetched with an
explicit second query.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import cast

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column

from worktrack.domain.entities import (
    DEFAULT_PROJECT_STATUS,
    DEFAULT_TICKET_PRIORITY,
    DEFAULT_TICKET_STATUS,
)
from worktrack.infrastructure.constants import (
    EMPLOYEES_TABLE,
    PROJECTS_TABLE,
    SCHEMA_MIGRATIONS_TABLE,
    TICKETS_TABLE,
)
from worktrack.infrastructure.database.base import Base, EntityModel, IdType

Money = Numeric(18, 2, asdecimal=True)


class EmployeeModel(EntityModel):
    """Row of the ``employees`` table."""

    __tablename__ = EMPLOYEES_TABLE

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(String(200))
    salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ProjectModel(EntityModel):
    """Row of the ``projects`` table."""

    __tablename__ = PROJECTS_TABLE

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_PROJECT_STATUS, index=True
    )
    technology: Mapped[str | None] = mapped_column(String(50))
    budget: Mapped[Decimal] = mapped_column(Money, nullable=False)
    client_name: Mapped[str | None] = mapped_column(String(100))


class TicketModel(EntityModel):
    """Row of the ``tickets`` table.

    Deleting the project removes its tickets; deleting the assignee clears
    ``assigned_to``.
    """

    __tablename__ = TICKETS_TABLE

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_TICKET_STATUS, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_TICKET_PRIORITY
    )
    created_date: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime())
    resolved_date: Mapped[datetime | None] = mapped_column(DateTime())
    assigned_to: Mapped[int | None] = mapped_column(
        IdType,
        ForeignKey(f"{EMPLOYEES_TABLE}.id", ondelete="SET NULL"),
        index=True,
    )
    project_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey(f"{PROJECTS_TABLE}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resolution: Mapped[str | None] = mapped_column(String(500))


class SchemaMigrationModel(Base):
    """One row per applied Alembic revision."""

    __tablename__ = SCHEMA_MIGRATIONS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    revision: Mapped[str] = mapped_column(String(64), nullable=False)
    applied_at: Mapped[datetime] = mapped_column(DateTime(), nullable=False)


employees_table = cast("Table", EmployeeModel.__table__)
projects_table = cast("Table", ProjectModel.__table__)
tickets_table = cast("Table", TicketModel.__table__)
schema_migrations_table = cast("Table", SchemaMigrationModel.__table__)
