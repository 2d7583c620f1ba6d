"""Domain records for employees, projects and tickets.

These records are what every repository strategy returns, whatever the query
mechanism behind it. Relationships are expressed only through explicit
foreign-key fields (``Ticket.project_id``, ``Ticket.assigned_to``); a related
record is always obtained with a second, explicit fetch.

Timestamps are naive UTC datetimes so that every backend round-trips them in
the same representation.
"""

from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

MONEY_QUANTUM = Decimal("0.01")

DEFAULT_PROJECT_STATUS = "Active"
DEFAULT_TICKET_STATUS = "Open"
DEFAULT_TICKET_PRIORITY = "Medium"


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert aware datetimes to UTC and drop the offset."""
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def quantize_money(value: Decimal) -> Decimal:
    """Normalize a monetary amount to exactly two fractional digits."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]

Money = Annotated[
    Decimal,
    Field(max_digits=18, decimal_places=2, ge=0),
    AfterValidator(quantize_money),
]


class Entity(BaseModel):
    """Fields shared by all persisted records.

    ``id`` is assigned by the database. ``created_at`` and ``updated_at`` are
    stamped by the repository; values supplied by callers are ignored on
    ``add`` and ``update``.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    created_at: UtcDateTime | None = None
    updated_at: UtcDateTime | None = None


class EmployeeData(BaseModel):
    """Caller-supplied employee fields."""

    name: str = Field(max_length=100)
    department: str = Field(max_length=50)
    email: str = Field(max_length=100)
    hire_date: date
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=200)
    salary: Money = Decimal("0.00")
    is_active: bool = True


class Employee(Entity, EmployeeData):
    """A member of staff who can be assigned tickets."""


class ProjectData(BaseModel):
    """Caller-supplied project fields."""

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    start_date: date
    end_date: date | None = None
    status: str = Field(default=DEFAULT_PROJECT_STATUS, max_length=20)
    technology: str | None = Field(default=None, max_length=50)
    budget: Money = Decimal("0.00")
    client_name: str | None = Field(default=None, max_length=100)


class Project(Entity, ProjectData):
    """A client or internal project that owns tickets."""


class TicketData(BaseModel):
    """Caller-supplied ticket fields."""

    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=DEFAULT_TICKET_STATUS, max_length=20)
    priority: str = Field(default=DEFAULT_TICKET_PRIORITY, max_length=20)
    created_date: UtcDateTime = Field(default_factory=utc_now)
    due_date: UtcDateTime | None = None
    resolved_date: UtcDateTime | None = None
    assigned_to: int | None = None
    project_id: int
    resolution: str | None = Field(default=None, max_length=500)


class Ticket(Entity, TicketData):
    """A support ticket raised against a project."""
