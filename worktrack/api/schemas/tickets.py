"""Request bodies for ticket endpoints.

Creation and modification dates are owned by the server, so none of these
bodies accept ``created_date`` or ``resolved_date``.
"""

from pydantic import BaseModel, Field

from worktrack.domain.entities import (
    DEFAULT_TICKET_PRIORITY,
    DEFAULT_TICKET_STATUS,
    UtcDateTime,
)


class TicketRequest(BaseModel):
    """Fields a caller may set when creating or replacing a ticket."""

    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=DEFAULT_TICKET_STATUS, max_length=20)
    priority: str = Field(default=DEFAULT_TICKET_PRIORITY, max_length=20)
    due_date: UtcDateTime | None = None
    assigned_to: int | None = None
    project_id: int = Field(..., ge=1)
    resolution: str | None = Field(default=None, max_length=500)


class TicketStatusUpdate(BaseModel):
    """New status for a ticket."""

    status: str = Field(
        ..., min_length=1, max_length=20, examples=["In Progress", "Resolved"]
    )


class TicketAssignment(BaseModel):
    """Employee a ticket is assigned to."""

    employee_id: int = Field(..., ge=1, examples=[3])
