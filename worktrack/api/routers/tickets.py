"""Ticket endpoints.

Tickets reference a project and optionally an employee. Both references are
checked before anything is written; a missing target is a validation error.
"""

from fastapi import APIRouter, status
from fastapi.responses import Response

from worktrack.api.schemas.tickets import (
    TicketAssignment,
    TicketRequest,
    TicketStatusUpdate,
)
from worktrack.core.exceptions import NotFoundError, ValidationError
from worktrack.domain.entities import Ticket
from worktrack.infrastructure.database.dependencies import Employees, Projects, Tickets

router = APIRouter(prefix="/tickets", tags=["tickets"])


def ticket_not_found(ticket_id: int) -> NotFoundError:
    return NotFoundError(
        f"Ticket with ID {ticket_id} not found",
        context={"ticket_id": ticket_id},
    )


async def ensure_references_exist(
    project_id: int | None,
    employee_id: int | None,
    projects: Projects,
    employees: Employees,
) -> None:
    """Raise ValidationError when a referenced project or employee is missing."""
    if project_id is not None and await projects.get_by_id(project_id) is None:
        raise ValidationError(
            f"Project with ID {project_id} does not exist",
            context={"project_id": project_id},
        )
    if employee_id is not None and await employees.get_by_id(employee_id) is None:
        raise ValidationError(
            f"Employee with ID {employee_id} does not exist",
            context={"employee_id": employee_id},
        )


async def get_existing_ticket(ticket_id: int, tickets: Tickets) -> Ticket:
    ticket = await tickets.get_by_id(ticket_id)
    if ticket is None:
        raise ticket_not_found(ticket_id)
    return ticket


@router.get("", response_model=list[Ticket])
async def list_tickets(tickets: Tickets) -> list[Ticket]:
    return list(await tickets.get_all())


@router.get("/status/{ticket_status}", response_model=list[Ticket])
async def list_tickets_by_status(ticket_status: str, tickets: Tickets) -> list[Ticket]:
    return list(await tickets.get_by_status(ticket_status))


@router.get("/employee/{employee_id}", response_model=list[Ticket])
async def list_tickets_by_employee(employee_id: int, tickets: Tickets) -> list[Ticket]:
    return list(await tickets.get_by_employee(employee_id))


@router.get("/project/{project_id}", response_model=list[Ticket])
async def list_tickets_by_project(project_id: int, tickets: Tickets) -> list[Ticket]:
    return list(await tickets.get_by_project(project_id))


@router.get("/{ticket_id}", response_model=Ticket)
async def get_ticket(ticket_id: int, tickets: Tickets) -> Ticket:
    return await get_existing_ticket(ticket_id, tickets)


@router.post("", response_model=Ticket, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    body: TicketRequest, tickets: Tickets, projects: Projects, employees: Employees
) -> Ticket:
    await ensure_references_exist(body.project_id, body.assigned_to, projects, employees)
    # created_date falls back to the server clock
    new_id = await tickets.add(Ticket.model_validate(body.model_dump()))
    return await get_existing_ticket(new_id, tickets)


@router.put("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_ticket(
    ticket_id: int,
    body: TicketRequest,
    tickets: Tickets,
    projects: Projects,
    employees: Employees,
) -> Response:
    """Replace the caller-editable fields, keeping creation and resolution dates."""
    ticket = await get_existing_ticket(ticket_id, tickets)
    await ensure_references_exist(body.project_id, body.assigned_to, projects, employees)
    if not await tickets.update(ticket.model_copy(update=body.model_dump())):
        raise ticket_not_found(ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{ticket_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_ticket_status(
    ticket_id: int, body: TicketStatusUpdate, tickets: Tickets
) -> Response:
    ticket = await get_existing_ticket(ticket_id, tickets)
    if not await tickets.update(ticket.model_copy(update={"status": body.status})):
        raise ticket_not_found(ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{ticket_id}/assign", status_code=status.HTTP_204_NO_CONTENT)
async def assign_ticket(
    ticket_id: int,
    body: TicketAssignment,
    tickets: Tickets,
    projects: Projects,
    employees: Employees,
) -> Response:
    ticket = await get_existing_ticket(ticket_id, tickets)
    await ensure_references_exist(None, body.employee_id, projects, employees)
    assigned = ticket.model_copy(update={"assigned_to": body.employee_id})
    if not await tickets.update(assigned):
        raise ticket_not_found(ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ticket(ticket_id: int, tickets: Tickets) -> Response:
    if not await tickets.delete(ticket_id):
        raise ticket_not_found(ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
