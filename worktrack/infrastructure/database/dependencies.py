"""FastAPI dependencies exposing the repository set bound at startup.

Handlers depend on the repository protocols only; which technology serves
them was decided once, when the application started.
"""

from typing import Annotated

from fastapi import Depends, Request

from worktrack.domain.repositories import (
    EmployeeRepository,
    ProjectRepository,
    TicketRepository,
)
from worktrack.infrastructure.database.factory import RepositorySet


def get_repository_set(request: Request) -> RepositorySet:
    """Return the repository set stored on the application state."""
    repositories: RepositorySet = request.app.state.repositories
    return repositories


def get_employee_repository(
    repositories: Annotated[RepositorySet, Depends(get_repository_set)],
) -> EmployeeRepository:
    return repositories.employees


def get_project_repository(
    repositories: Annotated[RepositorySet, Depends(get_repository_set)],
) -> ProjectRepository:
    return repositories.projects


def get_ticket_repository(
    repositories: Annotated[RepositorySet, Depends(get_repository_set)],
) -> TicketRepository:
    return repositories.tickets


# Type aliases for cleaner dependency injection
Employees = Annotated[EmployeeRepository, Depends(get_employee_repository)]
Projects = Annotated[ProjectRepository, Depends(get_project_repository)]
Tickets = Annotated[TicketRepository, Depends(get_ticket_repository)]
