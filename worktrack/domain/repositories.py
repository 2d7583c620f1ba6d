"""Repository contracts shared by every data access technology.

Each technology ships one implementation of every protocol below. The
implementations must be observably identical for the same stored data:

- absence is signaled by ``None`` (or ``False`` for update/delete), never by
  an exception;
- sequences are ordered by primary key;
- the repository, not the caller, stamps ``created_at`` on ``add`` and
  ``updated_at`` on ``update``;
- connectivity or query failures surface as
  :class:`~worktrack.core.exceptions.DataAccessError`.
"""

from collections.abc import Sequence
from typing import Protocol

from worktrack.domain.entities import Employee, Entity, Project, Ticket


class Repository[T: Entity](Protocol):
    """Generic CRUD capability for one entity type."""

    async def get_by_id(self, entity_id: int) -> T | None:
        """Return the entity with the given id, or None when absent."""
        ...

    async def get_all(self) -> Sequence[T]:
        """Return every stored entity ordered by id."""
        ...

    async def add(self, entity: T) -> int:
        """Persist a new entity and return its database-assigned id."""
        ...

    async def update(self, entity: T) -> bool:
        """Overwrite the stored entity with ``entity.id``.

        Returns False, without creating anything, when no such row exists.
        """
        ...

    async def delete(self, entity_id: int) -> bool:
        """Physically remove the entity; False when it does not exist."""
        ...

    async def count(self) -> int:
        """Return the number of stored entities."""
        ...


class EmployeeRepository(Repository[Employee], Protocol):
    """Employee persistence with email, department and activity lookups."""

    async def get_by_email(self, email: str) -> Employee | None:
        """Return the employee with this exact email, if any."""
        ...

    async def get_by_department(self, department: str) -> Sequence[Employee]:
        """Return the active employees of a department."""
        ...

    async def get_active(self) -> Sequence[Employee]:
        """Return employees whose ``is_active`` flag is set."""
        ...


class ProjectRepository(Repository[Project], Protocol):
    """Project persistence with status lookups."""

    async def get_by_status(self, status: str) -> Sequence[Project]:
        """Return projects whose status equals ``status`` exactly."""
        ...

    async def get_active(self) -> Sequence[Project]:
        """Return projects whose status is literally ``"Active"``."""
        ...


class TicketRepository(Repository[Ticket], Protocol):
    """Ticket persistence with status, assignee and project lookups."""

    async def get_by_status(self, status: str) -> Sequence[Ticket]:
        """Return tickets whose status equals ``status`` exactly."""
        ...

    async def get_by_employee(self, employee_id: int) -> Sequence[Ticket]:
        """Return tickets assigned to the employee."""
        ...

    async def get_by_project(self, project_id: int) -> Sequence[Ticket]:
        """Return tickets belonging to the project."""
        ...
