"""Repositories built on SQLAlchemy Core expressions.

Statements are composed from the ``Table`` objects of the shared metadata and
executed on an ``AsyncConnection``; no identity map or unit of work is
involved. Each call runs in its own transaction.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger
from sqlalchemy import ColumnElement, Row, Table, delete, func, insert, select, update

from worktrack.domain.entities import (
    DEFAULT_PROJECT_STATUS,
    Employee,
    Entity,
    Project,
    Ticket,
)
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.models import (
    employees_table,
    projects_table,
    tickets_table,
)
from worktrack.infrastructure.database.providers import CoreConnectionProvider
from worktrack.infrastructure.database.repositories.base import (
    data_access_operation,
    insert_values,
    update_values,
)

TECHNOLOGY = DataAccessTechnology.CORE


class CoreRepository[E: Entity]:
    """Generic Core repository over one table.

    Args:
        provider: Connection provider used for every call.
    """

    entity_type: type[E]
    table: Table

    def __init__(self, provider: CoreConnectionProvider) -> None:
        self.provider = provider

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    def _to_entity(self, row: Row[Any]) -> E:
        return self.entity_type.model_validate(dict(row._mapping))

    async def _select(
        self, operation: str, *criteria: ColumnElement[bool]
    ) -> list[E]:
        stmt = select(self.table).where(*criteria).order_by(self.table.c.id)
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.connect() as conn:
                result = await conn.execute(stmt)
                entities = [self._to_entity(row) for row in result]
        logger.debug("Retrieved {} {} rows", len(entities), self.entity_name)
        return entities

    async def _select_one(
        self, operation: str, *criteria: ColumnElement[bool]
    ) -> E | None:
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.connect() as conn:
                result = await conn.execute(select(self.table).where(*criteria))
                row = result.one_or_none()
        return self._to_entity(row) if row is not None else None

    async def get_by_id(self, entity_id: int) -> E | None:
        logger.debug("Fetching {} by ID: {}", self.entity_name, entity_id)
        return await self._select_one("get_by_id", self.table.c.id == entity_id)

    async def get_all(self) -> list[E]:
        return await self._select("get_all")

    async def add(self, entity: E) -> int:
        stmt = insert(self.table).values(**insert_values(entity))
        with data_access_operation(TECHNOLOGY, self.entity_name, "add"):
            async with self.provider.connect() as conn:
                result = await conn.execute(stmt)
                new_id = int(result.inserted_primary_key[0])
        logger.info("Inserted {} row with ID: {}", self.entity_name, new_id)
        return new_id

    async def update(self, entity: E) -> bool:
        if entity.id is None:
            return False
        stmt = (
            update(self.table)
            .where(self.table.c.id == entity.id)
            .values(**update_values(entity))
        )
        with data_access_operation(TECHNOLOGY, self.entity_name, "update"):
            async with self.provider.connect() as conn:
                result = await conn.execute(stmt)
                updated = result.rowcount > 0
        logger.debug("Update {} ID {} matched: {}", self.entity_name, entity.id, updated)
        return updated

    async def delete(self, entity_id: int) -> bool:
        stmt = delete(self.table).where(self.table.c.id == entity_id)
        with data_access_operation(TECHNOLOGY, self.entity_name, "delete"):
            async with self.provider.connect() as conn:
                result = await conn.execute(stmt)
                deleted = result.rowcount > 0
        if deleted:
            logger.info("Deleted {} row with ID: {}", self.entity_name, entity_id)
        return deleted

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.table)
        with data_access_operation(TECHNOLOGY, self.entity_name, "count"):
            async with self.provider.connect() as conn:
                return (await conn.scalar(stmt)) or 0


class EmployeeCoreRepository(CoreRepository[Employee]):
    """Employees through Core expressions."""

    entity_type = Employee
    table = employees_table

    async def get_by_email(self, email: str) -> Employee | None:
        return await self._select_one("get_by_email", self.table.c.email == email)

    async def get_by_department(self, department: str) -> list[Employee]:
        return await self._select(
            "get_by_department",
            self.table.c.department == department,
            self.table.c.is_active.is_(True),
        )

    async def get_active(self) -> list[Employee]:
        return await self._select("get_active", self.table.c.is_active.is_(True))


class ProjectCoreRepository(CoreRepository[Project]):
    """Projects through Core expressions."""

    entity_type = Project
    table = projects_table

    async def get_by_status(self, status: str) -> list[Project]:
        return await self._select("get_by_status", self.table.c.status == status)

    async def get_active(self) -> list[Project]:
        return await self._select(
            "get_active", self.table.c.status == DEFAULT_PROJECT_STATUS
        )


class TicketCoreRepository(CoreRepository[Ticket]):
    """Tickets through Core expressions."""

    entity_type = Ticket
    table = tickets_table

    async def get_by_status(self, status: str) -> Sequence[Ticket]:
        return await self._select("get_by_status", self.table.c.status == status)

    async def get_by_employee(self, employee_id: int) -> Sequence[Ticket]:
        return await self._select(
            "get_by_employee", self.table.c.assigned_to == employee_id
        )

    async def get_by_project(self, project_id: int) -> Sequence[Ticket]:
        return await self._select(
            "get_by_project", self.table.c.project_id == project_id
        )
