"""Repositories that execute hand-written SQL text.

Statements are plain SQL strings with named parameters, executed through
``text()`` on an ``AsyncConnection``. Parameter and result types are declared
on each statement so dates, timestamps, decimals and booleans round-trip
identically on PostgreSQL and SQLite.

``INSERT ... RETURNING id`` is used to obtain new keys, which both supported
backends accept.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from loguru import logger
from sqlalchemy import Row, Table, TextClause, bindparam, text
from sqlalchemy.sql.selectable import TextualSelect
from sqlalchemy.types import TypeEngine

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
from worktrack.infrastructure.database.providers import RawSqlConnectionProvider
from worktrack.infrastructure.database.repositories.base import (
    data_access_operation,
    insert_values,
    update_values,
)

TECHNOLOGY = DataAccessTechnology.RAW_SQL


def column_types(table: Table) -> dict[str, TypeEngine[Any]]:
    """Map column names to their SQL types for typing textual statements."""
    return {column.name: column.type for column in table.c}


class RawSqlRepository[E: Entity]:
    """Generic raw SQL repository over one table.

    Args:
        provider: Connection provider used for every call.
    """

    entity_type: type[E]
    table_name: str
    types: Mapping[str, TypeEngine[Any]]

    def __init__(self, provider: RawSqlConnectionProvider) -> None:
        self.provider = provider
        self.select_sql = (
            f"SELECT {', '.join(self.types)} FROM {self.table_name}"  # noqa: S608
        )

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    def _bind(self, sql: str, params: Iterable[str]) -> TextClause:
        return text(sql).bindparams(
            *(bindparam(name, type_=self.types[name]) for name in params)
        )

    def _query(self, sql: str, *params: str) -> TextualSelect:
        return self._bind(sql, params).columns(**self.types)

    def _to_entity(self, row: Row[Any]) -> E:
        return self.entity_type.model_validate(dict(row._mapping))

    async def _select(
        self, operation: str, where: str = "", **params: object
    ) -> list[E]:
        sql = f"{self.select_sql}{f' WHERE {where}' if where else ''} ORDER BY id"
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.connect() as conn:
                result = await conn.execute(self._query(sql, *params), params)
                entities = [self._to_entity(row) for row in result]
        logger.debug("Retrieved {} {} rows", len(entities), self.entity_name)
        return entities

    async def _select_one(
        self, operation: str, where: str, **params: object
    ) -> E | None:
        sql = f"{self.select_sql} WHERE {where}"
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.connect() as conn:
                result = await conn.execute(self._query(sql, *params), params)
                row = result.one_or_none()
        return self._to_entity(row) if row is not None else None

    async def _execute(
        self, operation: str, stmt: TextClause, params: Mapping[str, object]
    ) -> int:
        """Run a data-modifying statement and return the affected row count."""
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.connect() as conn:
                result = await conn.execute(stmt, dict(params))
                return result.rowcount

    async def get_by_id(self, entity_id: int) -> E | None:
        logger.debug("Fetching {} by ID: {}", self.entity_name, entity_id)
        return await self._select_one("get_by_id", "id = :id", id=entity_id)

    async def get_all(self) -> list[E]:
        return await self._select("get_all")

    async def add(self, entity: E) -> int:
        values = insert_values(entity)
        sql = (
            f"INSERT INTO {self.table_name} ({', '.join(values)}) "  # noqa: S608
            f"VALUES ({', '.join(f':{name}' for name in values)}) RETURNING id"
        )
        with data_access_operation(TECHNOLOGY, self.entity_name, "add"):
            async with self.provider.connect() as conn:
                result = await conn.execute(self._bind(sql, values), values)
                new_id = int(result.scalar_one())
        logger.info("Inserted {} row with ID: {}", self.entity_name, new_id)
        return new_id

    async def update(self, entity: E) -> bool:
        if entity.id is None:
            return False
        values = update_values(entity)
        assignments = ", ".join(f"{name} = :{name}" for name in values)
        sql = f"UPDATE {self.table_name} SET {assignments} WHERE id = :id"  # noqa: S608
        params = {**values, "id": entity.id}
        updated = await self._execute("update", self._bind(sql, params), params) > 0
        logger.debug("Update {} ID {} matched: {}", self.entity_name, entity.id, updated)
        return updated

    async def delete(self, entity_id: int) -> bool:
        sql = f"DELETE FROM {self.table_name} WHERE id = :id"  # noqa: S608
        params = {"id": entity_id}
        deleted = await self._execute("delete", self._bind(sql, params), params) > 0
        if deleted:
            logger.info("Deleted {} row with ID: {}", self.entity_name, entity_id)
        return deleted

    async def count(self) -> int:
        sql = f"SELECT COUNT(*) FROM {self.table_name}"  # noqa: S608
        with data_access_operation(TECHNOLOGY, self.entity_name, "count"):
            async with self.provider.connect() as conn:
                return (await conn.scalar(text(sql))) or 0


class EmployeeRawSqlRepository(RawSqlRepository[Employee]):
    """Employees through hand-written SQL."""

    entity_type = Employee
    table_name = employees_table.name
    types = column_types(employees_table)

    async def get_by_email(self, email: str) -> Employee | None:
        return await self._select_one("get_by_email", "email = :email", email=email)

    async def get_by_department(self, department: str) -> list[Employee]:
        return await self._select(
            "get_by_department",
            "department = :department AND is_active = :is_active",
            department=department,
            is_active=True,
        )

    async def get_active(self) -> list[Employee]:
        return await self._select(
            "get_active", "is_active = :is_active", is_active=True
        )


class ProjectRawSqlRepository(RawSqlRepository[Project]):
    """Projects through hand-written SQL."""

    entity_type = Project
    table_name = projects_table.name
    types = column_types(projects_table)

    async def get_by_status(self, status: str) -> list[Project]:
        return await self._select("get_by_status", "status = :status", status=status)

    async def get_active(self) -> list[Project]:
        return await self._select(
            "get_active", "status = :status", status=DEFAULT_PROJECT_STATUS
        )


class TicketRawSqlRepository(RawSqlRepository[Ticket]):
    """Tickets through hand-written SQL."""

    entity_type = Ticket
    table_name = tickets_table.name
    types = column_types(tickets_table)

    async def get_by_status(self, status: str) -> Sequence[Ticket]:
        return await self._select("get_by_status", "status = :status", status=status)

    async def get_by_employee(self, employee_id: int) -> Sequence[Ticket]:
        return await self._select(
            "get_by_employee", "assigned_to = :assigned_to", assigned_to=employee_id
        )

    async def get_by_project(self, project_id: int) -> Sequence[Ticket]:
        return await self._select(
            "get_by_project", "project_id = :project_id", project_id=project_id
        )
