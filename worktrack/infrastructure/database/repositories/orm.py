"""Repositories built on the SQLAlchemy ORM.

Rows are loaded as mapped objects through an ``AsyncSession`` and converted
to domain records before the session closes. Updates go through the unit of
work: the mapped object is loaded, mutated and flushed.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger
from sqlalchemy import Select, func, select
from sqlalchemy import delete as sql_delete

from worktrack.domain.entities import (
    DEFAULT_PROJECT_STATUS,
    Employee,
    Entity,
    Project,
    Ticket,
)
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.base import EntityModel
from worktrack.infrastructure.database.models import (
    EmployeeModel,
    ProjectModel,
    TicketModel,
)
from worktrack.infrastructure.database.providers import OrmSessionProvider
from worktrack.infrastructure.database.repositories.base import (
    data_access_operation,
    insert_values,
    update_values,
)

TECHNOLOGY = DataAccessTechnology.ORM


class OrmRepository[E: Entity, M: EntityModel]:
    """Generic ORM repository.

    Args:
        provider: Session provider used for every call.

    Example:
        class EmployeeOrmRepository(OrmRepository[Employee, EmployeeModel]):
            entity_type = Employee
            model_type = EmployeeModel
    """

    entity_type: type[E]
    model_type: type[M]

    def __init__(self, provider: OrmSessionProvider) -> None:
        self.provider = provider

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    def _to_entity(self, instance: M) -> E:
        return self.entity_type.model_validate(instance)

    async def _fetch_all(self, stmt: Select[Any], operation: str) -> list[E]:
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.session() as session:
                result = await session.scalars(stmt.order_by(self.model_type.id))
                entities = [self._to_entity(instance) for instance in result.all()]
        logger.debug("Retrieved {} {} instances", len(entities), self.entity_name)
        return entities

    async def _fetch_one(self, stmt: Select[Any], operation: str) -> E | None:
        with data_access_operation(TECHNOLOGY, self.entity_name, operation):
            async with self.provider.session() as session:
                instance = (await session.scalars(stmt)).one_or_none()
                return self._to_entity(instance) if instance is not None else None

    async def get_by_id(self, entity_id: int) -> E | None:
        logger.debug("Fetching {} by ID: {}", self.entity_name, entity_id)
        with data_access_operation(TECHNOLOGY, self.entity_name, "get_by_id"):
            async with self.provider.session() as session:
                instance = await session.get(self.model_type, entity_id)
                return self._to_entity(instance) if instance is not None else None

    async def get_all(self) -> list[E]:
        return await self._fetch_all(select(self.model_type), "get_all")

    async def add(self, entity: E) -> int:
        with data_access_operation(TECHNOLOGY, self.entity_name, "add"):
            async with self.provider.session() as session:
                instance = self.model_type(**insert_values(entity))
                session.add(instance)
                await session.flush()
                new_id = instance.id
        logger.info("Created {} instance with ID: {}", self.entity_name, new_id)
        return new_id

    async def update(self, entity: E) -> bool:
        if entity.id is None:
            return False
        with data_access_operation(TECHNOLOGY, self.entity_name, "update"):
            async with self.provider.session() as session:
                instance = await session.get(self.model_type, entity.id)
                if instance is None:
                    logger.debug(
                        "{} instance not found for update - ID: {}",
                        self.entity_name,
                        entity.id,
                    )
                    return False
                for key, value in update_values(entity).items():
                    setattr(instance, key, value)
        logger.info("Updated {} instance ID {}", self.entity_name, entity.id)
        return True

    async def delete(self, entity_id: int) -> bool:
        with data_access_operation(TECHNOLOGY, self.entity_name, "delete"):
            async with self.provider.session() as session:
                stmt = sql_delete(self.model_type).where(
                    self.model_type.id == entity_id
                )
                result = await session.execute(stmt)
                deleted = bool(result.rowcount)
        if deleted:
            logger.info("Deleted {} instance with ID: {}", self.entity_name, entity_id)
        return deleted

    async def count(self) -> int:
        with data_access_operation(TECHNOLOGY, self.entity_name, "count"):
            async with self.provider.session() as session:
                stmt = select(func.count()).select_from(self.model_type)
                return (await session.scalar(stmt)) or 0


class EmployeeOrmRepository(OrmRepository[Employee, EmployeeModel]):
    """Employees through the ORM."""

    entity_type = Employee
    model_type = EmployeeModel

    async def get_by_email(self, email: str) -> Employee | None:
        stmt = select(EmployeeModel).where(EmployeeModel.email == email)
        return await self._fetch_one(stmt, "get_by_email")

    async def get_by_department(self, department: str) -> list[Employee]:
        stmt = select(EmployeeModel).where(
            EmployeeModel.department == department,
            EmployeeModel.is_active.is_(True),
        )
        return await self._fetch_all(stmt, "get_by_department")

    async def get_active(self) -> list[Employee]:
        stmt = select(EmployeeModel).where(EmployeeModel.is_active.is_(True))
        return await self._fetch_all(stmt, "get_active")


class ProjectOrmRepository(OrmRepository[Project, ProjectModel]):
    """Projects through the ORM."""

    entity_type = Project
    model_type = ProjectModel

    async def get_by_status(self, status: str) -> list[Project]:
        stmt = select(ProjectModel).where(ProjectModel.status == status)
        return await self._fetch_all(stmt, "get_by_status")

    async def get_active(self) -> list[Project]:
        stmt = select(ProjectModel).where(ProjectModel.status == DEFAULT_PROJECT_STATUS)
        return await self._fetch_all(stmt, "get_active")


class TicketOrmRepository(OrmRepository[Ticket, TicketModel]):
    """Tickets through the ORM."""

    entity_type = Ticket
    model_type = TicketModel

    async def get_by_status(self, status: str) -> Sequence[Ticket]:
        stmt = select(TicketModel).where(TicketModel.status == status)
        return await self._fetch_all(stmt, "get_by_status")

    async def get_by_employee(self, employee_id: int) -> Sequence[Ticket]:
        stmt = select(TicketModel).where(TicketModel.assigned_to == employee_id)
        return await self._fetch_all(stmt, "get_by_employee")

    async def get_by_project(self, project_id: int) -> Sequence[Ticket]:
        stmt = select(TicketModel).where(TicketModel.project_id == project_id)
        return await self._fetch_all(stmt, "get_by_project")
