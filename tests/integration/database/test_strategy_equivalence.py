"""All three technologies return identical records for identical data."""

from collections.abc import AsyncGenerator
from datetime import date, datetime
from decimal import Decimal

import pytest

from worktrack.core.config import DatabaseConfig, Settings
from worktrack.domain.entities import Employee, Project, Ticket
from worktrack.domain.technology import DataAccessTechnology
from worktrack.infrastructure.database.factory import (
    ConnectionProviders,
    RepositorySet,
    create_connection_providers,
    create_repository_set,
)

pytestmark = pytest.mark.integration


@pytest.fixture
async def shared_providers(
    database_url: str, schema: None
) -> AsyncGenerator[ConnectionProviders]:
    _ = schema
    providers = create_connection_providers(
        Settings(database_config=DatabaseConfig(database_url=database_url))
    )
    yield providers
    await providers.close()


@pytest.fixture
def repository_sets(
    shared_providers: ConnectionProviders,
) -> dict[DataAccessTechnology, RepositorySet]:
    return {
        technology: create_repository_set(technology, shared_providers)
        for technology in DataAccessTechnology
    }


async def seed(repositories: RepositorySet) -> None:
    """Write a small data set through one technology."""
    lee = await repositories.employees.add(
        Employee(
            name="A. Lee",
            department="Eng",
            email="a@x.com",
            hire_date=date(2024, 1, 1),
            salary=Decimal("90000"),
        )
    )
    await repositories.employees.add(
        Employee(
            name="B. Kim",
            department="Eng",
            email="b@x.com",
            hire_date=date(2023, 6, 15),
            is_active=False,
        )
    )
    project = await repositories.projects.add(
        Project(name="P1", start_date=date(2024, 1, 1), budget=Decimal("1000.1"))
    )
    await repositories.projects.add(
        Project(name="P2", start_date=date(2024, 2, 1), status="Completed")
    )
    await repositories.tickets.add(
        Ticket(
            title="Bug",
            project_id=project,
            assigned_to=lee,
            created_date=datetime(2024, 1, 5, 10, 0),
            due_date=datetime(2024, 1, 10, 18, 0),
        )
    )
    await repositories.tickets.add(
        Ticket(title="Feature", project_id=project, status="Closed", priority="High")
    )


async def snapshot(repositories: RepositorySet) -> dict[str, object]:
    return {
        "employees": await repositories.employees.get_all(),
        "employee_1": await repositories.employees.get_by_id(1),
        "by_email": await repositories.employees.get_by_email("b@x.com"),
        "by_department": await repositories.employees.get_by_department("Eng"),
        "active_employees": await repositories.employees.get_active(),
        "projects": await repositories.projects.get_all(),
        "active_projects": await repositories.projects.get_active(),
        "completed": await repositories.projects.get_by_status("Completed"),
        "tickets": await repositories.tickets.get_all(),
        "open": await repositories.tickets.get_by_status("Open"),
        "for_employee": await repositories.tickets.get_by_employee(1),
        "for_project": await repositories.tickets.get_by_project(1),
        "counts": (
            await repositories.employees.count(),
            await repositories.projects.count(),
            await repositories.tickets.count(),
        ),
    }


@pytest.mark.parametrize("writer", list(DataAccessTechnology), ids=lambda t: t.value)
async def test_every_technology_reads_the_same_records(
    repository_sets: dict[DataAccessTechnology, RepositorySet],
    writer: DataAccessTechnology,
) -> None:
    await seed(repository_sets[writer])

    orm = await snapshot(repository_sets[DataAccessTechnology.ORM])
    core = await snapshot(repository_sets[DataAccessTechnology.CORE])
    raw_sql = await snapshot(repository_sets[DataAccessTechnology.RAW_SQL])

    assert orm == core == raw_sql
    assert orm["counts"] == (2, 2, 2)
