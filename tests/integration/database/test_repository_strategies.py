"""Repository behavior, run against SQLite once per data access technology."""

from datetime import date, datetime
from decimal import Decimal

import pytest
import pytest_check

from worktrack.core.exceptions import DataAccessError
from worktrack.domain.entities import Employee, Project, Ticket
from worktrack.infrastructure.database.factory import RepositorySet

pytestmark = pytest.mark.integration


def make_employee(email: str = "a@x.com", **overrides: object) -> Employee:
    fields: dict[str, object] = {
        "name": "A. Lee",
        "department": "Eng",
        "email": email,
        "hire_date": date(2024, 1, 1),
        "salary": Decimal("85000.50"),
    }
    return Employee.model_validate({**fields, **overrides})


def make_project(**overrides: object) -> Project:
    fields: dict[str, object] = {
        "name": "P1",
        "start_date": date(2024, 1, 1),
        "budget": Decimal("120000"),
        "client_name": "Acme",
    }
    return Project.model_validate({**fields, **overrides})


def make_ticket(project_id: int, **overrides: object) -> Ticket:
    fields: dict[str, object] = {
        "title": "Bug",
        "project_id": project_id,
        "created_date": datetime(2024, 2, 1, 9, 30),
    }
    return Ticket.model_validate({**fields, **overrides})


class TestRoundTrip:
    async def test_add_then_get_by_id(self, repositories: RepositorySet) -> None:
        employee = make_employee(phone="555-0100", is_active=False)

        new_id = await repositories.employees.add(employee)
        stored = await repositories.employees.get_by_id(new_id)

        assert stored is not None
        with pytest_check.check:
            assert stored.id == new_id
        with pytest_check.check:
            assert stored.created_at is not None
        with pytest_check.check:
            assert stored.updated_at is None
        with pytest_check.check:
            assert stored.model_dump(exclude={"id", "created_at"}) == (
                employee.model_dump(exclude={"id", "created_at"})
            )

    async def test_ticket_round_trip_preserves_types(
        self, repositories: RepositorySet
    ) -> None:
        project_id = await repositories.projects.add(make_project())
        ticket = make_ticket(project_id, due_date=datetime(2024, 3, 1, 17, 0))

        stored = await repositories.tickets.get_by_id(
            await repositories.tickets.add(ticket)
        )

        assert stored is not None
        assert stored.created_date == datetime(2024, 2, 1, 9, 30)
        assert stored.due_date == datetime(2024, 3, 1, 17, 0)
        assert stored.status == "Open"
        assert stored.priority == "Medium"

    async def test_ids_are_sequential(self, repositories: RepositorySet) -> None:
        first = await repositories.projects.add(make_project(name="P1"))
        second = await repositories.projects.add(make_project(name="P2"))

        assert (first, second) == (1, 2)

    async def test_get_by_id_missing_returns_none(
        self, repositories: RepositorySet
    ) -> None:
        assert await repositories.employees.get_by_id(999) is None
        assert await repositories.projects.get_by_id(999) is None
        assert await repositories.tickets.get_by_id(999) is None


class TestUpdate:
    async def test_update_existing(self, repositories: RepositorySet) -> None:
        new_id = await repositories.projects.add(make_project())
        stored = await repositories.projects.get_by_id(new_id)
        assert stored is not None

        changed = stored.model_copy(update={"status": "Completed"})
        assert await repositories.projects.update(changed) is True

        updated = await repositories.projects.get_by_id(new_id)
        assert updated is not None
        assert updated.status == "Completed"
        assert updated.updated_at is not None
        assert updated.created_at == stored.created_at

    async def test_update_missing_returns_false_without_insert(
        self, repositories: RepositorySet
    ) -> None:
        ghost = make_employee().model_copy(update={"id": 999})

        assert await repositories.employees.update(ghost) is False
        assert await repositories.employees.count() == 0

    async def test_update_without_id_returns_false(
        self, repositories: RepositorySet
    ) -> None:
        assert await repositories.employees.update(make_employee()) is False


class TestDelete:
    async def test_delete_missing_returns_false(
        self, repositories: RepositorySet
    ) -> None:
        assert await repositories.tickets.delete(999) is False

    async def test_delete_ticket_removes_only_that_row(
        self, repositories: RepositorySet
    ) -> None:
        project_id = await repositories.projects.add(make_project())
        keep = await repositories.tickets.add(make_ticket(project_id, title="Keep"))
        drop = await repositories.tickets.add(make_ticket(project_id, title="Drop"))

        assert await repositories.tickets.delete(drop) is True

        remaining = await repositories.tickets.get_all()
        assert [t.id for t in remaining] == [keep]

    async def test_delete_project_cascades_to_tickets(
        self, repositories: RepositorySet
    ) -> None:
        doomed = await repositories.projects.add(make_project(name="Doomed"))
        other = await repositories.projects.add(make_project(name="Other"))
        await repositories.tickets.add(make_ticket(doomed))
        await repositories.tickets.add(make_ticket(doomed))
        survivor = await repositories.tickets.add(make_ticket(other))

        assert await repositories.projects.delete(doomed) is True

        assert await repositories.tickets.get_by_project(doomed) == []
        assert [t.id for t in await repositories.tickets.get_all()] == [survivor]

    async def test_delete_employee_unassigns_tickets(
        self, repositories: RepositorySet
    ) -> None:
        employee_id = await repositories.employees.add(make_employee())
        project_id = await repositories.projects.add(make_project())
        ticket_id = await repositories.tickets.add(
            make_ticket(project_id, assigned_to=employee_id)
        )

        assert await repositories.employees.delete(employee_id) is True

        ticket = await repositories.tickets.get_by_id(ticket_id)
        assert ticket is not None
        assert ticket.assigned_to is None


class TestFinders:
    async def test_employee_finders(self, repositories: RepositorySet) -> None:
        await repositories.employees.add(make_employee("a@x.com", department="Eng"))
        await repositories.employees.add(
            make_employee("b@x.com", department="Eng", is_active=False)
        )
        await repositories.employees.add(make_employee("c@x.com", department="Ops"))

        by_email = await repositories.employees.get_by_email("b@x.com")
        engineers = await repositories.employees.get_by_department("Eng")
        active = await repositories.employees.get_active()

        with pytest_check.check:
            assert by_email is not None
            assert by_email.email == "b@x.com"
        with pytest_check.check:
            assert await repositories.employees.get_by_email("zz@x.com") is None
        with pytest_check.check:
            assert [e.email for e in engineers] == ["a@x.com"]
        with pytest_check.check:
            assert [e.email for e in active] == ["a@x.com", "c@x.com"]

    async def test_project_finders(self, repositories: RepositorySet) -> None:
        await repositories.projects.add(make_project(name="P1"))
        await repositories.projects.add(make_project(name="P2", status="On Hold"))

        active = await repositories.projects.get_active()
        on_hold = await repositories.projects.get_by_status("On Hold")

        assert [p.name for p in active] == ["P1"]
        assert [p.name for p in on_hold] == ["P2"]

    async def test_ticket_finders(self, repositories: RepositorySet) -> None:
        employee_id = await repositories.employees.add(make_employee())
        first = await repositories.projects.add(make_project(name="P1"))
        second = await repositories.projects.add(make_project(name="P2"))
        await repositories.tickets.add(make_ticket(first, assigned_to=employee_id))
        await repositories.tickets.add(make_ticket(second, status="Closed"))

        by_project = await repositories.tickets.get_by_project(second)
        by_employee = await repositories.tickets.get_by_employee(employee_id)
        closed = await repositories.tickets.get_by_status("Closed")

        assert [t.project_id for t in by_project] == [second]
        assert [t.project_id for t in by_employee] == [first]
        assert [t.project_id for t in closed] == [second]

    async def test_count(self, repositories: RepositorySet) -> None:
        assert await repositories.projects.count() == 0
        await repositories.projects.add(make_project())
        assert await repositories.projects.count() == 1


class TestFailures:
    async def test_duplicate_email_raises_data_access_error(
        self, repositories: RepositorySet
    ) -> None:
        await repositories.employees.add(make_employee("dup@x.com"))

        with pytest.raises(DataAccessError) as exc_info:
            await repositories.employees.add(make_employee("dup@x.com"))

        assert exc_info.value.context["operation"] == "add"
        assert exc_info.value.context["technology"] == repositories.technology.value

    async def test_missing_project_reference_raises(
        self, repositories: RepositorySet
    ) -> None:
        with pytest.raises(DataAccessError):
            await repositories.tickets.add(make_ticket(project_id=404))
