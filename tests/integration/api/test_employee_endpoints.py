"""Employee and project endpoints, once per data access technology."""

import pytest
import pytest_check
from httpx import AsyncClient

pytestmark = pytest.mark.integration

EMPLOYEE = {
    "name": "A. Lee",
    "department": "Eng",
    "email": "a@x.com",
    "hire_date": "2024-01-01",
    "salary": "85000.5",
}

PROJECT = {"name": "P1", "start_date": "2024-01-01", "budget": "1200"}


class TestEmployeeEndpoints:
    async def test_create_and_get(self, client: AsyncClient) -> None:
        created = await client.post("/api/employees", json=EMPLOYEE)

        assert created.status_code == 201
        body = created.json()
        with pytest_check.check:
            assert body["id"] == 1
        with pytest_check.check:
            assert body["salary"] == "85000.50"
        with pytest_check.check:
            assert body["is_active"] is True
        with pytest_check.check:
            assert body["created_at"] is not None

        fetched = await client.get("/api/employees/1")
        assert fetched.status_code == 200
        assert fetched.json() == body

    async def test_duplicate_email_rejected(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)

        response = await client.post("/api/employees", json=EMPLOYEE)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_update_to_taken_email_rejected(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)
        await client.post("/api/employees", json={**EMPLOYEE, "email": "b@x.com"})

        response = await client.put("/api/employees/2", json=EMPLOYEE)

        assert response.status_code == 400
        assert response.json()["message"] == "Employee with email a@x.com already exists"
        assert (await client.get("/api/employees/2")).json()["email"] == "b@x.com"

    async def test_update_keeping_own_email_allowed(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)

        response = await client.put(
            "/api/employees/1", json={**EMPLOYEE, "name": "A. Lee-Park"}
        )

        assert response.status_code == 204

    async def test_lookups(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)
        await client.post(
            "/api/employees",
            json={**EMPLOYEE, "email": "b@x.com", "is_active": False},
        )

        by_email = await client.get("/api/employees/email/b@x.com")
        department = await client.get("/api/employees/department/Eng")
        active = await client.get("/api/employees/active")
        everyone = await client.get("/api/employees")

        with pytest_check.check:
            assert by_email.json()["email"] == "b@x.com"
        with pytest_check.check:
            assert [e["email"] for e in department.json()] == ["a@x.com"]
        with pytest_check.check:
            assert [e["email"] for e in active.json()] == ["a@x.com"]
        with pytest_check.check:
            assert len(everyone.json()) == 2

    async def test_missing_employee_returns_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/employees/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "NOT_FOUND"
        assert body["message"] == "Employee with ID 999 not found"
        assert body["correlation_id"] == response.headers["X-Correlation-ID"]

    async def test_unknown_email_returns_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/employees/email/nobody@x.com")

        assert response.status_code == 404

    async def test_update(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)

        response = await client.put(
            "/api/employees/1", json={**EMPLOYEE, "department": "Ops"}
        )

        assert response.status_code == 204
        updated = (await client.get("/api/employees/1")).json()
        assert updated["department"] == "Ops"
        assert updated["updated_at"] is not None

    async def test_update_missing_returns_404(self, client: AsyncClient) -> None:
        response = await client.put("/api/employees/999", json=EMPLOYEE)

        assert response.status_code == 404

    async def test_delete(self, client: AsyncClient) -> None:
        await client.post("/api/employees", json=EMPLOYEE)

        assert (await client.delete("/api/employees/1")).status_code == 204
        assert (await client.delete("/api/employees/1")).status_code == 404

    async def test_invalid_body_returns_422(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/employees", json={**EMPLOYEE, "hire_date": "not-a-date"}
        )

        assert response.status_code == 422
        assert "hire_date" in response.json()["details"]["validation_errors"]


class TestProjectEndpoints:
    async def test_create_defaults_to_active(self, client: AsyncClient) -> None:
        response = await client.post("/api/projects", json=PROJECT)

        assert response.status_code == 201
        assert response.json()["status"] == "Active"
        assert response.json()["budget"] == "1200.00"

    async def test_status_filters(self, client: AsyncClient) -> None:
        await client.post("/api/projects", json=PROJECT)
        await client.post(
            "/api/projects", json={**PROJECT, "name": "P2", "status": "Completed"}
        )

        active = await client.get("/api/projects/active")
        completed = await client.get("/api/projects/status/Completed")

        assert [p["name"] for p in active.json()] == ["P1"]
        assert [p["name"] for p in completed.json()] == ["P2"]

    async def test_update_and_delete(self, client: AsyncClient) -> None:
        await client.post("/api/projects", json=PROJECT)

        updated = await client.put(
            "/api/projects/1", json={**PROJECT, "client_name": "Acme"}
        )
        deleted = await client.delete("/api/projects/1")

        assert updated.status_code == 204
        assert deleted.status_code == 204
        assert (await client.get("/api/projects/1")).status_code == 404
