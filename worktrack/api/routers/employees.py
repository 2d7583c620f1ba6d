"""Employee endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import Response

from worktrack.core.exceptions import NotFoundError, ValidationError
from worktrack.domain.entities import Employee, EmployeeData
from worktrack.infrastructure.database.dependencies import Employees

router = APIRouter(prefix="/employees", tags=["employees"])


def employee_not_found(employee_id: int) -> NotFoundError:
    return NotFoundError(
        f"Employee with ID {employee_id} not found",
        context={"employee_id": employee_id},
    )


async def ensure_email_available(
    email: str, employees: Employees, employee_id: int | None = None
) -> None:
    """Raise ValidationError when another employee already uses the email."""
    holder = await employees.get_by_email(email)
    if holder is not None and holder.id != employee_id:
        raise ValidationError(
            f"Employee with email {email} already exists",
            context={"email": email},
        )


@router.get("", response_model=list[Employee])
async def list_employees(employees: Employees) -> list[Employee]:
    return list(await employees.get_all())


@router.get("/active", response_model=list[Employee])
async def list_active_employees(employees: Employees) -> list[Employee]:
    return list(await employees.get_active())


@router.get("/email/{email}", response_model=Employee)
async def get_employee_by_email(email: str, employees: Employees) -> Employee:
    employee = await employees.get_by_email(email)
    if employee is None:
        raise NotFoundError(f"Employee with email {email} not found")
    return employee


@router.get("/department/{department}", response_model=list[Employee])
async def list_employees_by_department(
    department: str, employees: Employees
) -> list[Employee]:
    """Active employees of the department."""
    return list(await employees.get_by_department(department))


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(employee_id: int, employees: Employees) -> Employee:
    employee = await employees.get_by_id(employee_id)
    if employee is None:
        raise employee_not_found(employee_id)
    return employee


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(data: EmployeeData, employees: Employees) -> Employee:
    """Create an employee; the email must not be in use."""
    await ensure_email_available(data.email, employees)
    new_id = await employees.add(Employee.model_validate(data.model_dump()))
    created = await employees.get_by_id(new_id)
    if created is None:
        raise employee_not_found(new_id)
    return created


@router.put("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_employee(
    employee_id: int, data: EmployeeData, employees: Employees
) -> Response:
    await ensure_email_available(data.email, employees, employee_id)
    employee = Employee.model_validate({**data.model_dump(), "id": employee_id})
    if not await employees.update(employee):
        raise employee_not_found(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(employee_id: int, employees: Employees) -> Response:
    """Delete an employee; their tickets become unassigned."""
    if not await employees.delete(employee_id):
        raise employee_not_found(employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
