"""Project endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import Response

from worktrack.core.exceptions import NotFoundError
from worktrack.domain.entities import Project, ProjectData
from worktrack.infrastructure.database.dependencies import Projects

router = APIRouter(prefix="/projects", tags=["projects"])


def project_not_found(project_id: int) -> NotFoundError:
    return NotFoundError(
        f"Project with ID {project_id} not found",
        context={"project_id": project_id},
    )


@router.get("", response_model=list[Project])
async def list_projects(projects: Projects) -> list[Project]:
    return list(await projects.get_all())


@router.get("/active", response_model=list[Project])
async def list_active_projects(projects: Projects) -> list[Project]:
    return list(await projects.get_active())


@router.get("/status/{project_status}", response_model=list[Project])
async def list_projects_by_status(
    project_status: str, projects: Projects
) -> list[Project]:
    return list(await projects.get_by_status(project_status))


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: int, projects: Projects) -> Project:
    project = await projects.get_by_id(project_id)
    if project is None:
        raise project_not_found(project_id)
    return project


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectData, projects: Projects) -> Project:
    new_id = await projects.add(Project.model_validate(data.model_dump()))
    created = await projects.get_by_id(new_id)
    if created is None:
        raise project_not_found(new_id)
    return created


@router.put("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_project(
    project_id: int, data: ProjectData, projects: Projects
) -> Response:
    project = Project.model_validate({**data.model_dump(), "id": project_id})
    if not await projects.update(project):
        raise project_not_found(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: int, projects: Projects) -> Response:
    """Delete a project together with its tickets."""
    if not await projects.delete(project_id):
        raise project_not_found(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
