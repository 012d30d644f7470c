"""Project router - API endpoints for project management."""
from fastapi import APIRouter, Depends, HTTPException, status

from clock_slayer.database import get_database
from clock_slayer.errors import ValidationFailure
from clock_slayer.models.project import Project, ProjectCreate, ProjectUpdate
from clock_slayer.services.project_service import ProjectService


router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(db=Depends(get_database)):
    """
    List all projects.

    Returns:
        List of projects ordered by id
    """
    service = ProjectService(db)
    return await service.list_projects()


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    db=Depends(get_database),
):
    """
    Create a new project.

    Args:
        project: Project creation data (id optional)
        db: Database connection

    Returns:
        Created project object

    Raises:
        HTTPException: If the id is already taken (400)
    """
    service = ProjectService(db)

    try:
        return await service.create_project(project)
    except ValidationFailure as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: int,
    db=Depends(get_database),
):
    """
    Get a project by id.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.get_project(project_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.api_route("/{project_id}", methods=["PUT", "PATCH"], response_model=Project)
async def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db=Depends(get_database),
):
    """
    Update a project.

    Only the fields present in the body change; the id cannot be changed.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.update_project(project_id, project_update)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    db=Depends(get_database),
):
    """
    Delete a project.

    Entries referencing the project are kept.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.delete_project(project_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
