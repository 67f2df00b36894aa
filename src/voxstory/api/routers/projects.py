"""Projects router for listing, saving and deleting generated stories."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from voxstory.api.deps import CurrentUserId, Projects
from voxstory.api.exceptions import ConflictError
from voxstory.api.routers.auth import SuccessResponse
from voxstory.models.project import Project
from voxstory.services.projects import ConstraintViolationError

router = APIRouter()


# =============================================================================
# Schemas
# =============================================================================


class ProjectCreateRequest(BaseModel):
    """A fully generated project to store.

    Any ``user_id`` or ``created_at`` sent by the client is ignored.
    """

    id: str = Field(..., min_length=1)
    title: str
    content: str
    audio_data: str
    image_data: str | None = None
    genre: str


class ProjectResponse(BaseModel):
    """Stored project."""

    id: str
    user_id: str
    title: str
    content: str
    audio_data: str
    image_data: str | None
    genre: str
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=list[ProjectResponse])
async def list_projects(user_id: CurrentUserId, projects: Projects) -> list[ProjectResponse]:
    """List the current user's projects, newest first."""
    rows = await projects.list(user_id)
    return [ProjectResponse.model_validate(row) for row in rows]


@router.post("", response_model=SuccessResponse)
async def create_project(
    request: ProjectCreateRequest,
    user_id: CurrentUserId,
    projects: Projects,
) -> SuccessResponse:
    """Save a generated project for the current user.

    Raises:
        ConflictError: If the project id is already taken
    """
    project = Project(
        id=request.id,
        title=request.title,
        content=request.content,
        audio_data=request.audio_data,
        image_data=request.image_data,
        genre=request.genre,
    )
    try:
        await projects.create(project, user_id)
    except ConstraintViolationError as e:
        raise ConflictError(str(e))
    return SuccessResponse()


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(
    project_id: str,
    user_id: CurrentUserId,
    projects: Projects,
) -> SuccessResponse:
    """Delete one of the current user's projects.

    Unknown ids and other users' projects are left alone and still succeed.
    """
    await projects.delete(project_id, user_id)
    return SuccessResponse()
