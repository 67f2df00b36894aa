"""Generation router.

Runs story and narration generation for the current user and saves the
result as a project. Nothing is stored unless both steps succeed.
"""

import logging
import uuid

from fastapi import APIRouter
from pydantic import BaseModel, Field

from voxstory.api.deps import Credentials, CurrentUserId, Projects, StoryGenerator
from voxstory.api.exceptions import GenerationFailedError, UnauthorizedError
from voxstory.api.routers.projects import ProjectResponse
from voxstory.models.project import Project
from voxstory.services.generation import GenerationError, GenerationMode

logger = logging.getLogger(__name__)

router = APIRouter()


class GenerateRequest(BaseModel):
    """Prompt to turn into a narrated story."""

    input: str = Field(..., min_length=1, description="Prompt text, voice transcript, or base64 image")
    mode: GenerationMode = Field(default=GenerationMode.TEXT)
    genre: str | None = Field(default=None, description="Defaults to the user's favourite genre")


@router.post("", response_model=ProjectResponse)
async def generate_project(
    request: GenerateRequest,
    user_id: CurrentUserId,
    credentials: Credentials,
    projects: Projects,
    generator: StoryGenerator,
) -> ProjectResponse:
    """Generate a story with narration and save it as a new project.

    Raises:
        GenerationFailedError: If the story or the audio could not be generated
    """
    user = await credentials.get(user_id)
    if user is None:
        raise UnauthorizedError()

    genre = request.genre or user.favorite_genre

    try:
        story = await generator.generate_story(request.input, request.mode, genre)
        audio = await generator.generate_audio(story.content, user.favorite_voice)
    except GenerationError as e:
        logger.warning("Generation failed for user %s: %s", user_id, e)
        raise GenerationFailedError("Something went wrong. Please try again.")

    if not audio:
        logger.warning("No audio returned for user %s", user_id)
        raise GenerationFailedError("Failed to generate audio")

    project = Project(
        id=str(uuid.uuid4()),
        title=story.title,
        content=story.content,
        audio_data=audio,
        image_data=request.input if request.mode == GenerationMode.IMAGE else None,
        genre=genre,
    )
    project = await projects.create(project, user_id)
    return ProjectResponse.model_validate(project)
