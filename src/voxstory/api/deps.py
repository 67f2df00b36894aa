"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for settings, database sessions, services and
cookie-based session authentication.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from voxstory.api.exceptions import UnauthorizedError
from voxstory.core.config import Settings
from voxstory.core.security import decode_session_token
from voxstory.models.database import Database
from voxstory.services.credentials import CredentialStore
from voxstory.services.generation import GenerationService
from voxstory.services.projects import ProjectStore


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database opened by the application lifespan."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized")
    return database


async def get_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI - yields async session."""
    async with database.session() as session:
        yield session


# Settings dependency
AppSettings = Annotated[Settings, Depends(get_app_settings)]

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user_id(request: Request, settings: AppSettings) -> str:
    """Resolve the authenticated user id from the session cookie.

    Raises:
        UnauthorizedError: If the cookie is missing or the token is invalid
    """
    token = request.cookies.get(settings.session_cookie_name)
    user_id = decode_session_token(token, settings)
    if user_id is None:
        raise UnauthorizedError()
    return user_id


def get_credential_store(db: DBSession, settings: AppSettings) -> CredentialStore:
    return CredentialStore(db, hash_rounds=settings.password_hash_rounds)


def get_project_store(db: DBSession) -> ProjectStore:
    return ProjectStore(db)


async def get_generation_service(
    settings: AppSettings,
) -> AsyncGenerator[GenerationService, None]:
    """Yield a generation client that is closed after the request."""
    async with GenerationService(settings) as service:
        yield service


# Type aliases for dependency injection
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
Credentials = Annotated[CredentialStore, Depends(get_credential_store)]
Projects = Annotated[ProjectStore, Depends(get_project_store)]
StoryGenerator = Annotated[GenerationService, Depends(get_generation_service)]
