"""Project store.

Every query here is filtered by the owning user's id, so one user can never
read or delete another user's projects.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from voxstory.models.project import Project

logger = logging.getLogger(__name__)


class ProjectStoreError(Exception):
    """Base exception for project store errors."""
    pass


class ConstraintViolationError(ProjectStoreError):
    """Insert rejected by the database, e.g. a duplicate project id."""
    pass


class ProjectStore:
    """Service for a user's generated projects."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, user_id: str) -> Sequence[Project]:
        """List a user's projects, newest first."""
        result = await self.db.execute(
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return result.scalars().all()

    async def create(self, project: Project, user_id: str) -> Project:
        """Insert a fully formed project owned by ``user_id``.

        Args:
            project: Project with id, text, audio and genre already set
            user_id: Owner; overrides whatever ``project.user_id`` holds

        Returns:
            The stored project

        Raises:
            ConstraintViolationError: If the id is already taken
        """
        if await self.db.get(Project, project.id) is not None:
            raise ConstraintViolationError(f"Project '{project.id}' already exists")

        project.user_id = user_id
        self.db.add(project)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConstraintViolationError(f"Project '{project.id}' already exists") from e

        await self.db.refresh(project)
        return project

    async def delete(self, project_id: str, user_id: str) -> None:
        """Delete a project if ``user_id`` owns it.

        Missing or foreign ids are ignored.
        """
        result = await self.db.execute(
            delete(Project).where(Project.id == project_id, Project.user_id == user_id)
        )
        await self.db.commit()
        if result.rowcount:
            logger.info("Deleted project %s for user %s", project_id, user_id)
