"""Backend services for VoxStory.

Services take an ``AsyncSession`` (or settings, for the generation client)
and hold the business rules the API routers call into.

Services:
- credentials: signup, credential verification, preferences
- projects: per-user project persistence
- generation: story and narration generation via Gemini

Usage:
    from voxstory.services import CredentialStore, ProjectStore

    # In FastAPI endpoint
    user = await CredentialStore(db).verify(email, password)
    projects = await ProjectStore(db).list(user.id)
"""

from .credentials import (
    AuthFailureError,
    CredentialStore,
    CredentialStoreError,
    DuplicateIdentityError,
)
from .generation import (
    GeneratedStory,
    GenerationError,
    GenerationMode,
    GenerationService,
)
from .projects import ConstraintViolationError, ProjectStore, ProjectStoreError

__all__ = [
    # Credential Store
    "CredentialStore",
    "CredentialStoreError",
    "DuplicateIdentityError",
    "AuthFailureError",
    # Project Store
    "ProjectStore",
    "ProjectStoreError",
    "ConstraintViolationError",
    # Generation Service
    "GenerationService",
    "GenerationMode",
    "GeneratedStory",
    "GenerationError",
]
