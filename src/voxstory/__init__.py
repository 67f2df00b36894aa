"""VoxStory - Turn prompts into narrated audiobook stories.

Users sign up, describe a story (as text, a voice transcript or an image),
and receive a generated story with narrated audio that is saved as a project.

Quick Start:
    uvicorn --factory voxstory.api.main:create_app

Architecture:
    1. Credential Store - users and bcrypt password hashes
    2. Session tokens - signed JWTs carried in an http-only cookie
    3. Auth guard - FastAPI dependency resolving the current user id
    4. Project Store - projects filtered by owning user
    5. Generation Service - Gemini story and speech generation
"""

__version__ = "0.1.0"

from voxstory.core.config import Settings, get_settings
from voxstory.services import (
    CredentialStore,
    GenerationMode,
    GenerationService,
    ProjectStore,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Services
    "CredentialStore",
    "ProjectStore",
    "GenerationService",
    "GenerationMode",
]
