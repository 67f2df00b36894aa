"""API routers for different endpoint groups.

Routers:
- auth: Signup, login, logout and preferences
- generate: Story and narration generation
- health: Health check endpoint
- projects: Per-user project storage
"""

from .auth import router as auth_router
from .generate import router as generate_router
from .health import router as health_router
from .projects import router as projects_router

__all__ = [
    "auth_router",
    "generate_router",
    "health_router",
    "projects_router",
]
