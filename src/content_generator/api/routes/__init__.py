"""API routes for the Content Generator Service.

Modular route definitions organized by functionality. The front-end router
holds a catch-all path and must be included last.
"""

from content_generator.api.routes.frontend import router as frontend_router
from content_generator.api.routes.generation import router as generation_router
from content_generator.api.routes.system import router as system_router

__all__ = [
    "frontend_router",
    "generation_router",
    "system_router",
]
