"""FastAPI server for the Content Generator Service.

This module assembles the application: a JSON API that proxies
content-generation requests to the upstream generative-language API, and
the static single-page front-end.

Key behaviors:
    - Per-client fixed-window rate limiting on generation requests
    - Bounded retries with exponential backoff on transient upstream failures
    - Stable error taxonomy mapped to status codes in one place
    - Structured JSONL request logging (prompts logged by length only)

Endpoints:
    - POST /api/generate - Content generation
    - GET /api/health - Health check
    - GET /api/test - Liveness/diagnostic payload
    - GET /* - Static front-end with single-page-app fallback
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from content_generator.api.lifespan import lifespan_context
from content_generator.api.middleware import setup_exception_handlers, setup_middleware
from content_generator.api.routes import frontend_router, generation_router, system_router
from content_generator.core.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.api.title,
    description="Proxies content-generation requests to the Gemini API",
    version=settings.api.version,
    docs_url="/api/docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
    lifespan=lifespan_context,
)

setup_middleware(app)
setup_exception_handlers(app)

app.include_router(system_router, prefix="/api")
app.include_router(generation_router, prefix="/api")
# Catch-all routes, must stay last
app.include_router(frontend_router)


def main() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    logging.basicConfig(
        level=settings.api.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Content Generator Server running on http://localhost:%d", settings.api.port)
    logger.info(
        "Rate limiting: %d requests per %ds per IP",
        settings.rate_limit.max_requests,
        settings.rate_limit.window_seconds,
    )
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.api.log_level,
    )


if __name__ == "__main__":
    main()
