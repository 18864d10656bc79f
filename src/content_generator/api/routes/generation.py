"""Generation route for the content-generation endpoint.

Endpoint:
    POST /api/generate
        - Request: ``{"prompt": string}``
        - Response: ``{content, model, timestamp}`` or ``{error, retryAfter?}``
        - Rate Limited: Yes (per client address, checked before any upstream work)

Request Flow:
    1. Body parsed into GenerateRequest (bad JSON -> InvalidRequest)
    2. GenerateContentUseCase validates, augments, admits, and retries
    3. Outcome rendered; the status code comes from the error kind
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from content_generator.api.dependencies import (
    GenerateUseCaseDep,
    RequestContextDep,
    parse_request_json,
)
from content_generator.api.models import GenerateRequest
from content_generator.api.response_builders import outcome_response
from content_generator.domain.entities import ErrorKind, GenerationError, GenerationOutcome
from content_generator.domain.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate", tags=["Generation"], response_model=None)
async def generate(
    request: Request,
    use_case: GenerateUseCaseDep,
    ctx: RequestContextDep,
) -> JSONResponse:
    """Generate content from a prompt.

    Returns:
        200 with the generated content, or an error envelope whose status
        code is derived from the error kind (400, 403, 429, 503 or 500).
    """
    outcome: GenerationOutcome
    try:
        api_req = await parse_request_json(request, GenerateRequest)
    except InvalidRequestError as exc:
        logger.warning("generate_invalid_body: request_id=%s, error=%s", ctx.request_id, exc)
        outcome = GenerationError(kind=ErrorKind.INVALID_REQUEST, message=str(exc))
    else:
        outcome = await use_case.execute(
            api_req.prompt,
            client_key=ctx.client_ip,
            request_id=ctx.request_id,
        )
    return outcome_response(outcome)
