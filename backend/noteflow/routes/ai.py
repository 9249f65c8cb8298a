"""
NoteFlow Backend — AI Gateway Routes
======================================

What:  POST /ai/summarize, /ai/generate, /ai/improve, /ai/answer, /ai/tags.
Why:   The HTTP boundary for AI features: the only place that validates
       required fields and converts failures into the error envelope.
How:   Each route runs the same state machine:

           RECEIVE → VALIDATE ──ok──▶ INVOKE ──▶ RESPOND (200, response shape)
                         │                └─fail─▶ 500 {error, details}
                         └─missing─▶ REJECT (400 {error})

Who:   Called by the frontend and by noteflow.client.AIClient.

Error Responses:
    HTTP 400: Required field missing or empty (ValidationError). No provider call.
              A POST without a body counts as {} and gets the same message.
    HTTP 500: Configuration or provider failure (AIOperationError); `details`
              carries the underlying message. Logged, never retried.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, TypeVar

from fastapi import APIRouter, Depends, Request

from noteflow.exceptions import AIOperationError, ValidationError
from noteflow.schemas.ai import (
    AnswerRequest,
    AnswerResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    ImproveRequest,
    ImproveResponse,
    SummarizeRequest,
    SummarizeResponse,
    TagsRequest,
    TagsResponse,
)
from noteflow.services.ai_service import AIService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])

ResponseT = TypeVar("ResponseT")

ERROR_RESPONSES = {
    400: {"description": "Required field missing", "model": ErrorResponse},
    500: {"description": "AI operation failed", "model": ErrorResponse},
}


@dataclass(frozen=True)
class Endpoint:
    """Validation rules and fixed messages for one AI endpoint."""
    operation: str
    required: Tuple[str, ...]
    missing_message: str
    failure_message: str


SUMMARIZE = Endpoint("summarize", ("content",), "Content is required", "Failed to summarize text")
GENERATE = Endpoint("generate", ("prompt",), "Prompt is required", "Failed to generate text")
IMPROVE = Endpoint("improve", ("content",), "Content is required", "Failed to improve note")
ANSWER = Endpoint(
    "answer",
    ("question", "context"),
    "Question and context are required",
    "Failed to answer question",
)
TAGS = Endpoint("tags", ("content",), "Content is required", "Failed to generate tags")


def get_ai_service(request: Request) -> AIService:
    """
    FastAPI dependency: an AIService bound to the process-wide completion client.

    The client is created by create_app() and kept on app.state, so tests can
    pass their own client to create_app() instead of patching globals.
    """
    return AIService(request.app.state.completion_client)


def validate_required(endpoint: Endpoint, body: Any) -> None:
    """Reject the request if any required field is missing or an empty string."""
    missing = [name for name in endpoint.required if not getattr(body, name, None)]
    if missing:
        raise ValidationError(
            message=endpoint.missing_message,
            field=missing[0],
            context={"operation": endpoint.operation, "missing": missing},
        )


async def handle(
    endpoint: Endpoint,
    body: Any,
    call: Callable[[Any], Awaitable[ResponseT]],
) -> ResponseT:
    """Validate, invoke the operation once, and wrap any failure for the 500 handler."""
    validate_required(endpoint, body)
    try:
        return await call(body)
    except Exception as e:
        logger.error(
            "%s operation failed: %s",
            endpoint.operation,
            str(e),
            exc_info=True,
        )
        raise AIOperationError(
            message=endpoint.failure_message,
            details=str(e) or "Unknown error",
            context={"operation": endpoint.operation, "error_type": type(e).__name__},
        ) from e


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses=ERROR_RESPONSES,
    summary="Summarize note content",
)
async def summarize(
    body: Optional[SummarizeRequest] = None,
    service: AIService = Depends(get_ai_service),
) -> SummarizeResponse:
    return await handle(SUMMARIZE, body or SummarizeRequest(), service.summarize)


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses=ERROR_RESPONSES,
    summary="Generate text from a prompt",
    description="`tokens` is an estimate (characters / 4), not the provider's usage count.",
)
async def generate(
    body: Optional[GenerateRequest] = None,
    service: AIService = Depends(get_ai_service),
) -> GenerateResponse:
    return await handle(GENERATE, body or GenerateRequest(), service.generate)


@router.post(
    "/improve",
    response_model=ImproveResponse,
    responses=ERROR_RESPONSES,
    summary="Rewrite a note for clarity, grammar and structure",
)
async def improve(
    body: Optional[ImproveRequest] = None,
    service: AIService = Depends(get_ai_service),
) -> ImproveResponse:
    return await handle(IMPROVE, body or ImproveRequest(), service.improve)


@router.post(
    "/answer",
    response_model=AnswerResponse,
    responses=ERROR_RESPONSES,
    summary="Answer a question grounded in the given context",
)
async def answer(
    body: Optional[AnswerRequest] = None,
    service: AIService = Depends(get_ai_service),
) -> AnswerResponse:
    return await handle(ANSWER, body or AnswerRequest(), service.answer)


@router.post(
    "/tags",
    response_model=TagsResponse,
    responses=ERROR_RESPONSES,
    summary="Suggest tags for note content",
)
async def tags(
    body: Optional[TagsRequest] = None,
    service: AIService = Depends(get_ai_service),
) -> TagsResponse:
    return await handle(TAGS, body or TagsRequest(), service.generate_tags)
