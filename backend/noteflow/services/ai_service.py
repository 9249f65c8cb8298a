"""
NoteFlow Backend — AI Operation Service
=========================================

What:  The five AI operations (summarize, generate, improve, answer, tags)
       plus a free-form custom prompt.
Why:   Routes stay thin; this is the only place that knows how a request
       becomes a completion call and how the raw text becomes a response.
How:   Every operation is an `Operation` descriptor: a prompt-builder
       function and a response-shaper function. `run_operation()` applies
       the same three steps to all of them:

           build (prompts.py) → complete (CompletionClient) → shape

Who:   Called by the AI gateway (routes/ai.py) with a request-scoped instance.

Validation:
    None here. Required-field checks happen in the gateway before this
    service is touched; operations assume their required fields are set.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from noteflow.schemas.ai import (
    AnswerRequest,
    AnswerResponse,
    CompletionRequest,
    GenerateRequest,
    GenerateResponse,
    ImproveRequest,
    ImproveResponse,
    SummarizeRequest,
    SummarizeResponse,
    TagsRequest,
    TagsResponse,
)
from noteflow.services import prompts
from noteflow.services.llm_base import CompletionClient

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


@dataclass(frozen=True)
class Operation(Generic[RequestT, ResponseT]):
    """Descriptor tying an operation name to its prompt builder and response shaper."""
    name: str
    build: Callable[[RequestT], CompletionRequest]
    shape: Callable[[RequestT, str], ResponseT]


SUMMARIZE: Operation[SummarizeRequest, SummarizeResponse] = Operation(
    name="summarize",
    build=prompts.build_summarize,
    shape=lambda request, text: SummarizeResponse(
        summary=text,
        original_length=len(request.content or ""),
        summary_length=len(text),
    ),
)

GENERATE: Operation[GenerateRequest, GenerateResponse] = Operation(
    name="generate",
    build=prompts.build_generate,
    shape=lambda request, text: GenerateResponse(text=text, tokens=estimate_tokens(text)),
)

IMPROVE: Operation[ImproveRequest, ImproveResponse] = Operation(
    name="improve",
    build=prompts.build_improve,
    shape=lambda request, text: ImproveResponse(improved_content=text),
)

ANSWER: Operation[AnswerRequest, AnswerResponse] = Operation(
    name="answer",
    build=prompts.build_answer,
    shape=lambda request, text: AnswerResponse(answer=text),
)

TAGS: Operation[TagsRequest, TagsResponse] = Operation(
    name="tags",
    build=prompts.build_tags,
    shape=lambda request, text: TagsResponse(
        tags=prompts.parse_tags(text, prompts.tag_limit(request))
    ),
)


class AIService:
    """
    Runs AI operations against an injected completion client.

    Stateless apart from the client reference, so a fresh instance per
    request costs nothing and shares no mutable state.
    """

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    async def run_operation(self, operation: Operation[Any, ResponseT], request: Any) -> ResponseT:
        """
        Build messages, make exactly one completion call and shape the result.

        Raises:
            ConfigurationError / CompletionError from the client, untouched.
        """
        plan = operation.build(request)
        logger.debug(
            "Running %s: %d messages, temperature=%.2f",
            operation.name,
            len(plan.messages),
            plan.temperature,
        )
        text = await self.completion_client.complete(
            plan.messages,
            temperature=plan.temperature,
            max_tokens=plan.max_tokens,
        )
        return operation.shape(request, text)

    async def summarize(self, request: SummarizeRequest) -> SummarizeResponse:
        return await self.run_operation(SUMMARIZE, request)

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        return await self.run_operation(GENERATE, request)

    async def improve(self, request: ImproveRequest) -> ImproveResponse:
        return await self.run_operation(IMPROVE, request)

    async def answer(self, request: AnswerRequest) -> AnswerResponse:
        return await self.run_operation(ANSWER, request)

    async def generate_tags(self, request: TagsRequest) -> TagsResponse:
        return await self.run_operation(TAGS, request)

    async def custom_prompt(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = prompts.GENERATE_DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Free-form completion for features that bring their own prompts."""
        plan = prompts.build_custom(system_prompt, user_prompt, temperature, max_tokens)
        return await self.completion_client.complete(
            plan.messages,
            temperature=plan.temperature,
            max_tokens=plan.max_tokens,
        )
