"""
NoteFlow Backend — AI Invocation Helper
=========================================

What:  Async Python client for the /ai/* endpoints, tracking each call as
       an idle → loading → success | error state machine.
Why:   Scripts, workers and UI backends call the AI gateway the same way the
       web frontend does: one request, a loading flag, then either a typed
       result or a human-readable error message.
How:   Every call creates its own `Invocation` record. Nothing is shared
       between calls, so concurrent invocations cannot overwrite each
       other's loading or error state.

Usage:
    async with AIClient("http://localhost:8000") as ai:
        result = await ai.generate_tags({"content": "Q3 budget planning"})
        if result.state is InvocationState.SUCCESS:
            print(result.data.tags)
        else:
            print(result.error)

Errors never raise out of invoke(): they are captured on the record.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from noteflow.schemas.ai import (
    AnswerRequest,
    AnswerResponse,
    GenerateRequest,
    GenerateResponse,
    ImproveRequest,
    ImproveResponse,
    SummarizeRequest,
    SummarizeResponse,
    TagsRequest,
    TagsResponse,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

REQUEST_FAILED = "Request failed"
UNKNOWN_ERROR = "Unknown error occurred"


class InvocationState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Invocation(Generic[ResponseT]):
    """
    Outcome of one call.

    `data` is set only in SUCCESS, `error` only in ERROR.
    """
    state: InvocationState = InvocationState.IDLE
    data: Optional[ResponseT] = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state is InvocationState.LOADING

    @property
    def ok(self) -> bool:
        return self.state is InvocationState.SUCCESS

    def start(self) -> None:
        self.state = InvocationState.LOADING
        self.data = None
        self.error = None

    def succeed(self, data: ResponseT) -> None:
        self.state = InvocationState.SUCCESS
        self.data = data

    def fail(self, message: str) -> None:
        self.state = InvocationState.ERROR
        self.error = message


RequestBody = Union[BaseModel, Dict[str, Any]]


def _serialize(body: RequestBody) -> Dict[str, Any]:
    """camelCase JSON for models; dicts are sent as given."""
    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True, exclude_none=True)
    return dict(body)


def _error_message(response: httpx.Response) -> str:
    """The envelope's `error` text, or the generic fallback."""
    try:
        payload = response.json()
    except ValueError:
        return REQUEST_FAILED
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return REQUEST_FAILED


class AIClient:
    """
    Client for the AI gateway.

    Args:
        base_url:    Root URL of the backend (e.g. "http://localhost:8000").
        http_client: Existing httpx.AsyncClient to reuse. When given, the
                     caller owns it and aclose() leaves it open.
    """

    def __init__(
        self,
        base_url: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self) -> "AIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def invoke(
        self,
        path: str,
        body: RequestBody,
        response_model: Type[ResponseT],
    ) -> Invocation[ResponseT]:
        """
        POST `body` to `path` and record the outcome.

        Non-2xx responses take the envelope's `error` message; transport
        failures take the exception text.
        """
        invocation: Invocation[ResponseT] = Invocation()
        invocation.start()

        try:
            response = await self._http.post(path, json=_serialize(body))
        except httpx.HTTPError as e:
            logger.warning("AI request to %s failed: %s", path, str(e))
            invocation.fail(str(e) or UNKNOWN_ERROR)
            return invocation

        if response.is_error:
            invocation.fail(_error_message(response))
            return invocation

        try:
            invocation.succeed(response_model.model_validate(response.json()))
        except (ValueError, PydanticValidationError) as e:
            logger.warning("Unexpected response from %s: %s", path, str(e))
            invocation.fail(str(e) or UNKNOWN_ERROR)
        return invocation

    async def summarize(
        self, request: Union[SummarizeRequest, Dict[str, Any]]
    ) -> Invocation[SummarizeResponse]:
        return await self.invoke("/ai/summarize", request, SummarizeResponse)

    async def generate(
        self, request: Union[GenerateRequest, Dict[str, Any]]
    ) -> Invocation[GenerateResponse]:
        return await self.invoke("/ai/generate", request, GenerateResponse)

    async def improve(
        self, request: Union[ImproveRequest, Dict[str, Any]]
    ) -> Invocation[ImproveResponse]:
        return await self.invoke("/ai/improve", request, ImproveResponse)

    async def answer(
        self, request: Union[AnswerRequest, Dict[str, Any]]
    ) -> Invocation[AnswerResponse]:
        return await self.invoke("/ai/answer", request, AnswerResponse)

    async def generate_tags(
        self, request: Union[TagsRequest, Dict[str, Any]]
    ) -> Invocation[TagsResponse]:
        return await self.invoke("/ai/tags", request, TagsResponse)
