"""
NoteFlow Backend — OpenAI Completion Client
=============================================

What:  Concrete CompletionClient backed by the OpenAI Chat Completions API.
Why:   OpenAI's chat models accept the exact role-tagged message format the
       prompt builder produces.
How:   Wraps a single AsyncOpenAI connection created from settings. Each
       complete() call is one `chat.completions.create` request.
Who:   Created once by create_app(); shared by all requests through app.state.

Failure model:
    - Missing OPENAI_API_KEY: the client is still constructed (so the app
      can start and report it), but holds a ConfigurationError that is
      raised on every complete() call.
    - Any exception from the SDK (network, auth, rate limit, bad request)
      becomes a CompletionError carrying the upstream message.
    - No retries and no explicit timeout: a hung provider blocks until the
      SDK transport gives up, which then surfaces as a CompletionError.
"""

import logging
import time
import uuid
from typing import Optional, Sequence

from openai import AsyncOpenAI

from noteflow.config import PLACEHOLDER_API_KEY, Settings, settings as default_settings
from noteflow.exceptions import CompletionError, ConfigurationError
from noteflow.schemas.ai import Message
from noteflow.services.llm_base import CompletionClient

logger = logging.getLogger(__name__)


class OpenAICompletionClient(CompletionClient):
    """
    OpenAI chat-completion client.

    Architecture:
        - One instance per process, owned by the application factory
        - Holds credential, model and default budget; nothing per-request
        - Safe for concurrent use without locking (AsyncOpenAI is)
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        default_max_tokens: int = 2000,
    ):
        self.model = model
        self.default_max_tokens = default_max_tokens
        self.configuration_error: Optional[ConfigurationError] = None
        self._client: Optional[AsyncOpenAI] = None

        if api_key and api_key != PLACEHOLDER_API_KEY:
            self._client = AsyncOpenAI(api_key=api_key)
            logger.info(
                "OpenAICompletionClient initialized with model=%s, default_max_tokens=%d",
                model,
                default_max_tokens,
            )
        else:
            self.configuration_error = ConfigurationError()
            logger.error(
                "OpenAICompletionClient has no credential: %s",
                self.configuration_error.message,
            )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OpenAICompletionClient":
        """Build a client from application settings (the process-wide ones by default)."""
        settings = settings or default_settings
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            default_max_tokens=settings.openai_max_tokens,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one chat-completion request and return the first choice's text.

        Raises:
            ConfigurationError: No API key was configured for this process.
            CompletionError: The SDK call failed.
        """
        if self._client is None:
            raise self.configuration_error or ConfigurationError()

        call_id = str(uuid.uuid4())[:8]
        budget = max_tokens if max_tokens is not None else self.default_max_tokens
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[message.model_dump() for message in messages],
                temperature=temperature,
                max_tokens=budget,
            )
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] OpenAI call failed after %.0fms: %s",
                call_id,
                duration_ms,
                str(e),
            )
            raise CompletionError(
                upstream=str(e) or type(e).__name__,
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not response.choices:
            logger.warning("[%s] OpenAI returned no choices", call_id)
            return ""

        content = response.choices[0].message.content or ""
        logger.info(
            "[%s] OpenAI completion finished in %.0fms: %d messages in, %d chars out",
            call_id,
            duration_ms,
            len(messages),
            len(content),
        )
        return content

    async def health_check(self) -> bool:
        """
        Check that the API key works by listing models.

        Listing models costs no tokens, so it is safe to call from
        frequent health probes.
        """
        if self._client is None:
            return False
        try:
            await self._client.models.list()
            return True
        except Exception as e:
            logger.warning("OpenAI health check failed: %s", str(e))
            return False
