"""
NoteFlow Backend — Abstract Completion Client Interface
=========================================================

What:  Abstract base class defining the contract for chat-completion providers.
Why:   The AI operation service only needs "messages in, text out". Hiding the
       provider SDK behind this interface keeps prompts and response shaping
       independent of OpenAI, and lets tests inject a fake client.
How:   Concrete implementations inherit from CompletionClient and implement
       complete() and health_check().
Who:   Constructed once by the application factory, stored on app.state and
       handed to AIService for each request.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from noteflow.schemas.ai import Message


class CompletionClient(ABC):
    """
    Abstract interface for one-shot chat completions.

    Contract:
        - complete() sends the messages in order and returns the first
          choice's text, or "" when the provider returns nothing
        - No retries: one call, one outcome
        - Provider errors are wrapped in CompletionError
        - A client without credentials raises ConfigurationError on use
        - Instances are read-only after construction and safe to share
          between concurrent requests
    """

    #: Token budget used when complete() is called with max_tokens=None
    default_max_tokens: int = 2000

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Message],
        temperature: float,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Execute one chat-completion call.

        Args:
            messages:    Ordered role-tagged messages.
            temperature: Sampling temperature passed through to the provider.
            max_tokens:  Token budget; None uses default_max_tokens.

        Returns:
            The first choice's content. Empty string is a valid result.

        Raises:
            ConfigurationError: The client has no credential.
            CompletionError: The call failed for any other reason.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True if the provider is configured and reachable."""
        ...

    @property
    def is_configured(self) -> bool:
        return True
