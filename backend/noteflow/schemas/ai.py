"""
NoteFlow Backend — AI Request/Response Schemas
================================================

What:  Pydantic models for the five AI operations and the chat messages
       sent to the completion provider.
Why:   One typed contract shared by the gateway (HTTP), the operation service
       and the client-side invocation helper.
How:   JSON field names are camelCase (maxLength, originalLength, ...) to
       match the frontend; Python attributes stay snake_case through an
       alias generator. `populate_by_name` lets Python callers use either.

Required fields are typed Optional on purpose:
    Presence checks belong to the gateway, which answers with fixed 400
    messages ("Content is required"). If Pydantic enforced them, FastAPI
    would answer 422 with its own wording instead.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DEFAULT_IMPROVE_INSTRUCTION = (
    "Improve the clarity, grammar, and structure of this note while maintaining its meaning."
)
DEFAULT_SUMMARY_LENGTH = 200
DEFAULT_MAX_TAGS = 5


class CamelModel(BaseModel):
    """Base model serializing to camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Chat Messages
# ══════════════════════════════════════════════════════════════════════════


class Message(BaseModel):
    """
    One role-tagged entry of a chat-completion conversation.

    Order matters: the provider reads messages in sequence, the first system
    message sets behavior and the rest are conversation turns.
    """
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    """Everything one completion call needs, as built by the prompt builder."""
    messages: List[Message]
    temperature: float
    max_tokens: Optional[int] = Field(
        default=None,
        description="Token budget; None means the client's configured default",
    )


# ══════════════════════════════════════════════════════════════════════════
# Operation Requests
# ══════════════════════════════════════════════════════════════════════════


class SummarizeRequest(CamelModel):
    content: Optional[str] = Field(default=None, description="Text to summarize")
    max_length: Optional[int] = Field(
        default=DEFAULT_SUMMARY_LENGTH,
        description="Approximate summary length in words; null means the default",
    )


class GenerateRequest(CamelModel):
    prompt: Optional[str] = Field(default=None, description="What to write")
    context: Optional[str] = Field(default=None, description="Optional background text")
    temperature: Optional[float] = Field(default=0.7, description="Sampling temperature")
    max_tokens: Optional[int] = Field(
        default=None,
        description="Token budget; defaults to OPENAI_MAX_TOKENS (2000)",
    )


class ImproveRequest(CamelModel):
    content: Optional[str] = Field(default=None, description="Note content to edit")
    instruction: Optional[str] = Field(
        default=None,
        description="Editing instruction; a general clarity/grammar pass when omitted",
    )


class AnswerRequest(CamelModel):
    question: Optional[str] = Field(default=None, description="Question to answer")
    context: Optional[str] = Field(default=None, description="Text the answer must be grounded in")


class TagsRequest(CamelModel):
    content: Optional[str] = Field(default=None, description="Text to tag")
    max_tags: Optional[int] = Field(
        default=DEFAULT_MAX_TAGS,
        description="Upper bound on returned tags; null means the default",
    )


# ══════════════════════════════════════════════════════════════════════════
# Operation Responses
# ══════════════════════════════════════════════════════════════════════════


class SummarizeResponse(CamelModel):
    summary: str
    original_length: int = Field(description="len() of the submitted content")
    summary_length: int = Field(description="len() of the returned summary")


class GenerateResponse(CamelModel):
    text: str
    tokens: int = Field(description="Estimated tokens: ceil(len(text) / 4)")


class ImproveResponse(CamelModel):
    improved_content: str


class AnswerResponse(CamelModel):
    answer: str


class TagsResponse(CamelModel):
    tags: List[str]


# ══════════════════════════════════════════════════════════════════════════
# Error Envelope
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error envelope returned by every failing endpoint.

    Example:
        {"error": "Failed to summarize text", "details": "Failed to get response from OpenAI: timeout"}
    """
    error: str = Field(description="Human-readable error message")
    details: Optional[str] = Field(default=None, description="Diagnostic text, when available")
