"""
NoteFlow Backend — Exception Hierarchy
========================================

What:  Every failure the API can report, as one exception family.
Why:   Services raise meaning ("note not found", "provider failed"); the HTTP
       layer alone decides status codes. Raw SDK and driver exceptions are
       wrapped before they can reach a response body.
How:   Each exception has a client-safe `message` and a `context` dict that
       is logged but never returned. Handlers in main.py render the envelope
       {"error": message} or {"error": message, "details": ...}.

    NoteFlowError
    ├── ValidationError      400  required field missing or empty
    ├── AuthenticationError  401  no acting user / bad credentials
    ├── NotFoundError        404  note or user does not exist
    ├── ConfigurationError   ─┐   raised by the completion client,
    ├── CompletionError      ─┴─▶ wrapped by the AI gateway into ...
    ├── AIOperationError     500  "Failed to <operation>" + details
    └── DatabaseError        500  generic message, cause logged only
"""

from typing import Any, Dict, Optional

Context = Optional[Dict[str, Any]]


class NoteFlowError(Exception):
    """
    Base class.

    Attributes:
        message:  Safe to show to the client.
        context:  Diagnostics for the server log only.
    """

    def __init__(self, message: str = "An unexpected error occurred", context: Context = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})


class ValidationError(NoteFlowError):
    """
    A required request field is missing or empty.

    Always raised before any provider or database call, so a rejected AI
    request never costs tokens.
    """

    def __init__(self, message: str, field: Optional[str] = None, context: Context = None):
        super().__init__(message, context)
        self.field = field
        if field:
            self.context.setdefault("field", field)


class AuthenticationError(NoteFlowError):
    def __init__(self, message: str = "Invalid email or password", context: Context = None):
        super().__init__(message, context)


class NotFoundError(NoteFlowError):
    """
    A note or user lookup came back empty.

    SQLAlchemy returns None for a missing row; services turn that into this.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Context = None,
    ):
        super().__init__(message or f"{resource.capitalize()} not found", context)
        self.resource = resource
        self.context["resource"] = resource
        if resource_id:
            self.context["resource_id"] = resource_id


class ConfigurationError(NoteFlowError):
    """
    The completion client has no API key.

    Detected once when the client is built (and logged at startup), then
    raised again on every completion attempt for the life of the process.
    """

    def __init__(
        self,
        message: str = "OPENAI_API_KEY is not configured in environment variables",
        context: Context = None,
    ):
        super().__init__(message, context)


class CompletionError(NoteFlowError):
    """
    One chat-completion call failed: network, provider error or bad response.

    `upstream` keeps the provider's own text so it can be surfaced as the
    `details` of the 500 envelope. Never retried.
    """

    def __init__(self, upstream: str = "Unknown error", context: Context = None):
        super().__init__(f"Failed to get response from OpenAI: {upstream}", context)
        self.upstream = upstream
        self.context["upstream"] = upstream


class AIOperationError(NoteFlowError):
    """
    An AI operation failed after its request passed validation.

    Body: {"error": "Failed to summarize text", "details": "<cause text>"}
    """

    def __init__(
        self,
        message: str = "AI operation failed",
        details: str = "Unknown error",
        context: Context = None,
    ):
        super().__init__(message, context)
        self.details = details


class DatabaseError(NoteFlowError):
    """
    A query or flush failed.

    The client only ever sees `message` (e.g. "Failed to fetch notes"); the
    driver error goes to the log through `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Context = None,
    ):
        super().__init__(message, context)
