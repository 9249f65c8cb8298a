"""
NoteFlow Backend — Prompt Builder
===================================

What:  Pure functions turning an operation request into a CompletionRequest
       (ordered messages + temperature + token budget).
Why:   Prompts are the part of the AI layer most likely to be tuned. Keeping
       them here, free of I/O, makes every prompt change a one-line diff with
       a direct unit test.
How:   One build_* function per operation, plus parse_tags() for the only
       operation whose raw text needs post-processing.

Temperatures:
    summarize 0.5 | improve 0.3 | answer 0.3 | tags 0.5 | generate: request (0.7)
    Editing and grounded answers favor fidelity; generation favors creativity.
"""

from typing import List, Optional

from noteflow.schemas.ai import (
    DEFAULT_IMPROVE_INSTRUCTION,
    DEFAULT_MAX_TAGS,
    DEFAULT_SUMMARY_LENGTH,
    AnswerRequest,
    CompletionRequest,
    GenerateRequest,
    ImproveRequest,
    Message,
    SummarizeRequest,
    TagsRequest,
)

SUMMARIZE_TEMPERATURE = 0.5
IMPROVE_TEMPERATURE = 0.3
ANSWER_TEMPERATURE = 0.3
TAGS_TEMPERATURE = 0.5
GENERATE_DEFAULT_TEMPERATURE = 0.7

SUMMARIZE_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise summaries. "
    "Provide clear, informative summaries that capture the key points."
)
GENERATE_SYSTEM_PROMPT = "You are a creative and helpful writing assistant."
IMPROVE_SYSTEM_PROMPT = (
    "You are an expert editor helping users improve their notes. "
    "Provide clear, well-structured improvements."
)
ANSWER_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on provided context. "
    "Be accurate and concise."
)
TAGS_SYSTEM_PROMPT = (
    "You are a tagging assistant. Generate up to {max_tags} relevant tags for the content. "
    "Return only the tags as a comma-separated list, nothing else."
)


def summary_length(request: SummarizeRequest) -> int:
    return DEFAULT_SUMMARY_LENGTH if request.max_length is None else request.max_length


def tag_limit(request: TagsRequest) -> int:
    return DEFAULT_MAX_TAGS if request.max_tags is None else request.max_tags


def build_summarize(request: SummarizeRequest) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            Message(role="system", content=SUMMARIZE_SYSTEM_PROMPT),
            Message(
                role="user",
                content=(
                    f"Please summarize the following text in approximately "
                    f"{summary_length(request)} words:\n\n{request.content}"
                ),
            ),
        ],
        temperature=SUMMARIZE_TEMPERATURE,
    )


def build_generate(request: GenerateRequest) -> CompletionRequest:
    """
    Context, when given, goes in its own user turn ahead of the prompt so the
    model reads it as background rather than as part of the instruction.
    """
    messages: List[Message] = [Message(role="system", content=GENERATE_SYSTEM_PROMPT)]
    if request.context:
        messages.append(Message(role="user", content=f"Context: {request.context}"))
    messages.append(Message(role="user", content=request.prompt or ""))

    temperature = request.temperature
    if temperature is None:
        temperature = GENERATE_DEFAULT_TEMPERATURE

    return CompletionRequest(
        messages=messages,
        temperature=temperature,
        max_tokens=request.max_tokens,
    )


def build_improve(request: ImproveRequest) -> CompletionRequest:
    instruction = request.instruction or DEFAULT_IMPROVE_INSTRUCTION
    return CompletionRequest(
        messages=[
            Message(role="system", content=IMPROVE_SYSTEM_PROMPT),
            Message(role="user", content=f"{instruction}\n\nNote content:\n{request.content}"),
        ],
        temperature=IMPROVE_TEMPERATURE,
    )


def build_answer(request: AnswerRequest) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            Message(role="system", content=ANSWER_SYSTEM_PROMPT),
            Message(
                role="user",
                content=f"Context:\n{request.context}\n\nQuestion: {request.question}",
            ),
        ],
        temperature=ANSWER_TEMPERATURE,
    )


def build_tags(request: TagsRequest) -> CompletionRequest:
    return CompletionRequest(
        messages=[
            Message(role="system", content=TAGS_SYSTEM_PROMPT.format(max_tags=tag_limit(request))),
            Message(role="user", content=f"Generate tags for this content:\n\n{request.content}"),
        ],
        temperature=TAGS_TEMPERATURE,
    )


def build_custom(
    system_prompt: str,
    user_prompt: str,
    temperature: float = GENERATE_DEFAULT_TEMPERATURE,
    max_tokens: Optional[int] = None,
) -> CompletionRequest:
    """Single system + user turn for callers that bring their own prompts."""
    return CompletionRequest(
        messages=[
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_prompt),
        ],
        temperature=temperature,
        max_tokens=max_tokens,
    )


def parse_tags(raw: str, max_tags: int) -> List[str]:
    """
    Turn the model's comma-separated answer into a tag list.

    Pieces are stripped, empty pieces dropped, provider order kept, and the
    result cut to max_tags. Text without any usable entry yields [] rather
    than an error.

    >>> parse_tags("budget, Q3, , planning", 5)
    ['budget', 'Q3', 'planning']
    """
    tags = [piece.strip() for piece in raw.split(",")]
    return [tag for tag in tags if tag][: max(max_tags, 0)]
