"""Chat sessions: a thin history accumulator over :class:`GenerativeModel`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gemini_client.ai.content import to_content_sequence
from gemini_client.ai.error_translation import generate_content_error
from gemini_client.ai.errors import InternalError, InvalidCandidateError
from gemini_client.ai.types import ModelContent, TextPart

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from gemini_client.ai.content import ContentInput
    from gemini_client.ai.model import GenerativeModel
    from gemini_client.ai.types import GenerateContentResponse, Part


class Chat:
    """A multi-turn conversation with a model.

    Each successful exchange appends the user turn and the model's reply to
    the history.  Failed exchanges leave the history untouched.
    """

    def __init__(
        self,
        model: GenerativeModel,
        history: Iterable[ModelContent] | None = None,
    ) -> None:
        self._model = model
        self._history: list[ModelContent] = list(history or [])

    @property
    def history(self) -> list[ModelContent]:
        return list(self._history)

    async def send_message(self, *content: ContentInput) -> GenerateContentResponse:
        """Send a message and record the exchange."""
        new_content = _as_user_turns(*content)
        response = await self._model.generate_content(*self._history, *new_content)

        if not response.candidates:
            raise InternalError(InvalidCandidateError.empty_content())
        reply = response.candidates[0].content

        self._history.extend(new_content)
        self._history.append(ModelContent(parts=reply.parts, role="model"))
        return response

    async def send_message_stream(
        self,
        *content: ContentInput,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Send a message and yield the reply chunks as they arrive.

        The exchange is recorded once the stream completes normally.  This is
        an async generator: a caller that may stop early should wrap it in
        :func:`contextlib.aclosing` so the underlying response stream is
        closed right away instead of at garbage collection.
        """
        new_content = _as_user_turns(*content)
        replies: list[ModelContent] = []

        async with self._model.generate_content_stream(
            *self._history, *new_content,
        ) as stream:
            async for chunk in stream:
                if chunk.candidates:
                    replies.append(chunk.candidates[0].content)
                yield chunk

        self._history.extend(new_content)
        self._history.append(_aggregate(replies))


def _as_user_turns(*content: ContentInput) -> tuple[ModelContent, ...]:
    try:
        turns = to_content_sequence(*content)
    except Exception as exc:
        raise generate_content_error(exc) from exc
    return tuple(
        turn if turn.role is not None else ModelContent(parts=turn.parts, role="user")
        for turn in turns
    )


def _aggregate(replies: list[ModelContent]) -> ModelContent:
    """Merge streamed reply chunks into one model turn.

    Consecutive text parts are concatenated; other parts are kept in order.
    """
    parts: list[Part] = []
    pending_text: list[str] = []

    for reply in replies:
        for part in reply.parts:
            if isinstance(part, TextPart):
                pending_text.append(part.text)
                continue
            if pending_text:
                parts.append(TextPart(text="".join(pending_text)))
                pending_text = []
            parts.append(part)

    if pending_text:
        parts.append(TextPart(text="".join(pending_text)))
    return ModelContent(parts=tuple(parts), role="model")
