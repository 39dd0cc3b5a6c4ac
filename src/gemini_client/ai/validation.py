from __future__ import annotations

from typing import TYPE_CHECKING

from gemini_client.ai.errors import PromptBlockedError, ResponseStoppedEarlyError
from gemini_client.ai.types import FinishReason

if TYPE_CHECKING:
    from gemini_client.ai.types import GenerateContentResponse


def validate_response(response: GenerateContentResponse) -> GenerateContentResponse:
    """Return *response* unchanged if it is usable, otherwise raise.

    Raises :class:`PromptBlockedError` when the prompt feedback carries a
    block reason, and :class:`ResponseStoppedEarlyError` when the first
    candidate finished for any reason other than ``STOP``.  The same check
    runs on single responses and on every streamed chunk.
    """
    feedback = response.prompt_feedback
    if feedback is not None and feedback.block_reason is not None:
        raise PromptBlockedError(response)

    if response.candidates:
        reason = response.candidates[0].finish_reason
        if reason is not None and reason is not FinishReason.STOP:
            raise ResponseStoppedEarlyError(reason, response)

    return response
