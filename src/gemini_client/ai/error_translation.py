"""Translation of any failure into the public error taxonomy.

Both functions are total: whatever goes in, exactly one public error comes
out.  They perform no I/O beyond debug logging.
"""

from __future__ import annotations

import logging

from gemini_client.ai.errors import (
    ContentConversionError,
    CountTokensError,
    CountTokensInternalError,
    GenerateContentError,
    InternalError,
    InvalidAPIKey,
    InvalidCandidateError,
    PromptBlocked,
    PromptBlockedError,
    PromptContentError,
    ResponseStoppedEarly,
    ResponseStoppedEarlyError,
    RPCError,
    UnsupportedUserLocation,
)

logger = logging.getLogger(__name__)


def generate_content_error(error: BaseException) -> GenerateContentError:
    """Map *error* onto a :class:`GenerateContentError`.

    A :class:`GenerateContentError` is returned as the same object.
    """
    if isinstance(error, GenerateContentError):
        return error

    logger.debug("Translating %s: %s", type(error).__name__, error)

    if isinstance(error, PromptBlockedError):
        return PromptBlocked(error.response)
    if isinstance(error, ResponseStoppedEarlyError):
        return ResponseStoppedEarly(error.reason, error.response)
    if isinstance(error, InvalidCandidateError):
        return InternalError(error)
    if isinstance(error, ContentConversionError):
        return PromptContentError(error)
    if isinstance(error, RPCError):
        if error.is_invalid_api_key_error():
            return InvalidAPIKey()
        if error.is_unsupported_user_location_error():
            return UnsupportedUserLocation()
    return InternalError(error)


def count_tokens_error(error: BaseException) -> CountTokensError:
    """Map *error* onto a :class:`CountTokensError`.

    Token counting has no candidates, so every failure is internal.
    """
    if isinstance(error, CountTokensError):
        return error
    logger.debug("Translating token count failure %s: %s", type(error).__name__, error)
    return CountTokensInternalError(error)
