"""Error hierarchy for the generative model client.

Two groups live here:

* Failures raised below the model facade (validation, transport, content
  conversion).  These never reach callers directly.
* The public taxonomy (:class:`GenerateContentError` and
  :class:`CountTokensError` subclasses), the only errors the facade raises.

:mod:`gemini_client.ai.error_translation` maps the first group onto the
second.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from gemini_client.ai.types import FinishReason, GenerateContentResponse


# ---------------------------------------------------------------------------
# Failures raised below the facade
# ---------------------------------------------------------------------------


class PromptBlockedError(Exception):
    """The backend reported that the prompt was blocked."""

    def __init__(self, response: GenerateContentResponse) -> None:
        super().__init__("Prompt was blocked")
        self.response = response


class ResponseStoppedEarlyError(Exception):
    """The first candidate finished for a reason other than ``STOP``."""

    def __init__(self, reason: FinishReason, response: GenerateContentResponse) -> None:
        super().__init__(f"Response stopped early: {reason.value}")
        self.reason = reason
        self.response = response


class InvalidCandidateError(Exception):
    """A candidate in a backend response could not be decoded."""

    def __init__(
        self,
        kind: Literal["empty_content", "malformed_content"],
        underlying: BaseException | None = None,
    ) -> None:
        super().__init__(f"Invalid candidate: {kind}")
        self.kind = kind
        self.underlying = underlying

    @classmethod
    def empty_content(cls, underlying: BaseException | None = None) -> InvalidCandidateError:
        return cls("empty_content", underlying)

    @classmethod
    def malformed_content(cls, underlying: BaseException | None = None) -> InvalidCandidateError:
        return cls("malformed_content", underlying)


class ContentConversionError(ValueError):
    """Prompt input could not be converted into model content."""


class ImageConversionError(ContentConversionError):
    """An image could not be encoded for sending."""


_ERROR_INFO_TYPE = "type.googleapis.com/google.rpc.ErrorInfo"
_INVALID_API_KEY_REASON = "API_KEY_INVALID"
_GOOGLEAPIS_DOMAIN = "googleapis.com"
_UNSUPPORTED_LOCATION_MESSAGE = "User location is not supported for the API use."


class RPCError(Exception):
    """A non-success status returned by the backend."""

    def __init__(
        self,
        code: int,
        status: str | None,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(f"{code} {status}: {message}" if status else f"{code}: {message}")
        self.code = code
        self.status = status
        self.message = message
        self.details = details or []

    def is_invalid_api_key_error(self) -> bool:
        return any(
            detail.get("@type") == _ERROR_INFO_TYPE
            and detail.get("reason") == _INVALID_API_KEY_REASON
            and detail.get("domain") == _GOOGLEAPIS_DOMAIN
            for detail in self.details
        )

    def is_unsupported_user_location_error(self) -> bool:
        return self.message == _UNSUPPORTED_LOCATION_MESSAGE


# ---------------------------------------------------------------------------
# Public taxonomy: content generation
# ---------------------------------------------------------------------------


class GenerateContentError(Exception):
    """Base class for every error raised by content generation."""


class PromptBlocked(GenerateContentError):
    """The prompt was blocked; ``response`` carries the prompt feedback."""

    def __init__(self, response: GenerateContentResponse) -> None:
        super().__init__("The prompt was blocked by the backend")
        self.response = response


class ResponseStoppedEarly(GenerateContentError):
    """Generation stopped for ``reason``; ``response`` holds any partial content."""

    def __init__(self, reason: FinishReason, response: GenerateContentResponse) -> None:
        super().__init__(f"The response stopped early: {reason.value}")
        self.reason = reason
        self.response = response


class PromptContentError(GenerateContentError):
    """The prompt content could not be prepared for sending."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Invalid prompt content: {underlying}")
        self.underlying = underlying


class InvalidAPIKey(GenerateContentError):
    def __init__(self) -> None:
        super().__init__("The API key is invalid")


class UnsupportedUserLocation(GenerateContentError):
    def __init__(self) -> None:
        super().__init__("The API is not available in the user's location")


class InternalError(GenerateContentError):
    """Any other failure; ``underlying`` is the original exception."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Internal error: {underlying}")
        self.underlying = underlying


# ---------------------------------------------------------------------------
# Public taxonomy: token counting
# ---------------------------------------------------------------------------


class CountTokensError(Exception):
    """Base class for every error raised by token counting."""


class CountTokensInternalError(CountTokensError):
    def __init__(self, underlying: BaseException) -> None:
        super().__init__(f"Token count failed: {underlying}")
        self.underlying = underlying
