"""Shared test fixtures for the gemini-client test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gemini_client.ai.errors import RPCError
from gemini_client.ai.model import GenerativeModel
from gemini_client.ai.types import (
    BlockReason,
    Candidate,
    CountTokensResponse,
    FinishReason,
    GenerateContentResponse,
    ModelContent,
    PromptFeedback,
    TextPart,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from gemini_client.ai.request import CountTokensRequest, GenerateContentRequest

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_response(
    text: str = "Hello!",
    finish_reason: FinishReason | None = FinishReason.STOP,
    block_reason: BlockReason | None = None,
) -> GenerateContentResponse:
    """Create a single-candidate response for tests."""
    feedback = PromptFeedback(block_reason=block_reason) if block_reason is not None else None
    return GenerateContentResponse(
        candidates=(
            Candidate(
                content=ModelContent(parts=(TextPart(text=text),), role="model"),
                finish_reason=finish_reason,
            ),
        ),
        prompt_feedback=feedback,
    )


def make_blocked_response(reason: BlockReason = BlockReason.SAFETY) -> GenerateContentResponse:
    """Create a response with no candidates and a blocked prompt."""
    return GenerateContentResponse(prompt_feedback=PromptFeedback(block_reason=reason))


def make_invalid_api_key_error() -> RPCError:
    return RPCError(
        code=400,
        status="INVALID_ARGUMENT",
        message="API key not valid. Please pass a valid API key.",
        details=[{
            "@type": "type.googleapis.com/google.rpc.ErrorInfo",
            "reason": "API_KEY_INVALID",
            "domain": "googleapis.com",
        }],
    )


def make_unsupported_location_error() -> RPCError:
    return RPCError(
        code=400,
        status="FAILED_PRECONDITION",
        message="User location is not supported for the API use.",
    )


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

class FakeTransport:
    """A scripted transport that records requests and stream pulls.

    ``chunks`` may contain exceptions; the streaming origin raises them when
    pulled in their position.
    """

    def __init__(
        self,
        response: GenerateContentResponse | None = None,
        chunks: Iterable[GenerateContentResponse | BaseException] = (),
        error: BaseException | None = None,
        total_tokens: int = 7,
    ) -> None:
        self.response = response or make_response()
        self.chunks = list(chunks)
        self.error = error
        self.total_tokens = total_tokens
        self.requests: list[GenerateContentRequest | CountTokensRequest] = []
        self.pulls = 0
        self.stream_opened = False
        self.stream_closed = False

    async def send(self, request: GenerateContentRequest) -> GenerateContentResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def send_streaming(
        self,
        request: GenerateContentRequest,
    ) -> AsyncIterator[GenerateContentResponse]:
        self.requests.append(request)
        return self._stream()

    async def _stream(self) -> AsyncIterator[GenerateContentResponse]:
        self.stream_opened = True
        try:
            if self.error is not None:
                raise self.error
            for item in self.chunks:
                self.pulls += 1
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.stream_closed = True

    async def count_tokens(self, request: CountTokensRequest) -> CountTokensResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return CountTokensResponse(total_tokens=self.total_tokens)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_transport() -> FakeTransport:
    """Provide a fake transport returning a plain ``STOP`` response."""
    return FakeTransport()


@pytest.fixture
def model(fake_transport: FakeTransport) -> GenerativeModel:
    """Provide a model wired to :func:`fake_transport`."""
    return GenerativeModel("gemini-test", transport=fake_transport)
