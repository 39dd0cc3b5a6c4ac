"""Transport protocol definition.

A transport performs the network I/O for the model facade.  The default
implementation is :class:`~gemini_client.ai.transport.google.GoogleTransport`;
tests substitute scripted fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from gemini_client.ai.request import CountTokensRequest, GenerateContentRequest
    from gemini_client.ai.types import CountTokensResponse, GenerateContentResponse


@runtime_checkable
class Transport(Protocol):
    """Protocol that every transport must satisfy.

    Transports report backend status failures as
    :class:`~gemini_client.ai.errors.RPCError` and undecodable candidates as
    :class:`~gemini_client.ai.errors.InvalidCandidateError`.  They do not
    inspect block or finish reasons; that is the facade's job.
    """

    async def send(self, request: GenerateContentRequest) -> GenerateContentResponse:
        """Send a non-streaming generation request and return the decoded response."""
        ...

    def send_streaming(
        self,
        request: GenerateContentRequest,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Return an async iterator over the decoded chunks of a streamed response.

        No I/O may happen before the first pull.  The iterator may raise
        mid-iteration; it should support ``aclose()``.
        """
        ...

    async def count_tokens(self, request: CountTokensRequest) -> CountTokensResponse:
        """Run the model's tokenizer on the request contents."""
        ...
