"""Tests for gemini_client.ai.utils.response_stream — the pull-based stream adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import pytest

from gemini_client.ai.errors import (
    InternalError,
    InvalidAPIKey,
    PromptBlocked,
    ResponseStoppedEarly,
)
from gemini_client.ai.types import BlockReason, FinishReason
from gemini_client.ai.utils.response_stream import ResponseStream
from tests.conftest import (
    FakeTransport,
    make_blocked_response,
    make_invalid_api_key_error,
    make_response,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from gemini_client.ai.types import GenerateContentResponse


def _stream_for(transport: FakeTransport) -> ResponseStream:
    return ResponseStream(lambda: transport.send_streaming(None))  # type: ignore[arg-type]


def _reset_on_close(*chunks: GenerateContentResponse) -> ResponseStream:
    async def origin() -> AsyncIterator[GenerateContentResponse]:
        try:
            for chunk in chunks:
                yield chunk
        finally:
            raise ConnectionResetError("reset while closing")

    return ResponseStream(origin)


async def _drain(stream: ResponseStream) -> list[GenerateContentResponse]:
    return [chunk async for chunk in stream]


class TestNormalIteration:
    async def test_yields_chunks_in_order_unchanged(self) -> None:
        chunks = [make_response(text=str(i), finish_reason=None) for i in range(3)]
        chunks.append(make_response(text="end"))
        transport = FakeTransport(chunks=chunks)

        received = await _drain(_stream_for(transport))

        assert received == chunks
        assert all(a is b for a, b in zip(received, chunks))

    async def test_end_of_input_ends_stream(self) -> None:
        transport = FakeTransport(chunks=[make_response()])
        stream = _stream_for(transport)

        await _drain(stream)

        assert stream.finished
        assert transport.stream_closed
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()

    async def test_empty_origin_yields_nothing(self) -> None:
        assert await _drain(_stream_for(FakeTransport(chunks=[]))) == []

    async def test_origin_opened_lazily(self) -> None:
        opened: list[bool] = []
        transport = FakeTransport(chunks=[make_response()])

        def open_source() -> AsyncIterator[GenerateContentResponse]:
            opened.append(True)
            return transport.send_streaming(None)  # type: ignore[arg-type]

        stream = ResponseStream(open_source)
        assert opened == []

        await stream.__anext__()
        assert opened == [True]


class TestValidationFailure:
    async def test_three_good_chunks_then_safety_stop(self) -> None:
        good = [
            make_response(text="a", finish_reason=None),
            make_response(text="b", finish_reason=FinishReason.STOP),
            make_response(text="c", finish_reason=None),
        ]
        bad = make_response(text="d", finish_reason=FinishReason.SAFETY)
        transport = FakeTransport(chunks=[*good, bad])
        stream = _stream_for(transport)

        received = []
        with pytest.raises(ResponseStoppedEarly) as info:
            async for chunk in stream:
                received.append(chunk)

        assert received == good
        assert info.value.reason is FinishReason.SAFETY
        assert info.value.response is bad

    async def test_no_pulls_after_invalid_chunk(self) -> None:
        transport = FakeTransport(chunks=[
            make_response(finish_reason=None),
            make_response(finish_reason=FinishReason.MAX_TOKENS),
            make_response(finish_reason=None),
            make_response(finish_reason=None),
        ])
        stream = _stream_for(transport)

        with pytest.raises(ResponseStoppedEarly):
            await _drain(stream)

        assert transport.pulls == 2
        assert transport.stream_closed
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        assert transport.pulls == 2

    async def test_blocked_chunk_raises_prompt_blocked(self) -> None:
        blocked = make_blocked_response(BlockReason.OTHER)
        transport = FakeTransport(chunks=[blocked])

        with pytest.raises(PromptBlocked) as info:
            await _drain(_stream_for(transport))
        assert info.value.response is blocked

    async def test_translated_error_chains_cause(self) -> None:
        transport = FakeTransport(chunks=[make_response(finish_reason=FinishReason.OTHER)])

        with pytest.raises(ResponseStoppedEarly) as info:
            await _drain(_stream_for(transport))
        assert info.value.__cause__ is not None


    async def test_failing_close_does_not_replace_translated_error(self) -> None:
        stream = _reset_on_close(make_response(finish_reason=FinishReason.SAFETY))

        with pytest.raises(ResponseStoppedEarly) as info:
            await stream.__anext__()

        assert info.value.reason is FinishReason.SAFETY
        assert stream.finished


class TestOriginFailure:
    async def test_mid_stream_transport_error_is_translated(self) -> None:
        first = make_response(finish_reason=None)
        transport = FakeTransport(chunks=[first, make_invalid_api_key_error(), make_response()])
        stream = _stream_for(transport)

        assert await stream.__anext__() is first
        with pytest.raises(InvalidAPIKey):
            await stream.__anext__()
        assert stream.finished
        assert transport.pulls == 2

    async def test_unexpected_error_is_internal(self) -> None:
        boom = RuntimeError("connection reset")
        transport = FakeTransport(chunks=[boom])

        with pytest.raises(InternalError) as info:
            await _drain(_stream_for(transport))
        assert info.value.underlying is boom

    async def test_error_opening_origin_is_translated(self) -> None:
        def open_source() -> AsyncIterator[GenerateContentResponse]:
            raise OSError("no route to host")

        with pytest.raises(InternalError):
            await _drain(ResponseStream(open_source))


class TestFailedStream:
    async def test_first_pull_raises_then_ends(self) -> None:
        error = InvalidAPIKey()
        stream = ResponseStream.failed(error)

        with pytest.raises(InvalidAPIKey) as info:
            await stream.__anext__()
        assert info.value is error
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()


class TestAbandonment:
    async def test_aclose_releases_origin(self) -> None:
        transport = FakeTransport(chunks=[make_response(finish_reason=None)] * 5)
        stream = _stream_for(transport)

        await stream.__anext__()
        await stream.aclose()

        assert transport.stream_closed
        assert transport.pulls == 1
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        assert transport.pulls == 1

    async def test_context_manager_closes_on_break(self) -> None:
        transport = FakeTransport(chunks=[make_response(finish_reason=None)] * 5)

        async with _stream_for(transport) as stream:
            async for _ in stream:
                break

        assert transport.stream_closed
        assert transport.pulls == 1

    async def test_failing_close_on_break_is_contained(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="gemini_client.ai.utils.response_stream"):
            async with _reset_on_close(make_response(finish_reason=None)) as stream:
                async for _ in stream:
                    break

        assert stream.finished
        assert "Closing response stream origin failed" in caplog.text

    async def test_aclose_before_first_pull_never_opens_origin(self) -> None:
        transport = FakeTransport(chunks=[make_response()])
        stream = _stream_for(transport)

        await stream.aclose()

        assert not transport.stream_opened
        assert transport.requests == []

    async def test_cancellation_is_not_translated(self) -> None:
        async def hanging() -> AsyncIterator[GenerateContentResponse]:
            await asyncio.Event().wait()
            yield make_response()

        stream = ResponseStream(hanging)
        task = asyncio.create_task(stream.__anext__())
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert stream.finished
