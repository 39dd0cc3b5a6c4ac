"""Pull-based async stream of validated generation responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from gemini_client.ai.error_translation import generate_content_error
from gemini_client.ai.validation import validate_response

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from gemini_client.ai.errors import GenerateContentError
    from gemini_client.ai.types import GenerateContentResponse

logger = logging.getLogger(__name__)


class ResponseStream:
    """Async iterator over the chunks of a streamed generation.

    Wraps the transport's raw chunk iterator.  Every chunk passes through
    :func:`~gemini_client.ai.validation.validate_response`; the first
    failure (from validation or from the origin itself) is translated into a
    :class:`~gemini_client.ai.errors.GenerateContentError`, raised on that
    pull, and ends the stream for good.

    Parameters
    ----------
    open_source:
        Zero-argument callable returning the origin iterator.  It is called
        on the first pull, never earlier.

    Nothing is read ahead: one pull here is exactly one pull on the origin.
    Abandon a stream early with :meth:`aclose` or by using it as an async
    context manager; either closes the origin.
    """

    def __init__(
        self,
        open_source: Callable[[], AsyncIterator[GenerateContentResponse]],
    ) -> None:
        self._open_source = open_source
        self._source: AsyncIterator[GenerateContentResponse] | None = None
        self._pending_error: GenerateContentError | None = None
        self._finished = False

    @classmethod
    def failed(cls, error: GenerateContentError) -> ResponseStream:
        """Return a stream whose first pull raises *error*."""
        stream = cls(_never_opened)
        stream._pending_error = error
        return stream

    @property
    def finished(self) -> bool:
        """Whether the stream has ended, normally or not."""
        return self._finished

    # ------------------------------------------------------------------
    # Async iterator protocol
    # ------------------------------------------------------------------

    def __aiter__(self) -> ResponseStream:
        return self

    async def __anext__(self) -> GenerateContentResponse:
        if self._finished:
            raise StopAsyncIteration

        if self._pending_error is not None:
            error, self._pending_error = self._pending_error, None
            self._finished = True
            raise error

        try:
            if self._source is None:
                self._source = self._open_source()
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except Exception as exc:
            await self.aclose()
            public = generate_content_error(exc)
            if public is exc:
                raise
            raise public from exc
        except BaseException:
            # Cancellation and interpreter exits pass through untranslated.
            await self.aclose()
            raise

        try:
            return validate_response(chunk)
        except Exception as exc:
            await self.aclose()
            raise generate_content_error(exc) from exc

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """End the stream and release the origin.  Safe to call repeatedly."""
        self._finished = True
        self._pending_error = None
        source, self._source = self._source, None
        if source is None:
            return
        close = getattr(source, "aclose", None)
        if close is None:
            return
        logger.debug("Closing response stream origin")
        try:
            await close()
        except Exception:
            # Never replaces the error or result the caller is about to see.
            logger.warning("Closing response stream origin failed", exc_info=True)

    async def __aenter__(self) -> ResponseStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _never_opened() -> AsyncIterator[GenerateContentResponse]:
    raise RuntimeError("A failed response stream has no origin")
