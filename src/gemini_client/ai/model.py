"""The :class:`GenerativeModel` facade.

This is the single entry point applications use.  It builds requests, hands
them to a :class:`~gemini_client.ai.transport.base.Transport`, validates what
comes back and guarantees that only the public error taxonomy escapes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gemini_client.ai.content import to_content_sequence
from gemini_client.ai.error_translation import count_tokens_error, generate_content_error
from gemini_client.ai.request import (
    CountTokensRequest,
    GenerateContentRequest,
    model_resource_name,
)
from gemini_client.ai.types import RequestOptions
from gemini_client.ai.utils.response_stream import ResponseStream
from gemini_client.ai.validation import validate_response

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gemini_client.ai.chat import Chat
    from gemini_client.ai.content import ContentInput
    from gemini_client.ai.transport.base import Transport
    from gemini_client.ai.types import (
        CountTokensResponse,
        GenerateContentResponse,
        GenerationConfig,
        ModelContent,
        SafetySetting,
    )

logger = logging.getLogger(__name__)


class GenerativeModel:
    """A remote multimodal model able to generate content from prompts.

    Parameters
    ----------
    name:
        Model name such as ``"gemini-1.5-pro"``.  Bare names are addressed as
        ``models/<name>``; names containing a slash are used unchanged.
    api_key:
        API key for the default transport.  Falls back to the environment
        (``GEMINI_CLIENT_API_KEY``, ``GOOGLE_API_KEY``, ``GEMINI_API_KEY``).
    generation_config:
        Sampling and output parameters sent with every generation request.
    safety_settings:
        Per-category block thresholds sent with every generation request.
    request_options:
        Transport options (timeout, API version).
    transport:
        Transport to use instead of the default ``google-genai`` one.
    """

    def __init__(
        self,
        name: str,
        api_key: str | None = None,
        generation_config: GenerationConfig | None = None,
        safety_settings: Iterable[SafetySetting] | None = None,
        request_options: RequestOptions | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._model_resource_name = model_resource_name(name)
        self._generation_config = generation_config
        self._safety_settings = (
            tuple(safety_settings) if safety_settings is not None else None
        )
        self._request_options = request_options or RequestOptions()

        if transport is None:
            from gemini_client.ai.transport.google import GoogleTransport

            transport = GoogleTransport(api_key)
        self._transport = transport

        logger.info("Model %s initialized", self._model_resource_name)

    @property
    def model_resource_name(self) -> str:
        """Backend resource name, e.g. ``"models/gemini-1.5-pro"``."""
        return self._model_resource_name

    @property
    def generation_config(self) -> GenerationConfig | None:
        return self._generation_config

    @property
    def safety_settings(self) -> tuple[SafetySetting, ...] | None:
        return self._safety_settings

    @property
    def request_options(self) -> RequestOptions:
        return self._request_options

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def generate_content(self, *content: ContentInput) -> GenerateContentResponse:
        """Generate a single response for the given prompt content.

        Raises
        ------
        GenerateContentError
            One of its subclasses, for any failure.
        """
        try:
            request = self._generate_request(to_content_sequence(*content), is_streaming=False)
            logger.debug("Sending generate request to %s", request.model)
            response = await self._transport.send(request)
            return validate_response(response)
        except Exception as exc:
            public = generate_content_error(exc)
            if public is exc:
                raise
            raise public from exc

    def generate_content_stream(self, *content: ContentInput) -> ResponseStream:
        """Return a stream of incremental responses for the given prompt content.

        Nothing is sent until the stream is first pulled.  Invalid prompt
        content does not raise here: the returned stream raises the
        translated error on its first pull.
        """
        try:
            contents = to_content_sequence(*content)
        except Exception as exc:
            public = generate_content_error(exc)
            if public is not exc:
                public.__cause__ = exc
            return ResponseStream.failed(public)

        request = self._generate_request(contents, is_streaming=True)
        logger.debug("Opening generate stream to %s", request.model)
        return ResponseStream(lambda: self._transport.send_streaming(request))

    async def count_tokens(self, *content: ContentInput) -> CountTokensResponse:
        """Run the model's tokenizer on the given prompt content.

        Raises
        ------
        CountTokensError
            :class:`CountTokensInternalError` for any failure.
        """
        try:
            request = CountTokensRequest(
                model=self._model_resource_name,
                contents=to_content_sequence(*content),
                options=self._request_options,
            )
            logger.debug("Sending count tokens request to %s", request.model)
            return await self._transport.count_tokens(request)
        except Exception as exc:
            public = count_tokens_error(exc)
            if public is exc:
                raise
            raise public from exc

    def start_chat(self, history: Iterable[ModelContent] | None = None) -> Chat:
        """Start a chat session backed by this model."""
        from gemini_client.ai.chat import Chat

        return Chat(self, history)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _generate_request(
        self,
        contents: tuple[ModelContent, ...],
        *,
        is_streaming: bool,
    ) -> GenerateContentRequest:
        return GenerateContentRequest(
            model=self._model_resource_name,
            contents=contents,
            generation_config=self._generation_config,
            safety_settings=self._safety_settings,
            is_streaming=is_streaming,
            options=self._request_options,
        )
