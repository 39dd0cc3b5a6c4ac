"""Google Generative AI (Gemini) transport.

Implements the :class:`Transport` protocol using the ``google-genai`` SDK
async client.  Converts gemini_client request types to Gemini ``Content``
and config objects, and SDK responses back to gemini_client value objects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as gtypes

from gemini_client.ai.env_api_keys import get_env_api_key
from gemini_client.ai.errors import InvalidCandidateError, RPCError
from gemini_client.ai.types import (
    BlobPart,
    BlockReason,
    Candidate,
    CitationMetadata,
    CitationSource,
    CountTokensResponse,
    FinishReason,
    GenerateContentResponse,
    HarmCategory,
    HarmProbability,
    ModelContent,
    Part,
    PromptFeedback,
    SafetyRating,
    TextPart,
    UsageMetadata,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from gemini_client.ai.request import CountTokensRequest, GenerateContentRequest
    from gemini_client.ai.types import (
        GenerationConfig,
        RequestOptions,
        SafetySetting,
    )

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Client creation
# ---------------------------------------------------------------------------


def _create_client(api_key: str, options: RequestOptions) -> genai.Client:
    """Instantiate a ``google.genai`` client honouring the request options."""
    http_options = gtypes.HttpOptions(
        api_version=options.api_version,
        timeout=int(options.timeout * 1000),
        headers=dict(options.headers) or None,
    )
    return genai.Client(api_key=api_key, http_options=http_options)


# ---------------------------------------------------------------------------
# Request conversion  (gemini_client -> Gemini)
# ---------------------------------------------------------------------------


def _convert_part(part: Part) -> gtypes.Part:
    if isinstance(part, TextPart):
        return gtypes.Part(text=part.text)
    return gtypes.Part(
        inline_data=gtypes.Blob(mime_type=part.mime_type, data=part.data),
    )


def _convert_contents(contents: tuple[ModelContent, ...]) -> list[gtypes.Content]:
    return [
        gtypes.Content(
            role=content.role or "user",
            parts=[_convert_part(p) for p in content.parts],
        )
        for content in contents
    ]


def _build_generate_config(
    generation_config: GenerationConfig | None,
    safety_settings: tuple[SafetySetting, ...] | None,
) -> gtypes.GenerateContentConfig:
    config = gtypes.GenerateContentConfig()

    if generation_config is not None:
        gc = generation_config
        if gc.temperature is not None:
            config.temperature = gc.temperature
        if gc.top_p is not None:
            config.top_p = gc.top_p
        if gc.top_k is not None:
            config.top_k = gc.top_k
        if gc.candidate_count is not None:
            config.candidate_count = gc.candidate_count
        if gc.max_output_tokens is not None:
            config.max_output_tokens = gc.max_output_tokens
        if gc.stop_sequences is not None:
            config.stop_sequences = list(gc.stop_sequences)
        if gc.response_mime_type is not None:
            config.response_mime_type = gc.response_mime_type

    if safety_settings:
        config.safety_settings = [
            gtypes.SafetySetting(
                category=s.harm_category.value,
                threshold=s.threshold.value,
            )
            for s in safety_settings
        ]

    return config


# ---------------------------------------------------------------------------
# Response conversion  (Gemini -> gemini_client)
# ---------------------------------------------------------------------------


def _enum_value(value: Any) -> str:
    return getattr(value, "value", value)


def _convert_safety_ratings(ratings: list[Any] | None) -> tuple[SafetyRating, ...]:
    return tuple(
        SafetyRating(
            category=HarmCategory(_enum_value(r.category)),
            probability=HarmProbability(_enum_value(r.probability)),
        )
        for r in ratings or []
        if r.category is not None and r.probability is not None
    )


def _convert_response_part(part: Any) -> Part | None:
    """Convert one SDK part; thought parts are dropped."""
    if getattr(part, "thought", None) is True:
        return None
    if part.text is not None:
        return TextPart(text=part.text)
    blob = part.inline_data
    if blob is not None and blob.mime_type and blob.data is not None:
        return BlobPart(mime_type=blob.mime_type, data=blob.data)
    raise ValueError("Part has neither text nor inline data")


def _convert_candidate(raw: Any) -> Candidate:
    finish_reason = (
        FinishReason(_enum_value(raw.finish_reason))
        if raw.finish_reason is not None
        else None
    )
    if raw.content is None and finish_reason is None:
        raise InvalidCandidateError.empty_content()

    try:
        parts: list[Part] = []
        raw_parts = raw.content.parts if raw.content is not None else None
        for raw_part in raw_parts or []:
            part = _convert_response_part(raw_part)
            if part is not None:
                parts.append(part)

        citation_metadata = None
        if raw.citation_metadata is not None:
            citation_metadata = CitationMetadata(
                citation_sources=tuple(
                    CitationSource(
                        start_index=c.start_index,
                        end_index=c.end_index,
                        uri=c.uri,
                        license=c.license,
                    )
                    for c in raw.citation_metadata.citations or []
                ),
            )

        return Candidate(
            content=ModelContent(parts=tuple(parts), role="model"),
            finish_reason=finish_reason,
            safety_ratings=_convert_safety_ratings(raw.safety_ratings),
            citation_metadata=citation_metadata,
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidCandidateError.malformed_content(e) from e


def _convert_response(raw: gtypes.GenerateContentResponse) -> GenerateContentResponse:
    candidates = tuple(_convert_candidate(c) for c in raw.candidates or [])

    prompt_feedback = None
    if raw.prompt_feedback is not None:
        block_reason = raw.prompt_feedback.block_reason
        prompt_feedback = PromptFeedback(
            block_reason=(
                BlockReason(_enum_value(block_reason))
                if block_reason is not None
                else None
            ),
            safety_ratings=_convert_safety_ratings(raw.prompt_feedback.safety_ratings),
        )

    usage_metadata = None
    usage = raw.usage_metadata
    if usage is not None:
        usage_metadata = UsageMetadata(
            prompt_token_count=usage.prompt_token_count or 0,
            candidates_token_count=usage.candidates_token_count or 0,
            total_token_count=usage.total_token_count or 0,
        )

    return GenerateContentResponse(
        candidates=candidates,
        prompt_feedback=prompt_feedback,
        usage_metadata=usage_metadata,
    )


def _to_rpc_error(error: genai_errors.APIError) -> RPCError:
    """Convert an SDK ``APIError`` into an :class:`RPCError`."""
    payload = getattr(error, "details", None)
    details: list[dict[str, Any]] = []
    if isinstance(payload, dict):
        body = payload.get("error", payload)
        if isinstance(body, dict) and isinstance(body.get("details"), list):
            details = [d for d in body["details"] if isinstance(d, dict)]
    return RPCError(
        code=error.code,
        status=error.status,
        message=error.message or str(error),
        details=details,
    )


# ---------------------------------------------------------------------------
# Transport class
# ---------------------------------------------------------------------------


class GoogleTransport:
    """``google-genai`` backed implementation of :class:`Transport`."""

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = api_key

    def _client(self, options: RequestOptions) -> genai.Client:
        api_key = self._api_key or get_env_api_key("google")
        if not api_key:
            raise ValueError("No API key configured for the Gemini API")
        return _create_client(api_key, options)

    async def send(self, request: GenerateContentRequest) -> GenerateContentResponse:
        client = self._client(request.options)
        try:
            raw = await client.aio.models.generate_content(
                model=request.model,
                contents=_convert_contents(request.contents),
                config=_build_generate_config(
                    request.generation_config, request.safety_settings,
                ),
            )
        except genai_errors.APIError as e:
            raise _to_rpc_error(e) from e
        return _convert_response(raw)

    async def send_streaming(
        self,
        request: GenerateContentRequest,
    ) -> AsyncIterator[GenerateContentResponse]:
        client = self._client(request.options)
        try:
            google_stream = await client.aio.models.generate_content_stream(
                model=request.model,
                contents=_convert_contents(request.contents),
                config=_build_generate_config(
                    request.generation_config, request.safety_settings,
                ),
            )
        except genai_errors.APIError as e:
            raise _to_rpc_error(e) from e

        try:
            while True:
                try:
                    chunk = await google_stream.__anext__()
                except StopAsyncIteration:
                    return
                except genai_errors.APIError as e:
                    raise _to_rpc_error(e) from e
                yield _convert_response(chunk)
        finally:
            close = getattr(google_stream, "aclose", None)
            if close is not None:
                await close()

    async def count_tokens(self, request: CountTokensRequest) -> CountTokensResponse:
        client = self._client(request.options)
        try:
            raw = await client.aio.models.count_tokens(
                model=request.model,
                contents=_convert_contents(request.contents),
            )
        except genai_errors.APIError as e:
            raise _to_rpc_error(e) from e
        return CountTokensResponse(total_tokens=raw.total_tokens or 0)
