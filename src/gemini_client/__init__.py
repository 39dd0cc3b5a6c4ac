"""Async client for Gemini-style multimodal generation services."""

from gemini_client.ai.chat import Chat
from gemini_client.ai.content import ImageContent
from gemini_client.ai.errors import (
    CountTokensError,
    CountTokensInternalError,
    GenerateContentError,
    InternalError,
    InvalidAPIKey,
    PromptBlocked,
    PromptContentError,
    ResponseStoppedEarly,
    UnsupportedUserLocation,
)
from gemini_client.ai.model import GenerativeModel
from gemini_client.ai.types import (
    BlockReason,
    BlockThreshold,
    FinishReason,
    GenerateContentResponse,
    GenerationConfig,
    HarmCategory,
    ModelContent,
    RequestOptions,
    SafetySetting,
    TextPart,
)
from gemini_client.ai.utils.response_stream import ResponseStream

__version__ = "0.1.0"

__all__ = [
    "BlockReason",
    "BlockThreshold",
    "Chat",
    "CountTokensError",
    "CountTokensInternalError",
    "FinishReason",
    "GenerateContentError",
    "GenerateContentResponse",
    "GenerationConfig",
    "GenerativeModel",
    "HarmCategory",
    "ImageContent",
    "InternalError",
    "InvalidAPIKey",
    "ModelContent",
    "PromptBlocked",
    "PromptContentError",
    "RequestOptions",
    "ResponseStoppedEarly",
    "ResponseStream",
    "SafetySetting",
    "TextPart",
    "UnsupportedUserLocation",
    "__version__",
]
