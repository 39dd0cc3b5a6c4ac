"""Core type definitions for the generative model client.

All value objects are frozen dataclasses (immutable).  Enumerations mirror
the backend's string values so they can be decoded without a lookup table.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class _BackendEnum(str, Enum):
    """String enum whose unknown backend values decode to ``UNKNOWN``."""

    @classmethod
    def _missing_(cls, value: object) -> _BackendEnum:
        logger.debug("Unrecognized %s value %r", cls.__name__, value)
        return cls.UNKNOWN  # type: ignore[attr-defined]


class FinishReason(_BackendEnum):
    """Why a candidate stopped generating."""

    UNKNOWN = "UNKNOWN"
    UNSPECIFIED = "FINISH_REASON_UNSPECIFIED"
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    RECITATION = "RECITATION"
    OTHER = "OTHER"


class BlockReason(_BackendEnum):
    """Why the prompt as a whole was rejected."""

    UNKNOWN = "UNKNOWN"
    UNSPECIFIED = "BLOCKED_REASON_UNSPECIFIED"
    SAFETY = "SAFETY"
    OTHER = "OTHER"


class HarmCategory(_BackendEnum):
    UNKNOWN = "UNKNOWN"
    UNSPECIFIED = "HARM_CATEGORY_UNSPECIFIED"
    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmProbability(_BackendEnum):
    UNKNOWN = "UNKNOWN"
    UNSPECIFIED = "HARM_PROBABILITY_UNSPECIFIED"
    NEGLIGIBLE = "NEGLIGIBLE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class BlockThreshold(str, Enum):
    """Probability at and above which content is blocked."""

    UNSPECIFIED = "HARM_BLOCK_THRESHOLD_UNSPECIFIED"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"


Role = Literal["user", "model"]


# ---------------------------------------------------------------------------
# Content dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextPart:
    """A block of text content."""

    text: str
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class BlobPart:
    """Inline binary data (images and other media) with its mime type."""

    mime_type: str
    data: bytes
    type: Literal["blob"] = "blob"


Part = Union[TextPart, BlobPart]
"""Union of all part types."""


@dataclass(frozen=True)
class ModelContent:
    """One conversation turn: an optional role plus ordered parts."""

    parts: tuple[Part, ...]
    role: Role | None = None


# ---------------------------------------------------------------------------
# Response dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SafetyRating:
    category: HarmCategory
    probability: HarmProbability


@dataclass(frozen=True)
class CitationSource:
    start_index: int | None = None
    end_index: int | None = None
    uri: str | None = None
    license: str | None = None


@dataclass(frozen=True)
class CitationMetadata:
    citation_sources: tuple[CitationSource, ...] = ()


@dataclass(frozen=True)
class Candidate:
    """A single generated completion."""

    content: ModelContent
    finish_reason: FinishReason | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()
    citation_metadata: CitationMetadata | None = None


@dataclass(frozen=True)
class PromptFeedback:
    """Backend feedback about the prompt itself."""

    block_reason: BlockReason | None = None
    safety_ratings: tuple[SafetyRating, ...] = ()


@dataclass(frozen=True)
class UsageMetadata:
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


@dataclass(frozen=True)
class GenerateContentResponse:
    """A complete response, or one chunk of a streamed response."""

    candidates: tuple[Candidate, ...] = ()
    prompt_feedback: PromptFeedback | None = None
    usage_metadata: UsageMetadata | None = None

    @property
    def text(self) -> str | None:
        """Joined text of the first candidate, or ``None`` if it has none."""
        if not self.candidates:
            return None
        if len(self.candidates) > 1:
            logger.warning(
                "Collapsing a response with %d candidates to the first one",
                len(self.candidates),
            )
        texts = [
            part.text
            for part in self.candidates[0].content.parts
            if isinstance(part, TextPart)
        ]
        if not texts:
            return None
        return "".join(texts)


@dataclass(frozen=True)
class CountTokensResponse:
    total_tokens: int


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling and output parameters applied to every generation request."""

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: tuple[str, ...] | None = None
    response_mime_type: str | None = None


@dataclass(frozen=True)
class SafetySetting:
    harm_category: HarmCategory
    threshold: BlockThreshold


DEFAULT_TIMEOUT_SECONDS: float = 300.0
DEFAULT_API_VERSION: str = "v1beta"


@dataclass(frozen=True)
class RequestOptions:
    """Per-request transport options.

    ``timeout`` is in seconds.  No retry policy is applied by this client.
    ``headers`` may be given as a mapping; it is stored as a tuple of
    name/value pairs so the options stay immutable and hashable.
    """

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    api_version: str = DEFAULT_API_VERSION
    headers: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.headers, Mapping):
            object.__setattr__(self, "headers", tuple(self.headers.items()))
