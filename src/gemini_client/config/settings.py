"""Settings Pydantic models for gemini-client configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from gemini_client.ai.types import (
    DEFAULT_API_VERSION,
    DEFAULT_TIMEOUT_SECONDS,
    BlockThreshold,
    GenerationConfig,
    HarmCategory,
    RequestOptions,
    SafetySetting,
)

DEFAULT_MODEL = "gemini-1.5-flash"


class GenerationSettings(BaseModel):
    """Default generation parameters."""

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    response_mime_type: str | None = None

    model_config = {"extra": "ignore"}

    def to_generation_config(self) -> GenerationConfig | None:
        """Return a :class:`GenerationConfig`, or ``None`` when nothing is set."""
        values = self.model_dump(exclude_none=True)
        if not values:
            return None
        if "stop_sequences" in values:
            values["stop_sequences"] = tuple(values["stop_sequences"])
        return GenerationConfig(**values)


class SafetySettingConfig(BaseModel):
    """One safety threshold entry."""

    category: HarmCategory
    threshold: BlockThreshold

    model_config = {"extra": "ignore"}


class RequestSettings(BaseModel):
    """Transport options."""

    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    api_version: str = DEFAULT_API_VERSION

    model_config = {"extra": "ignore"}


class Settings(BaseModel):
    """Top-level settings model — the single source of truth for configuration."""

    model: str = DEFAULT_MODEL
    api_key: str | None = None
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    safety: list[SafetySettingConfig] = Field(default_factory=list)
    request: RequestSettings = Field(default_factory=RequestSettings)
    verbose: bool = False

    model_config = {"extra": "ignore"}

    def to_model_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :class:`~gemini_client.ai.model.GenerativeModel`."""
        return {
            "name": self.model,
            "api_key": self.api_key,
            "generation_config": self.generation.to_generation_config(),
            "safety_settings": [
                SafetySetting(harm_category=s.category, threshold=s.threshold)
                for s in self.safety
            ] or None,
            "request_options": RequestOptions(
                timeout=self.request.timeout,
                api_version=self.request.api_version,
            ),
        }
