"""Request value objects handed to the transport."""

from __future__ import annotations

from dataclasses import dataclass

from gemini_client.ai.types import (
    GenerationConfig,
    ModelContent,
    RequestOptions,
    SafetySetting,
)

MODEL_RESOURCE_PREFIX = "models/"


def model_resource_name(name: str) -> str:
    """Return the backend resource name for *name*.

    Bare names get the ``models/`` prefix; names that already contain a
    slash (``models/...``, ``tunedModels/...``) are returned unchanged.
    """
    if "/" in name:
        return name
    return MODEL_RESOURCE_PREFIX + name


@dataclass(frozen=True)
class GenerateContentRequest:
    model: str
    contents: tuple[ModelContent, ...]
    generation_config: GenerationConfig | None
    safety_settings: tuple[SafetySetting, ...] | None
    is_streaming: bool
    options: RequestOptions


@dataclass(frozen=True)
class CountTokensRequest:
    model: str
    contents: tuple[ModelContent, ...]
    options: RequestOptions
