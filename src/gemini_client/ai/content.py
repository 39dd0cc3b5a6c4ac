"""Normalisation of prompt inputs into :class:`ModelContent` turns.

Every public entry point funnels its ``*content`` arguments through
:func:`to_content_sequence`, so the model facade only ever deals with a
tuple of :class:`ModelContent`.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Union

from gemini_client.ai.errors import ContentConversionError, ImageConversionError
from gemini_client.ai.types import BlobPart, ModelContent, Part, TextPart

SUPPORTED_IMAGE_MIME_TYPES: frozenset[str] = frozenset({
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/heic",
    "image/heif",
})


@dataclass(frozen=True)
class ImageContent:
    """An image given as raw bytes or a base64 string."""

    data: bytes | str
    mime_type: str


ContentInput = Union[str, Part, ImageContent, ModelContent, list, tuple]
"""Anything accepted as prompt content by the public entry points."""


def image_to_part(image: ImageContent) -> BlobPart:
    """Encode *image* as a :class:`BlobPart` or raise :class:`ImageConversionError`."""
    if image.mime_type not in SUPPORTED_IMAGE_MIME_TYPES:
        raise ImageConversionError(f"Unsupported image mime type: {image.mime_type!r}")

    if isinstance(image.data, str):
        try:
            data = base64.b64decode(image.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageConversionError(f"Image data is not valid base64: {e}") from e
    else:
        data = bytes(image.data)

    if not data:
        raise ImageConversionError("Image data is empty")
    return BlobPart(mime_type=image.mime_type, data=data)


def to_part(value: object) -> Part:
    """Convert a single parts-representable value to a :class:`Part`."""
    if isinstance(value, str):
        return TextPart(text=value)
    if isinstance(value, (TextPart, BlobPart)):
        return value
    if isinstance(value, ImageContent):
        return image_to_part(value)
    raise ContentConversionError(
        f"Cannot use {type(value).__name__} as prompt content"
    )


def _flatten(inputs: tuple[object, ...]) -> list[object]:
    flat: list[object] = []
    for item in inputs:
        if isinstance(item, (list, tuple)):
            flat.extend(_flatten(tuple(item)))
        else:
            flat.append(item)
    return flat


def to_content_sequence(*inputs: object) -> tuple[ModelContent, ...]:
    """Normalise prompt inputs into a tuple of :class:`ModelContent`.

    * Only ``ModelContent`` values: used as-is (multi-turn prompt).
    * Anything else: all values become parts of one role-less turn, in order.

    Raises :class:`ContentConversionError` (or its subclass
    :class:`ImageConversionError`) for inputs that cannot be converted.
    """
    flat = _flatten(inputs)
    if not flat:
        raise ContentConversionError("No prompt content given")

    if all(isinstance(item, ModelContent) for item in flat):
        return tuple(flat)  # type: ignore[arg-type]
    if any(isinstance(item, ModelContent) for item in flat):
        raise ContentConversionError(
            "ModelContent values cannot be mixed with plain parts"
        )

    return (ModelContent(parts=tuple(to_part(item) for item in flat)),)
