"""
Normalization of inference responses.

Hosted models answer in one of a few JSON shapes depending on the task
and backend. Each shape is a tagged variant, and ``classify_response`` is
total: anything unrecognised maps to ``ResponseShape.UNKNOWN`` with empty
text, which callers treat as "no result".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

TEXT_FIELDS = ("summary_text", "translation_text", "generated_text")


class ResponseShape(str, Enum):
    ARRAY_OF_OBJECTS = "array_of_objects"
    OBJECT = "object"
    STRING = "string"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InferenceResponse:
    shape: ResponseShape
    text: str


def classify_response(data: Any) -> InferenceResponse:
    """Map a decoded JSON body to its shape and canonical text.

    Examples:
        >>> classify_response([{"summary_text": "A"}])
        InferenceResponse(shape=<ResponseShape.ARRAY_OF_OBJECTS: 'array_of_objects'>, text='A')
        >>> classify_response({"error": "x"}).shape
        <ResponseShape.UNKNOWN: 'unknown'>
    """
    if isinstance(data, str):
        return InferenceResponse(ResponseShape.STRING, data.strip())
    if isinstance(data, list) and data and isinstance(data[0], dict):
        text = _text_field(data[0])
        if text is not None:
            return InferenceResponse(ResponseShape.ARRAY_OF_OBJECTS, text)
    if isinstance(data, dict):
        text = _text_field(data)
        if text is not None:
            return InferenceResponse(ResponseShape.OBJECT, text)
    return InferenceResponse(ResponseShape.UNKNOWN, "")


def extract_text(data: Any) -> str:
    return classify_response(data).text


def _text_field(obj: dict[str, Any]) -> str | None:
    for key in TEXT_FIELDS:
        value = obj.get(key)
        if isinstance(value, str):
            return value.strip()
    return None
