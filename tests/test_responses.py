"""Tests for inference response shape handling."""

from __future__ import annotations

import pytest

from url_digest.llm.responses import ResponseShape, classify_response, extract_text


def test_array_of_objects():
    parsed = classify_response([{"summary_text": " A summary. "}])
    assert parsed.shape == ResponseShape.ARRAY_OF_OBJECTS
    assert parsed.text == "A summary."


def test_array_with_generated_text():
    assert extract_text([{"generated_text": "Generated."}]) == "Generated."


def test_bare_object():
    parsed = classify_response({"translation_text": "Hallo Welt"})
    assert parsed.shape == ResponseShape.OBJECT
    assert parsed.text == "Hallo Welt"


def test_plain_string():
    parsed = classify_response("  plain output ")
    assert parsed.shape == ResponseShape.STRING
    assert parsed.text == "plain output"


@pytest.mark.parametrize(
    "data",
    [
        {"error": "Model is overloaded"},
        [],
        [1, 2],
        [{"label": "POSITIVE"}],
        42,
        None,
        {"summary_text": 3},
    ],
)
def test_unknown_shapes_yield_empty_text(data):
    parsed = classify_response(data)
    assert parsed.shape == ResponseShape.UNKNOWN
    assert parsed.text == ""
