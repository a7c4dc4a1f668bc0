"""Tests for per-chunk summarization and its fallbacks."""

from __future__ import annotations

import httpx
import pytest

from url_digest.analyzers.summarizer import ArticleSummarizer
from url_digest.config import InferenceConfig, SummaryConfig
from url_digest.errors import PipelineExhaustedError, ProviderHardError, ProviderTransientError
from url_digest.llm.pacing import RemoteCallPacer
from url_digest.llm.providers.base import InferenceProvider
from url_digest.llm.providers.huggingface import HuggingFaceProvider
from url_digest.summarize.extractive import lead_sentences, summarize_extractive
from url_digest.text.chunker import chunk
from url_digest.text.sentences import split_sentences
from url_digest.utils.deadline import Deadline

REPLY = "A compact abstractive summary that is long enough to be accepted."


class _DummyInference(InferenceProvider):
    """Answers with respond(text); exceptions returned by respond are raised."""

    def __init__(self, respond):
        self.respond = respond
        self.calls: list[tuple[str, str]] = []

    def invoke(self, model_id, text, params=None, deadline=None):  # noqa: ANN001
        self.calls.append((model_id, text))
        result = self.respond(text)
        if isinstance(result, Exception):
            raise result
        return result


def _text(count: int) -> str:
    return " ".join(f"Sentence {i} carries a modest amount of filler text here." for i in range(count))


def _summarizer(cfg, inference, pacer=None):
    return ArticleSummarizer(cfg, inference, "sum/model", params={"max_length": 100}, pacer=pacer)


def test_short_text_uses_abstractive_result():
    inference = _DummyInference(lambda text: REPLY)
    result = _summarizer(SummaryConfig(), inference).summarize(_text(8))

    assert result.text == REPLY
    assert result.strategies == ["abstractive"]
    assert inference.calls[0][0] == "sum/model"


def test_failing_abstractive_call_falls_back_to_leading_sentences():
    inference = _DummyInference(lambda text: ProviderTransientError(503, "still loading"))
    text = _text(8)
    result = _summarizer(SummaryConfig(fallback_sentences=4), inference).summarize(text)

    assert result.text == lead_sentences(text, 4)
    assert len(split_sentences(result.text)) == 4
    assert result.strategies == ["lead"]


def test_too_short_abstractive_result_counts_as_no_result():
    inference = _DummyInference(lambda text: "Tiny.")
    text = _text(8)
    result = _summarizer(SummaryConfig(fallback_sentences=3), inference).summarize(text)

    assert result.text == lead_sentences(text, 3)
    assert result.strategies == ["lead"]


def test_long_text_is_reduced_extractively_then_refined():
    inference = _DummyInference(lambda text: REPLY)
    cfg = SummaryConfig(short_text_threshold=100, target_extractive_sentences=5)
    result = _summarizer(cfg, inference).summarize(_text(30))

    assert result.strategies == ["refined"]
    assert result.text == REPLY
    assert inference.calls[0][1] == summarize_extractive(_text(30), 5)


def test_failed_refinement_keeps_extractive_result():
    inference = _DummyInference(lambda text: ProviderHardError(400, "bad input"))
    cfg = SummaryConfig(force_extractive=True, target_extractive_sentences=10)
    text = _text(25)
    result = _summarizer(cfg, inference).summarize(text)

    assert result.text == summarize_extractive(text, 10)
    assert len(split_sentences(result.text)) == 10
    assert result.strategies == ["extractive"]


def test_without_provider_only_extractive_runs():
    cfg = SummaryConfig(target_extractive_sentences=10)
    text = _text(25)
    result = _summarizer(cfg, None).summarize(text)

    assert result.text == summarize_extractive(text, 10)
    assert result.strategies == ["extractive"]


def test_refinement_can_be_disabled():
    inference = _DummyInference(lambda text: REPLY)
    cfg = SummaryConfig(force_extractive=True, refine_extractive=False, target_extractive_sentences=4)
    result = _summarizer(cfg, inference).summarize(_text(12))

    assert inference.calls == []
    assert result.strategies == ["extractive"]


def test_long_joined_summaries_are_recondensed():
    inference = _DummyInference(lambda text: REPLY)
    cfg = SummaryConfig(max_chunk_chars=200, recondense_threshold=100)
    text = _text(10)
    chunks = chunk(text, 200)
    result = _summarizer(cfg, inference).summarize(text)

    assert len(chunks) > 1
    assert result.recondensed is True
    assert result.text == REPLY
    assert result.source_chunk_count == len(chunks)
    assert len(inference.calls) == len(chunks) + 1


def test_failed_recondense_keeps_joined_text():
    def respond(text):
        if REPLY in text:
            return ProviderTransientError(500, "boom")
        return REPLY

    inference = _DummyInference(respond)
    cfg = SummaryConfig(max_chunk_chars=200, recondense_threshold=100)
    text = _text(10)
    chunks = chunk(text, 200)
    result = _summarizer(cfg, inference).summarize(text)

    assert result.recondensed is False
    assert result.text == " ".join([REPLY] * len(chunks))


def test_expired_deadline_skips_remote_calls():
    inference = _DummyInference(lambda text: REPLY)
    cfg = SummaryConfig(max_chunk_chars=200, fallback_sentences=2)
    text = _text(10)
    result = _summarizer(cfg, inference).summarize(text, Deadline(0.0, clock=lambda: 0.0))

    assert inference.calls == []
    assert result.deadline_hit is True
    assert set(result.strategies) == {"deadline_lead"}
    assert result.text == " ".join(lead_sentences(c.text, 2) for c in chunk(text, 200))


def test_remote_calls_are_paced():
    sleeps: list[float] = []
    inference = _DummyInference(lambda text: REPLY)
    cfg = SummaryConfig(max_chunk_chars=200, recondense_threshold=100000)
    pacer = RemoteCallPacer(1.0, sleep=sleeps.append)
    _summarizer(cfg, inference, pacer=pacer).summarize(_text(10))

    assert pacer.calls == len(inference.calls)
    assert sleeps == [1.0] * (len(inference.calls) - 1)


def test_unusable_summary_is_pipeline_exhaustion():
    with pytest.raises(PipelineExhaustedError):
        _summarizer(SummaryConfig(), None).summarize("Hi.")


def test_persistent_server_errors_exhaust_retries_then_use_leading_sentences():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(500, json={"error": "internal"})

    provider = HuggingFaceProvider(
        InferenceConfig(max_retries=3),
        None,
        transport=httpx.MockTransport(handler),
        sleep=lambda seconds: None,
    )
    text = _text(8)
    result = ArticleSummarizer(SummaryConfig(fallback_sentences=4), provider, "sum/model").summarize(text)

    assert len(requests) == 3
    assert result.strategies == ["lead"]
    assert result.text == lead_sentences(text, 4)


def test_compound_language_keywords_match_word_starts():
    text = (
        "Das Dorf liegt an einem kleinen Fluss weit im Süden. "
        "Die Hauptstadt liegt an einem großen Fluss im Norden."
    )
    german = SummaryConfig(source_language="de", target_extractive_sentences=1)
    result = _summarizer(german, None).summarize(text)

    assert result.text == "Die Hauptstadt liegt an einem großen Fluss im Norden."

    no_prefix = SummaryConfig(source_language="de", target_extractive_sentences=1, prefix_match_languages=[])
    result = _summarizer(no_prefix, None).summarize(text)

    assert result.text == "Das Dorf liegt an einem kleinen Fluss weit im Süden."
