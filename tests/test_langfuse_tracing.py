"""Tests for Langfuse tracing setup behavior."""

from __future__ import annotations

import contextlib
import sys
import types

from url_digest.config import LangfuseConfig
from url_digest.llm import tracing


def _isolate(monkeypatch):
    monkeypatch.setattr(tracing, "_TRACER", None)
    monkeypatch.setattr(tracing, "_CFG", None)


def test_setup_langfuse_reads_keys_and_host_from_env(monkeypatch):
    _isolate(monkeypatch)
    captured: dict = {}

    class DummyLangfuse:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    fake_module = types.SimpleNamespace(Langfuse=DummyLangfuse)
    monkeypatch.setitem(sys.modules, "langfuse", fake_module)
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-test")
    monkeypatch.setenv("LANGFUSE_HOST", "https://us.cloud.langfuse.com")

    tracing.setup_langfuse(LangfuseConfig(enabled=True, release="1.2.3"))

    assert captured["public_key"] == "pk-test"
    assert captured["secret_key"] == "sk-test"
    assert captured["host"] == "https://us.cloud.langfuse.com"
    assert captured["release"] == "1.2.3"
    assert isinstance(tracing._TRACER, DummyLangfuse)


def test_setup_langfuse_disables_tracer_when_keys_missing(monkeypatch):
    _isolate(monkeypatch)
    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("LANGFUSE_SECRET_KEY", raising=False)

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert tracing._TRACER is None


def test_spans_are_noops_without_tracer(monkeypatch):
    _isolate(monkeypatch)

    with tracing.start_span("url_digest.test", kind="chain", input_value="x") as span:
        tracing.set_span_output(span, "y")
        tracing.record_span_error(span, RuntimeError("boom"))

    assert span is None


def test_span_output_is_redacted(monkeypatch):
    _isolate(monkeypatch)
    updates: list[dict] = []

    class DummySpan:
        def update(self, **kwargs):
            updates.append(kwargs)

    class DummyTracer:
        def start_as_current_span(self, **kwargs):
            return contextlib.nullcontext(DummySpan())

    monkeypatch.setattr(tracing, "_TRACER", DummyTracer())
    monkeypatch.setattr(tracing, "_CFG", LangfuseConfig(redaction="redact_urls"))

    with tracing.start_span("url_digest.test", kind="chain") as span:
        tracing.set_span_output(span, "see https://example.com/secret for more")
        tracing.record_span_error(span, RuntimeError("boom"))

    assert updates[0] == {"output": "see [REDACTED_URL] for more"}
    assert updates[1] == {"level": "ERROR", "status_message": "boom"}
