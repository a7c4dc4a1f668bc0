"""Tests for the swappable provider factory."""

import pytest

from url_digest.config import AppConfig
from url_digest.llm.providers.factory import (
    available_providers,
    available_translation_providers,
    create_inference_provider,
    create_translation_provider,
)
from url_digest.llm.providers.huggingface import HuggingFaceProvider
from url_digest.llm.providers.libretranslate import LibreTranslateProvider


def test_available_providers_contains_expected_backends():
    assert "huggingface" in available_providers()
    assert "hf" in available_providers()
    assert available_translation_providers() == ["libretranslate"]


def test_create_inference_provider_reads_token_from_env(monkeypatch):
    monkeypatch.setenv("HF_API_TOKEN", "hf-test")

    provider = create_inference_provider(AppConfig())

    assert isinstance(provider, HuggingFaceProvider)
    assert provider.api_key == "hf-test"


def test_disabled_inference_yields_none():
    cfg = AppConfig()
    cfg.inference.enabled = False
    assert create_inference_provider(cfg) is None


def test_create_inference_provider_rejects_unknown_backend():
    cfg = AppConfig()
    cfg.inference.name = "unknown-provider"
    with pytest.raises(ValueError, match="Unsupported provider"):
        create_inference_provider(cfg)


def test_create_translation_provider():
    assert isinstance(create_translation_provider(AppConfig()), LibreTranslateProvider)

    cfg = AppConfig()
    cfg.translation.fallback_provider = "none"
    assert create_translation_provider(cfg) is None

    cfg.translation.fallback_provider = "deepl"
    with pytest.raises(ValueError, match="Unsupported translation provider"):
        create_translation_provider(cfg)
