"""Provider factory and registry for swappable remote backends."""

from __future__ import annotations

import logging

from ...config import AppConfig, get_api_key, get_translation_api_key
from .base import InferenceProvider, TranslationProvider
from .huggingface import HuggingFaceProvider
from .libretranslate import LibreTranslateProvider


_INFERENCE_REGISTRY: dict[str, type[HuggingFaceProvider]] = {
    "huggingface": HuggingFaceProvider,
    "hf": HuggingFaceProvider,
}

_TRANSLATION_REGISTRY: dict[str, type[LibreTranslateProvider]] = {
    "libretranslate": LibreTranslateProvider,
}

_DISABLED = {"", "none", "off"}


def available_providers() -> list[str]:
    """Return the registered inference provider names."""
    return sorted(_INFERENCE_REGISTRY.keys())


def available_translation_providers() -> list[str]:
    return sorted(_TRANSLATION_REGISTRY.keys())


def create_inference_provider(
    cfg: AppConfig,
    provider_logger: logging.Logger | None = None,
) -> InferenceProvider | None:
    """Build the inference provider, or None when inference is disabled."""
    if not cfg.inference.enabled:
        return None
    name = cfg.inference.name.lower().strip()
    builder = _INFERENCE_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {cfg.inference.name}. Supported: {supported}")
    return builder(
        cfg.inference,
        get_api_key(cfg.inference),
        log_cfg=cfg.logging,
        provider_logger=provider_logger,
    )


def create_translation_provider(cfg: AppConfig) -> TranslationProvider | None:
    """Build the generic translation provider, or None when it is disabled."""
    name = (cfg.translation.fallback_provider or "").lower().strip()
    if name in _DISABLED:
        return None
    builder = _TRANSLATION_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_translation_providers())
        raise ValueError(
            f"Unsupported translation provider: {cfg.translation.fallback_provider}. "
            f"Supported: {supported}"
        )
    return builder(
        cfg.translation,
        api_key=get_translation_api_key(cfg.translation),
        trust_env=cfg.fetch.trust_env,
    )
