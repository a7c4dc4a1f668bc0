"""
Remote provider implementations.

To add a new provider:
1. Inherit from InferenceProvider or TranslationProvider
2. Implement invoke() or translate(), raising ProviderError subclasses
3. Register the class in factory.py
"""

from .base import InferenceProvider, TranslationProvider
from .factory import (
    available_providers,
    available_translation_providers,
    create_inference_provider,
    create_translation_provider,
)
from .huggingface import HuggingFaceProvider
from .libretranslate import LibreTranslateProvider

__all__ = [
    "InferenceProvider",
    "TranslationProvider",
    "HuggingFaceProvider",
    "LibreTranslateProvider",
    "available_providers",
    "available_translation_providers",
    "create_inference_provider",
    "create_translation_provider",
]
