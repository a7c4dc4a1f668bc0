"""
Abstract interfaces for remote providers.

New providers should inherit from one of these classes and be
registered in factory.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ...utils.deadline import Deadline


class InferenceProvider(ABC):
    """Hosted model inference (summarization, translation models)."""

    name: str = "inference"

    @abstractmethod
    def invoke(
        self,
        model_id: str,
        text: str,
        params: dict[str, Any] | None = None,
        deadline: Deadline | None = None,
    ) -> str:
        """Run a model on text.

        Args:
            model_id: Provider-side model identifier
            text: Model input
            params: Generation parameters forwarded to the model
            deadline: Optional request deadline bounding timeouts and retries

        Returns:
            Model output text; empty string when the response had no usable text

        Raises:
            ProviderTransientError: Retries were exhausted
            ProviderHardError: The request was rejected and not retried
        """
        raise NotImplementedError


class TranslationProvider(ABC):
    """Generic machine translation service."""

    name: str = "translation"

    @abstractmethod
    def translate(
        self,
        text: str,
        source: str,
        target: str,
        deadline: Deadline | None = None,
    ) -> str:
        """Translate text from source to target language.

        Returns:
            Translated text; empty string when the service returned none

        Raises:
            ProviderError: The call failed
        """
        raise NotImplementedError
