"""LibreTranslate-compatible generic translation provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import TranslationConfig
from ...errors import ProviderHardError, ProviderTransientError
from ...utils.deadline import Deadline, bound_timeout
from .base import TranslationProvider
from .huggingface import NETWORK_ERROR_STATUS, RATE_LIMIT_STATUS, TIMEOUT_STATUS

logger = logging.getLogger(__name__)


class LibreTranslateProvider(TranslationProvider):
    """Single-attempt client for ``POST {q, source, target, format}``."""

    name = "libretranslate"

    def __init__(
        self,
        cfg: TranslationConfig,
        api_key: str | None = None,
        transport: httpx.BaseTransport | None = None,
        trust_env: bool = True,
    ):
        self.cfg = cfg
        self.api_key = api_key
        self.transport = transport
        self.trust_env = trust_env

    def translate(
        self,
        text: str,
        source: str,
        target: str,
        deadline: Deadline | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "q": text,
            "source": source,
            "target": target,
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        timeout = bound_timeout(self.cfg.fallback_timeout_seconds, deadline)
        try:
            with httpx.Client(
                timeout=timeout,
                trust_env=self.trust_env,
                transport=self.transport,
            ) as client:
                resp = client.post(self.cfg.fallback_url, json=payload)
        except httpx.TimeoutException as exc:
            raise ProviderTransientError(TIMEOUT_STATUS, f"timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderTransientError(NETWORK_ERROR_STATUS, f"{type(exc).__name__}: {exc}") from exc

        status = resp.status_code
        if status == RATE_LIMIT_STATUS or status >= 500:
            raise ProviderTransientError(status, f"HTTP {status}")
        if not 200 <= status < 300:
            raise ProviderHardError(status, f"HTTP {status}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderTransientError(NETWORK_ERROR_STATUS, "malformed response body") from exc

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            logger.warning("Translation response without translatedText", extra={"target": target})
            return ""
        return translated.strip()
