"""Hugging Face hosted inference provider with bounded retries."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from ...config import InferenceConfig, LoggingConfig
from ...errors import ProviderError, ProviderHardError, ProviderTransientError
from ...utils.deadline import Deadline, bound_timeout
from ...utils.logging import log_event, redact_text, truncate_text
from ..responses import classify_response
from ..tracing import record_span_error, set_span_output, start_span
from .base import InferenceProvider

logger = logging.getLogger(__name__)

WARMUP_STATUS = 503
RATE_LIMIT_STATUS = 429
# Status-like codes for failures without an HTTP response
NETWORK_ERROR_STATUS = 502
TIMEOUT_STATUS = 504


class HuggingFaceProvider(InferenceProvider):
    """Calls ``{base_url}/{model_id}`` with ``{inputs, parameters, options}``.

    Retry policy per call:
    - 503 means the model is warming up: sleep ``warmup_backoff_seconds``
      and retry, at most ``max_retries`` times. Warm-ups are not failures.
    - Timeouts, network errors, 429, other 5xx and undecodable bodies are
      failures: at most ``max_retries`` attempts in total, sleeping
      ``retry_delay_seconds * failures`` in between.
    - Any other 4xx fails fast with ``ProviderHardError``.
    """

    name = "huggingface"

    def __init__(
        self,
        cfg: InferenceConfig,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        provider_logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg or LoggingConfig()
        self.provider_logger = provider_logger
        self.transport = transport
        self.sleep = sleep

    def invoke(
        self,
        model_id: str,
        text: str,
        params: dict[str, Any] | None = None,
        deadline: Deadline | None = None,
    ) -> str:
        payload: dict[str, Any] = {"inputs": text, "parameters": dict(params or {})}
        if self.cfg.wait_for_model:
            payload["options"] = {"wait_for_model": True}

        with start_span(
            "huggingface.invoke",
            kind="llm",
            input_value=text,
            attributes={"llm.model": model_id, "llm.provider": self.name},
        ) as span:
            try:
                result = self._invoke_with_retries(model_id, payload, deadline)
            except ProviderError as exc:
                record_span_error(span, exc)
                raise
            set_span_output(span, result)
            return result

    def _invoke_with_retries(
        self,
        model_id: str,
        payload: dict[str, Any],
        deadline: Deadline | None,
    ) -> str:
        max_attempts = max(1, self.cfg.max_retries)
        failures = 0
        warmups = 0
        calls = 0

        while True:
            if deadline is not None and deadline.expired():
                raise ProviderTransientError(TIMEOUT_STATUS, "request deadline exceeded")

            calls += 1
            try:
                resp = self._post(model_id, payload, bound_timeout(self.cfg.timeout_seconds, deadline))
            except httpx.TimeoutException as exc:
                error: ProviderError = ProviderTransientError(TIMEOUT_STATUS, f"timeout: {exc}")
            except httpx.HTTPError as exc:
                error = ProviderTransientError(NETWORK_ERROR_STATUS, f"{type(exc).__name__}: {exc}")
            else:
                status = resp.status_code
                if status == WARMUP_STATUS:
                    warmups += 1
                    self._log_call(model_id, payload, calls, "warming_up", resp.text)
                    if warmups > self.cfg.max_retries:
                        raise ProviderTransientError(status, "model still warming up after retries")
                    self._backoff(self.cfg.warmup_backoff_seconds, deadline, status, "warm-up")
                    continue
                if 200 <= status < 300:
                    try:
                        data = resp.json()
                    except ValueError:
                        error = ProviderTransientError(NETWORK_ERROR_STATUS, "malformed response body")
                    else:
                        parsed = classify_response(data)
                        self._log_call(model_id, payload, calls, "ok", parsed.text, shape=parsed.shape.value)
                        return parsed.text
                elif status == RATE_LIMIT_STATUS or status >= 500:
                    error = ProviderTransientError(status, _error_message(resp))
                else:
                    self._log_call(model_id, payload, calls, "rejected", resp.text)
                    raise ProviderHardError(status, _error_message(resp))

            failures += 1
            self._log_call(model_id, payload, calls, "failed", error.message)
            if failures >= max_attempts:
                raise error
            self._backoff(self.cfg.retry_delay_seconds * failures, deadline, error.status_code, "retry")

    def _post(self, model_id: str, payload: dict[str, Any], timeout: float) -> httpx.Response:
        url = f"{self.cfg.base_url.rstrip('/')}/{model_id}"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        with httpx.Client(
            timeout=timeout,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        ) as client:
            return client.post(url, json=payload, headers=headers)

    def _backoff(self, seconds: float, deadline: Deadline | None, status: int, reason: str) -> None:
        if deadline is not None and not deadline.allows(seconds):
            raise ProviderTransientError(status, f"{reason} backoff would exceed request deadline")
        logger.info("Provider %s, sleeping %.1fs", reason, seconds)
        if seconds > 0:
            self.sleep(seconds)

    def _log_call(
        self,
        model_id: str,
        payload: dict[str, Any],
        attempt: int,
        status: str,
        content: str,
        **fields: Any,
    ) -> None:
        if self.provider_logger is None:
            return
        redaction = self.log_cfg.provider_log_redaction
        event = {
            "event": "inference_call",
            "provider": self.name,
            "model": model_id,
            "attempt": attempt,
            "status": status,
            "raw_response": truncate_text(redact_text(content or "", redaction)),
        }
        if self.log_cfg.provider_log_detail == "request_response":
            event["raw_request"] = truncate_text(redact_text(payload.get("inputs") or "", redaction))
        log_event(self.provider_logger, "Provider call", **event, **fields)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(data, dict) and data.get("error"):
        return f"HTTP {resp.status_code}: {data['error']}"
    return f"HTTP {resp.status_code}"
