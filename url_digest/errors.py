"""
Error taxonomy.

Request-level errors (validation, fetch, extraction, pipeline exhaustion)
reach the caller and carry a status code for the transport layer.
Provider errors are raised by remote clients and absorbed by the
orchestrator's fallback chain.
"""

from __future__ import annotations

from typing import Any


class DigestError(Exception):
    """Base class for failures surfaced to the caller."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.stage = None

    def to_payload(self, include_details: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "kind": self.kind}
        if include_details and self.details:
            payload["details"] = self.details
        return payload


class ValidationError(DigestError):
    kind = "validation_error"
    status_code = 400


class FetchError(DigestError):
    kind = "fetch_error"
    status_code = 502

    def __init__(self, message: str, details: str | None = None, upstream_status: int | None = None):
        super().__init__(message, details)
        self.upstream_status = upstream_status


class ExtractionError(DigestError):
    kind = "extraction_error"
    status_code = 422


class PipelineExhaustedError(DigestError):
    """Every summarization fallback failed to produce a usable summary."""

    kind = "pipeline_exhausted"
    status_code = 500


class ProviderError(Exception):
    """Remote inference or translation call failed.

    Attributes:
        status_code: HTTP status of the last attempt, or a gateway-style
            code (502 network/malformed, 504 timeout) when there was none
        message: Human-readable description
    """

    kind = "provider_error"

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ProviderTransientError(ProviderError):
    """Warm-up, rate limiting, server errors or timeouts outlasted the retries."""

    kind = "provider_transient"


class ProviderHardError(ProviderError):
    """Non-retryable provider failure (bad request, auth, missing model)."""

    kind = "provider_hard"
