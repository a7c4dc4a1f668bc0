"""
Transport-agnostic request boundary.

``handle_request`` turns a raw ``{url, language}`` body into a status code
and a JSON-serializable payload. A web framework or serverless adapter only
has to pass the body in and write the result out.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import AppConfig
from .errors import DigestError
from .llm.tracing import flush
from .runner import DigestPipeline, validate_request

logger = logging.getLogger(__name__)

INTERNAL_ERROR_STATUS = 500


def handle_request(
    body: Any,
    cfg: AppConfig | None = None,
    pipeline: DigestPipeline | None = None,
) -> tuple[int, dict[str, Any]]:
    """Run one digest request and map the outcome to (status, payload).

    Args:
        body: Request body as a mapping or JSON string
        cfg: Application configuration (defaults when None)
        pipeline: Pipeline to run; built from cfg when None

    Returns:
        (200, success payload) or (error status, failure payload)
    """
    cfg = cfg or AppConfig()
    include_details = cfg.pipeline.include_error_details
    try:
        request = validate_request(body)
        pipeline = pipeline or DigestPipeline.from_config(cfg)
        result = pipeline.run(request)
    except DigestError as exc:
        logger.warning("Request failed: %s (%s)", exc.message, exc.kind)
        return exc.status_code, exc.to_payload(include_details)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while handling request")
        payload: dict[str, Any] = {"error": "Internal error", "kind": "internal_error"}
        if include_details:
            payload["details"] = f"{type(exc).__name__}: {exc}"
        return INTERNAL_ERROR_STATUS, payload
    finally:
        flush()
    return 200, result.to_dict()
