"""Remote inference, translation and observability."""

from .pacing import RemoteCallPacer
from .providers import (
    HuggingFaceProvider,
    InferenceProvider,
    LibreTranslateProvider,
    TranslationProvider,
    available_providers,
    create_inference_provider,
    create_translation_provider,
)
from .responses import InferenceResponse, ResponseShape, classify_response, extract_text
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "InferenceProvider",
    "TranslationProvider",
    "HuggingFaceProvider",
    "LibreTranslateProvider",
    "RemoteCallPacer",
    "InferenceResponse",
    "ResponseShape",
    "classify_response",
    "extract_text",
    "available_providers",
    "create_inference_provider",
    "create_translation_provider",
    "setup_langfuse",
    "flush",
    "start_span",
    "set_span_output",
    "record_span_error",
]
