"""Summary translation with a per-sub-chunk fallback chain."""

from __future__ import annotations

import logging

from ..config import TranslationConfig
from ..errors import ProviderError
from ..llm.pacing import RemoteCallPacer
from ..llm.providers.base import InferenceProvider, TranslationProvider
from ..text.chunker import chunk_text
from ..types import TranslationResult
from ..utils.deadline import Deadline
from ..utils.logging import log_event


def base_language(code: str) -> str:
    """Primary subtag of a language code: "pt-BR" -> "pt"."""
    return code.strip().lower().split("-", 1)[0]


class SummaryTranslator:
    """Translate a summary from the source language.

    Each sub-chunk tries the language model for the target language, then the
    generic translation provider, then passes through untranslated. A result
    may therefore mix languages; that is accepted degraded output, not an error.
    """

    def __init__(
        self,
        cfg: TranslationConfig,
        source_language: str,
        inference: InferenceProvider | None = None,
        fallback: TranslationProvider | None = None,
        pacer: RemoteCallPacer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = cfg
        self.source_language = base_language(source_language)
        self.inference = inference
        self.fallback = fallback
        self.pacer = pacer or RemoteCallPacer(0)
        self.logger = logger

    def needs_translation(self, language: str) -> bool:
        return base_language(language) != self.source_language

    def translate(
        self,
        text: str,
        language: str,
        deadline: Deadline | None = None,
    ) -> TranslationResult:
        if not self.needs_translation(language) or not text:
            return TranslationResult(text=text, language_code=language)

        target = base_language(language)
        model_id = self.cfg.models.get(language.lower()) or self.cfg.models.get(target)
        result = TranslationResult(text="", language_code=language)
        parts: list[str] = []

        for index, piece in enumerate(chunk_text(text, self.cfg.max_chunk_chars)):
            translated = ""
            if model_id and self.inference is not None and not _expired(deadline):
                translated = self._via_model(model_id, piece, deadline, index)
                if translated:
                    result.translated_chunks += 1
            if not translated and self.fallback is not None and not _expired(deadline):
                translated = self._via_fallback(piece, target, deadline, index)
                if translated:
                    result.fallback_chunks += 1
            if not translated:
                translated = piece
                result.passthrough_chunks += 1
            parts.append(translated)

        result.text = " ".join(parts)
        log_event(
            self.logger,
            "Summary translated",
            event="translated",
            language=language,
            model=model_id,
            translated_chunks=result.translated_chunks,
            fallback_chunks=result.fallback_chunks,
            passthrough_chunks=result.passthrough_chunks,
        )
        return result

    def _via_model(self, model_id: str, piece: str, deadline: Deadline | None, index: int) -> str:
        self.pacer.wait()
        try:
            return (self.inference.invoke(model_id, piece, deadline=deadline) or "").strip()
        except ProviderError as exc:
            log_event(
                self.logger,
                "Model translation failed",
                event="translate_model_failed",
                chunk_index=index,
                status_code=exc.status_code,
                error_kind=exc.kind,
            )
            return ""

    def _via_fallback(self, piece: str, target: str, deadline: Deadline | None, index: int) -> str:
        self.pacer.wait()
        try:
            return self.fallback.translate(piece, self.source_language, target, deadline=deadline)
        except ProviderError as exc:
            log_event(
                self.logger,
                "Fallback translation failed",
                event="translate_fallback_failed",
                chunk_index=index,
                status_code=exc.status_code,
                error_kind=exc.kind,
            )
            return ""


def _expired(deadline: Deadline | None) -> bool:
    return deadline is not None and deadline.expired()
