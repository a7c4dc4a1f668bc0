"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: Page fetching settings
- ExtractConfig: Article extraction settings
- SummaryConfig: Normalization, chunking and summarization settings
- InferenceConfig: Remote inference provider settings
- TranslationConfig: Translation models and generic translator settings
- PipelineConfig: Request deadline and pacing settings
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import os
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for fetching the article page.

    Attributes:
        timeout_seconds: HTTP request timeout for the page fetch
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 25.0
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class ExtractConfig:
    """Configuration for HTML article extraction.

    Attributes:
        primary: Primary extraction method ("readability", "trafilatura", or "bs4")
        fallback: List of fallback methods to try if primary fails
        min_text_chars: Extracted text shorter than this is not an article
        default_title: Title used when the page has none
    """

    primary: str = "readability"
    fallback: list[str] = field(default_factory=lambda: ["trafilatura", "bs4"])
    min_text_chars: int = 50
    default_title: str = "Untitled"


def _default_keywords() -> dict[str, list[str]]:
    return {
        "en": [
            "however",
            "important",
            "first",
            "largest",
            "main",
            "significant",
            "key",
            "major",
            "because",
            "therefore",
        ],
        "de": [
            "ist",
            "sind",
            "wird",
            "wurde",
            "kann",
            "hat",
            "haben",
            "wichtig",
            "bedeutend",
            "haupt",
            "erste",
            "größte",
        ],
    }


@dataclass
class SummaryConfig:
    """Configuration for normalization, chunking and summarization.

    Attributes:
        source_language: Language code of the extracted article text
        max_article_chars: Normalized text is truncated to this many characters
        max_chunk_chars: Maximum characters per summarization chunk
        short_text_threshold: Texts shorter than this try abstractive summarization first
        force_extractive: Always run the extractive summarizer first
        refine_extractive: Refine extractive output with one remote call
        target_extractive_sentences: Sentences kept by the extractive summarizer
        fallback_sentences: Leading sentences kept when a chunk's remote call fails
        recondense_threshold: Joined summaries longer than this are condensed again
        min_abstractive_chars: Remote results shorter than this count as no result
        min_summary_chars: Final summaries shorter than this are a hard failure
        keywords: Salience keywords per language for extractive scoring
        prefix_match_languages: Languages whose keywords also match at the start of
            longer words (compounds such as "Hauptstadt")
    """

    source_language: str = "en"
    max_article_chars: int = 200000
    max_chunk_chars: int = 1500
    short_text_threshold: int = 3000
    force_extractive: bool = False
    refine_extractive: bool = True
    target_extractive_sentences: int = 20
    fallback_sentences: int = 4
    recondense_threshold: int = 2500
    min_abstractive_chars: int = 50
    min_summary_chars: int = 30
    keywords: dict[str, list[str]] = field(default_factory=_default_keywords)
    prefix_match_languages: list[str] = field(default_factory=lambda: ["de"])


def _default_summarization_parameters() -> dict[str, Any]:
    return {"max_length": 512, "min_length": 50, "do_sample": False}


@dataclass
class InferenceConfig:
    """Configuration for the remote inference provider.

    Attributes:
        name: Provider name ("huggingface" currently supported)
        enabled: Set to False to run fully offline (extractive only)
        base_url: Base URL of the model inference API
        summarization_model: Model identifier used for summarization
        api_key: Optional inline API token (overrides env var)
        api_key_env: Environment variable name containing the API token
        timeout_seconds: Per-attempt request timeout
        max_retries: Maximum attempts for failing calls, and maximum warm-up retries
        warmup_backoff_seconds: Sleep before retrying a model that is warming up
        retry_delay_seconds: Base delay between failed attempts (grows per failure)
        wait_for_model: Ask the provider to block until the model is loaded
        trust_env: Whether to respect system proxy settings for API requests
        summarization_parameters: Generation parameters sent with summarization calls
    """

    name: str = "huggingface"
    enabled: bool = True
    base_url: str = "https://api-inference.huggingface.co/models"
    summarization_model: str = "sshleifer/distilbart-cnn-12-6"
    api_key: str | None = None
    api_key_env: str = "HF_API_TOKEN"
    timeout_seconds: float = 20.0
    max_retries: int = 3
    warmup_backoff_seconds: float = 10.0
    retry_delay_seconds: float = 5.0
    wait_for_model: bool = False
    trust_env: bool = True
    summarization_parameters: dict[str, Any] = field(
        default_factory=_default_summarization_parameters
    )


def _default_translation_models() -> dict[str, str]:
    codes = ["de", "es", "fr", "it", "nl", "fi", "sv", "pl", "cs", "ru", "no", "da"]
    return {code: f"Helsinki-NLP/opus-mt-en-{code}" for code in codes}


@dataclass
class TranslationConfig:
    """Configuration for summary translation.

    Attributes:
        max_chunk_chars: Maximum characters per translation sub-chunk
        models: Target language code to translation model identifier
        fallback_provider: Generic translator name ("libretranslate" or "none")
        fallback_url: Endpoint of the generic translator
        fallback_api_key: Optional inline API key for the generic translator
        fallback_api_key_env: Environment variable name containing that key
        fallback_timeout_seconds: Request timeout for the generic translator
    """

    max_chunk_chars: int = 800
    models: dict[str, str] = field(default_factory=_default_translation_models)
    fallback_provider: str = "libretranslate"
    fallback_url: str = "https://libretranslate.com/translate"
    fallback_api_key: str | None = None
    fallback_api_key_env: str = "LIBRETRANSLATE_API_KEY"
    fallback_timeout_seconds: float = 30.0


@dataclass
class PipelineConfig:
    """Configuration for request-level behavior.

    Attributes:
        deadline_seconds: Wall-clock budget for one request
        politeness_delay_seconds: Pause between successive remote calls
        include_error_details: Include internal detail in failure payloads
    """

    deadline_seconds: float = 30.0
    politeness_delay_seconds: float = 1.0
    include_error_details: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        provider_log_enabled: Whether to log remote provider interactions separately
        provider_log_detail: "response_only" or "request_response"
        provider_log_redaction: Redaction mode ("none", "redact_content", "redact_urls")
        provider_log_file: Name of the provider log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "url_digest.jsonl"
    provider_log_enabled: bool = False
    provider_log_detail: str = "response_only"
    provider_log_redaction: str = "redact_urls"
    provider_log_file: str = "provider.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        environment: Langfuse environment label (optional)
        release: Langfuse release identifier (optional)
        redaction: Redaction mode for input/output payloads
        max_text_chars: Maximum characters for input/output payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    environment: str | None = None
    release: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS: dict[str, type] = {
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "summary": SummaryConfig,
    "inference": InferenceConfig,
    "translation": TranslationConfig,
    "pipeline": PipelineConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return merge_config(AppConfig(), raw)


def merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge a raw mapping (e.g. parsed YAML) into a copy of base.

    Section values replace the corresponding fields; a dict-valued field
    such as ``translation.models`` is replaced as a whole.

    Raises:
        ValueError: If a known section contains an unknown key
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict):
            data[key].update(value)
        elif value is not None:
            raise ValueError(f"Config section '{key}' must be a mapping")
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    sections = {}
    for name, section_cls in _SECTIONS.items():
        values = data.get(name, {})
        known = {f.name for f in fields(section_cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown keys in config section '{name}': {', '.join(unknown)}")
        sections[name] = section_cls(**values)
    return AppConfig(**sections)


def get_api_key(cfg: InferenceConfig) -> str | None:
    """Get the inference API token from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)


def get_translation_api_key(cfg: TranslationConfig) -> str | None:
    """Get the generic translator API key from inline config or environment variable."""
    if cfg.fallback_api_key:
        return cfg.fallback_api_key
    return os.getenv(cfg.fallback_api_key_env)
