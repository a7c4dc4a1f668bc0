"""
Command-line interface for url-digest.

Uses Typer to provide a CLI with options for the most common configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import load_config
from .handler import handle_request
from .llm.tracing import setup_langfuse
from .runner import DigestPipeline
from .summarize.extractive import summarize_extractive
from .text.normalize import normalize, truncate
from .utils.logging import setup_logging, setup_provider_logger

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    url: str = typer.Argument(..., help="Article URL to digest."),
    language: str = typer.Option("en", "--language", "-l", help="Target language code."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path | None = typer.Option(
        None, "--log-dir", help="Directory for log files (enables file logging)."
    ),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        envvar="HF_API_TOKEN",
        help="Override inference API token (or set HF_API_TOKEN / .env).",
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Disable remote inference and translation."
    ),
):
    """Fetch an article, summarize it and print the JSON response.

    Args:
        url: Article URL
        language: Target language code for the summary
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files
        api_key: Override inference API token
        offline: Run extractive summarization only
    """
    load_dotenv()

    cfg = load_config(str(config) if config else None)

    if api_key:
        cfg.inference.api_key = api_key
    if log_level:
        cfg.logging.level = log_level
    if log_dir is not None:
        cfg.logging.file = True
    if offline:
        cfg.inference.enabled = False
        cfg.translation.fallback_provider = "none"

    logger = setup_logging(cfg.logging, log_dir)
    provider_logger = setup_provider_logger(cfg.logging, log_dir)
    setup_langfuse(cfg.langfuse)

    pipeline = DigestPipeline.from_config(cfg, logger=logger, provider_logger=provider_logger)
    status, payload = handle_request({"url": url, "language": language}, cfg, pipeline)
    console.print_json(data=payload)
    if status != 200:
        raise typer.Exit(code=1)


@app.command()
def condense(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Plain text file."),
    sentences: int = typer.Option(10, "--sentences", "-n", min=1),
    language: str = typer.Option("en", "--language", "-l", help="Keyword language."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """Print an offline extractive summary of a text file."""
    cfg = load_config(str(config) if config else None)
    text = normalize(file.read_text(encoding="utf-8"))
    text = truncate(text, cfg.summary.max_article_chars)
    language = language.lower()
    keywords = cfg.summary.keywords.get(language, [])
    prefix_match = language in cfg.summary.prefix_match_languages
    console.print(summarize_extractive(text, sentences, keywords, prefix_match))


if __name__ == "__main__":
    app()
