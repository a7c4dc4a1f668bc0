"""
url-digest - Summarize and translate web articles.

Fetches a page, extracts the article, cleans and chunks its text,
summarizes it with a hosted model (falling back to an offline extractive
summarizer) and translates the summary into the requested language.
"""

from .handler import handle_request
from .runner import DigestPipeline, validate_request

__version__ = "0.1.0"

__all__ = ["DigestPipeline", "handle_request", "validate_request", "__version__"]
