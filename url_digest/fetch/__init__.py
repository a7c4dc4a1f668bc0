"""
Article fetching and extraction.

This package handles the page fetch and main-content extraction
that feed the summarization pipeline.
"""

from .extractor import ExtractedPage, extract_article, is_placeholder_text
from .fetcher import FetchResult, categorize_error, fetch_page

__all__ = [
    "FetchResult",
    "fetch_page",
    "categorize_error",
    "ExtractedPage",
    "extract_article",
    "is_placeholder_text",
]
