"""
HTML article extraction with multiple fallback strategies.

This module provides a chain of extraction methods:
1. readability: Mozilla's readability algorithm (default)
2. trafilatura: Fast, purpose-built for article content (fallback)
3. bs4: BeautifulSoup plain text extraction (last resort)
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable
import trafilatura

logger = logging.getLogger(__name__)


@dataclass
class ExtractedPage:
    """Main content of a page.

    Attributes:
        title: Page title, empty string when none was found
        text: Plain article text
    """

    title: str
    text: str


def extract_article(
    html: str,
    base_url: str,
    primary: str = "readability",
    fallback: list[str] | None = None,
) -> ExtractedPage | None:
    """Extract title and plain text from HTML using a chain of extractors.

    Tries each extraction method in order until one produces non-empty
    text. A title found by an earlier method is kept when a later method
    supplies the text.

    Args:
        html: The HTML content to extract from
        base_url: URL the HTML was fetched from (resolves relative links)
        primary: Name of the primary extraction method to try first
        fallback: Fallback method names to try if primary fails

    Returns:
        ExtractedPage, or None if all methods fail
    """
    if not html or not html.strip():
        return None
    order = [primary] + [name for name in (fallback or []) if name != primary]
    title = ""
    for method in order:
        extractor = _get_extractor(method)
        if not extractor:
            logger.warning("Unknown extraction method %s", method)
            continue
        page = extractor(html, base_url)
        if page is None:
            continue
        title = title or page.title
        if page.text:
            return ExtractedPage(title=title or _bs4_title(html), text=page.text.strip())
    return None


def is_placeholder_text(text: str) -> bool:
    """Detect JavaScript walls and bot challenges that are not article content."""
    lowered = text.lower()
    if "javascript is disabled" in lowered or "please enable javascript" in lowered:
        return True
    if "enable javascript to continue" in lowered:
        return True
    if "verifying you are human" in lowered:
        return True
    if "checking your browser before accessing" in lowered:
        return True
    # Legitimate pages behind Cloudflare mention the ray id too, but are longer
    if "ray id:" in lowered and len(text.strip()) < 1000:
        return True
    return False


def _get_extractor(name: str) -> Callable[[str, str], ExtractedPage | None] | None:
    if name == "readability":
        return _extract_readability
    if name == "trafilatura":
        return _extract_trafilatura
    if name == "bs4":
        return _extract_bs4
    return None


def _extract_readability(html: str, base_url: str) -> ExtractedPage | None:
    """Readability is the algorithm behind Firefox's Reader View."""
    doc = Document(html, url=base_url)
    try:
        content_html = doc.summary()
        title = doc.short_title() or ""
    except Unparseable:
        logger.debug("Readability could not parse page", exc_info=True)
        return None
    page = _extract_bs4(content_html, base_url)
    return ExtractedPage(title=title.strip(), text=page.text if page else "")


def _extract_trafilatura(html: str, base_url: str) -> ExtractedPage | None:
    text = trafilatura.extract(html, url=base_url)
    metadata = trafilatura.extract_metadata(html, default_url=base_url)
    title = getattr(metadata, "title", None) or ""
    return ExtractedPage(title=title.strip(), text=(text or "").strip())


def _extract_bs4(html: str, base_url: str) -> ExtractedPage | None:
    """Plain text of everything but scripts and styles; the last resort."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    title = soup.title.get_text(strip=True) if soup.title else ""
    if soup.title:
        soup.title.decompose()
    text = soup.get_text(separator="\n")
    cleaned = "\n".join([line.strip() for line in text.splitlines() if line.strip()])
    return ExtractedPage(title=title, text=cleaned)


def _bs4_title(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    return soup.title.get_text(strip=True) if soup.title else ""
