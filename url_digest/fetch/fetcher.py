"""
HTTP page fetching.

One bounded GET per request; retrying a failed fetch is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (a response arrived) or error will be
    populated (failure before any response). status_code may be None for
    network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None otherwise
    """

    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


def fetch_page(
    url: str,
    timeout: float,
    user_agent: str,
    trust_env: bool = True,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Fetch a page with httpx, following redirects.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment
        transport: Optional httpx transport (tests inject a MockTransport)

    Returns:
        FetchResult with the body on any HTTP response, or an error message
    """
    headers = {"User-Agent": user_agent}
    try:
        with httpx.Client(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            trust_env=trust_env,
            transport=transport,
        ) as client:
            resp = client.get(url)
            return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)
    except httpx.HTTPError as exc:
        return FetchResult(url=url, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")


def categorize_error(error: str | None, status_code: int | None) -> str:
    """Categorize fetch errors for logging.

    Returns:
        Error category: "timeout", "blocked", "not_found", "network_failed", "http_error", "unknown"
    """
    if error:
        error_lower = error.lower()
        if "timeout" in error_lower or "timed out" in error_lower:
            return "timeout"
        if "connect" in error_lower or "connection" in error_lower:
            return "network_failed"
    if status_code in (401, 403, 429):
        return "blocked"
    if status_code in (404, 410):
        return "not_found"
    if status_code is not None:
        return "http_error"
    return "unknown"
