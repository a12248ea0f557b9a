"""HTTP fetch collaborator for feed analysis."""

import logging
import os
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlparse

import httpx

from rssfield_analyzer.exceptions import FetchError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_USER_AGENT = "rssfield-analyzer/0.1"
ACCEPT_HEADER = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"


@dataclass
class FetchResponse:
    """Outcome of a completed HTTP request."""

    success: bool
    status: int
    body: bytes


Fetcher = Callable[[str, dict, float], FetchResponse]


def default_headers() -> dict[str, str]:
    return {
        "User-Agent": os.environ.get("RSSFIELD_USER_AGENT", DEFAULT_USER_AGENT),
        "Accept": ACCEPT_HEADER,
    }


def default_timeout() -> float:
    return float(os.environ.get("RSSFIELD_FETCH_TIMEOUT", DEFAULT_TIMEOUT))


def validate_url(url: str) -> None:
    """Validate that the URL is present and uses http(s)."""
    if not url:
        raise ValidationError("feed_url is required")
    try:
        result = urlparse(url)
    except ValueError:
        raise ValidationError("Invalid URL format")
    if not result.scheme or not result.netloc:
        raise ValidationError("Invalid URL format")
    if result.scheme not in ("http", "https"):
        raise ValidationError("Invalid URL format: only http and https are supported")


def http_fetch(
    url: str,
    headers: dict,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
) -> FetchResponse:
    """GET a URL with a bounded timeout.

    Raises:
        FetchError: On timeout or transport failure.
    """
    try:
        with httpx.Client(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = client.get(url)
    except httpx.TimeoutException as e:
        raise FetchError(f"Failed to fetch feed: timed out after {timeout}s") from e
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch feed: {e}") from e

    return FetchResponse(
        success=response.is_success,
        status=response.status_code,
        body=response.content,
    )


def fetch_feed(url: str, fetch: Fetcher | None = None) -> bytes:
    """Fetch raw feed bytes once, with the identifying headers.

    Args:
        url: Feed URL.
        fetch: Fetch collaborator; defaults to http_fetch.

    Raises:
        FetchError: If the request fails or returns a non-success status.
    """
    fetch = fetch or http_fetch
    response = fetch(url, default_headers(), default_timeout())

    if not response.success:
        logger.warning("Fetching %s failed with status %s", url, response.status)
        raise FetchError(
            f"Failed to fetch feed: {response.status or 'Unknown error'}",
            status=response.status,
        )

    return response.body
