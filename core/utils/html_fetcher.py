"""HTML fetching for the scraper."""

from typing import Optional

import requests
from django.conf import settings

from core.exceptions import FetchError

USER_AGENT = "Mozilla/5.0 (compatible; RSS-Generator/2.0)"


def fetch_html(url: str, timeout: Optional[int] = None) -> str:
    """
    Fetch HTML content from URL.

    There is no retry here; a failed fetch fails the scrape run.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds, defaults to SITEFEED_FETCH_TIMEOUT

    Returns:
        HTML content as string

    Raises:
        FetchError: On a non-2xx response or a network failure
    """
    headers = {"User-Agent": USER_AGENT}

    try:
        response = requests.get(
            url,
            headers=headers,
            timeout=timeout or settings.SITEFEED_FETCH_TIMEOUT,
            allow_redirects=True,
        )
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    if not response.ok:
        raise FetchError(
            f"HTTP {response.status_code}: {response.reason}", status_code=response.status_code
        )

    return response.text
