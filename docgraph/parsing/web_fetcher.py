"""
URL retrieval with HTML-to-text reduction.
"""

import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
USER_AGENT = "docgraph/0.1 (+knowledge graph builder)"

# Elements that never carry document text
_NON_TEXT_TAGS = ["script", "style", "noscript", "template"]


def html_to_text(html: str) -> str:
    """Reduce an HTML page to the text content of its body."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_TEXT_TAGS):
        tag.decompose()
    root = soup.body or soup
    return root.get_text(separator="\n", strip=True)


class WebFetcher:
    """
    Fetch remote documents.

    Sources ending in ``.txt`` are returned raw; anything else is treated as
    HTML and reduced to text.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def fetch(self, url: str) -> str:
        """
        Download ``url`` and return its text.

        Raises:
            FetchError: Network failure or non-success status.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch URL: {e}") from e

        if not response.ok:
            raise FetchError(f"Failed to fetch URL: {response.status_code} {response.reason}")

        if url.lower().endswith(".txt"):
            return response.text

        logger.debug("Reducing HTML from %s (%d chars)", url, len(response.text))
        return html_to_text(response.text)
