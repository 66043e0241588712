"""
Document source: resolve an entry to raw document text.

Remote sources must yield at least ``min_chars`` characters of text; a
shorter result usually means the URL points at a landing page rather than
the document itself.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from ..errors import DecodeError, FetchError
from .pdf_parser import PDFParser
from .web_fetcher import DEFAULT_TIMEOUT_SECONDS, WebFetcher

logger = logging.getLogger(__name__)

DEFAULT_MIN_CHARS = 200


def is_url(source: str) -> bool:
    """Return True for http(s) references."""
    return urlparse(source).scheme in ("http", "https")


class DocumentSource:
    """
    Load document text for queue entries.

    Args:
        min_chars: Minimum stripped length of text fetched from a URL.
        fetcher: WebFetcher used for remote sources.
        pdf_parser: Parser used for local ``.pdf`` files.
    """

    def __init__(
        self,
        min_chars: int = DEFAULT_MIN_CHARS,
        fetcher: Optional[WebFetcher] = None,
        pdf_parser: Optional[PDFParser] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.min_chars = min_chars
        self.fetcher = fetcher or WebFetcher(timeout=timeout)
        self.pdf_parser = pdf_parser or PDFParser()

    def load(self, entry) -> str:
        """
        Return the text of ``entry.source``.

        Raises:
            FetchError: Remote retrieval failed, content too short, or the
                local file does not exist.
            DecodeError: A local file could not be decoded.
        """
        if is_url(entry.source):
            return self._load_url(entry.source)
        return self._load_file(Path(entry.source))

    def _load_url(self, url: str) -> str:
        try:
            text = self.fetcher.fetch(url)
            if len(text.strip()) < self.min_chars:
                raise FetchError(
                    "Extracted text is too short. Please provide a direct link "
                    "to a text file or upload one."
                )
        except FetchError as e:
            raise FetchError(f"Failed to fetch or parse content from {url}. Error: {e}") from e
        logger.info("Fetched %s (%d chars)", url, len(text))
        return text

    def _load_file(self, path: Path) -> str:
        if not path.is_file():
            raise FetchError(f"Document not found: {path}")

        if path.suffix.lower() == ".pdf":
            text = self.pdf_parser.parse(path)
        else:
            try:
                text = path.read_bytes().decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"Could not decode {path.name} as UTF-8 text") from e

        logger.info("Read %s (%d chars)", path, len(text))
        return text
