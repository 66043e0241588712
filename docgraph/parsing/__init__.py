"""
Document retrieval module.

Turns an entry source (local path or URL) into plain text.
"""

from .pdf_parser import PDFParser
from .source import DocumentSource, is_url
from .web_fetcher import WebFetcher

__all__ = ["DocumentSource", "PDFParser", "WebFetcher", "is_url"]
