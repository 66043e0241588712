"""
PDF text extraction using PyMuPDF.
"""

from pathlib import Path

import fitz  # PyMuPDF

from ..errors import DecodeError


class PDFParser:
    """
    Extract plain text from PDF documents.

    Pages are joined by newlines in page order.
    """

    def parse(self, path: Path) -> str:
        """
        Extract the text of every page.

        Args:
            path: Path to PDF file

        Returns:
            Document text

        Raises:
            DecodeError: If the file is not a readable PDF
        """
        try:
            with fitz.open(path) as doc:
                pages = [page.get_text("text") for page in doc]
        except (RuntimeError, ValueError) as e:
            raise DecodeError(f"Could not read PDF {path.name}: {e}") from e
        return "\n".join(pages)
