"""
Page Text Extractor
===================
Extracts plain page text from transcript PDFs using PyMuPDF (fitz).
Pages are concatenated in original order, each followed by a line break.
"""

from __future__ import annotations

import logging
from typing import Optional

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)


class PdfTextError(RuntimeError):
    """Raised when a PDF cannot be opened or read."""


class PageTextExtractor:
    """
    Handles PDF ingestion and page-level text extraction.
    """

    def get_info(self, pdf_path: str) -> dict:
        """Page count plus the non-empty document metadata entries."""
        with self._open(pdf_path) as doc:
            metadata = doc.metadata or {}
            return {
                "page_count": doc.page_count,
                "metadata": {k: v for k, v in metadata.items() if v},
            }

    def extract_text(
        self,
        pdf_path: str,
        progress_callback: Optional[callable] = None,
    ) -> tuple[str, int]:
        """
        Extract the text of every page of a PDF file.

        Args:
            pdf_path: Path to the PDF file.
            progress_callback: Optional callable(current, total).

        Returns:
            (text, page_count), text in page order.
        """
        logger.info(f"Extracting page text from {pdf_path}")
        with self._open(pdf_path) as doc:
            return self._collect_pages(doc, progress_callback), doc.page_count

    def extract_text_from_bytes(self, content: bytes) -> tuple[str, int]:
        """
        Extract page text from an in-memory PDF.

        Returns:
            (text, page_count)
        """
        with self._open(stream=content) as doc:
            return self._collect_pages(doc), doc.page_count

    def _open(
        self,
        pdf_path: Optional[str] = None,
        stream: Optional[bytes] = None,
    ) -> fitz.Document:
        try:
            if stream is not None:
                return fitz.open(stream=stream, filetype="pdf")
            return fitz.open(pdf_path)
        except Exception as e:
            raise PdfTextError(f"Cannot open PDF: {e}") from e

    def _collect_pages(
        self,
        doc: fitz.Document,
        progress_callback: Optional[callable] = None,
    ) -> str:
        pages: list[str] = []
        total_pages = doc.page_count

        for page_idx in range(total_pages):
            pages.append(doc[page_idx].get_text("text") + "\n")
            if progress_callback:
                progress_callback(page_idx + 1, total_pages)

        return "".join(pages)
