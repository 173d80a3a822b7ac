"""
Transcript Parser Engine
========================
Main orchestrator that combines page-text extraction, transcript field
extraction, validation, and output formatting into a complete pipeline.

Usage:
    engine = ParserEngine(config)
    result = engine.parse("path/to/transcript.pdf")
    # result.transcript is the structured TranscriptRecord

Architecture:
    PDF → PageTextExtractor → page text → extract_transcript →
    TranscriptExtraction → ValidationEngine → ParseResult (JSON)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import __version__
from .models import (
    DocumentMetadata,
    ParseResult,
    ParseVersion,
)
from .pdf_text import PageTextExtractor
from .transcript import extract_transcript
from .validator import ValidationEngine

logger = logging.getLogger(__name__)


@dataclass
class ParserConfig:
    """Configuration for the parser engine."""

    # Output settings (None: write next to the source PDF)
    output_dir: Optional[str] = None
    save_output: bool = True
    save_validation: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


class ParserEngine:
    """
    Main transcript parsing engine.

    Orchestrates the full pipeline:
        1. Page text extraction
        2. Header / activity / disclaimer extraction
        3. Validation
        4. Output formatting

    Thread-safe for parallel PDF processing.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # Configure root logger for the package
        package_logger = logging.getLogger("cpe_parser")
        package_logger.setLevel(log_level)

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            console.setFormatter(formatter)
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_dir = Path(self.config.log_file).parent
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                self.config.log_file, encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(
                "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            ))
            package_logger.addHandler(file_handler)

    def parse(
        self,
        pdf_path: str,
        progress_callback: Optional[callable] = None,
    ) -> ParseResult:
        """
        Parse a transcript PDF into a structured record.

        Args:
            pdf_path: Path to the PDF file to parse.
            progress_callback: Callback(page_num, total_pages) called on each page.

        Returns:
            ParseResult containing the transcript, metadata, and validation.

        Raises:
            FileNotFoundError: If PDF file doesn't exist.
            PdfTextError: If PDF cannot be opened.
        """
        pdf_path = os.path.abspath(pdf_path)

        if not os.path.exists(pdf_path):
            raise FileNotFoundError(f"PDF not found: {pdf_path}")

        start_time = time.time()
        logger.info(f"Starting parse of: {pdf_path}")

        # ── Step 1: Compute file metadata ─────────────────────────────
        document = self._build_document_metadata(pdf_path)

        # ── Step 2: Extract page text ─────────────────────────────────
        logger.info("Phase 1: Page text extraction")
        extractor = PageTextExtractor()
        text, document.total_pages = extractor.extract_text(
            pdf_path, progress_callback=progress_callback
        )

        result = self._build_result(text, document)

        elapsed = time.time() - start_time
        logger.info(
            f"Parse complete in {elapsed:.2f}s: "
            f"{len(result.transcript.activities)} activities extracted"
        )

        # ── Step 5: Save output ───────────────────────────────────────
        if self.config.save_output:
            output_dir = self._resolve_output_dir(pdf_path)
            stem = Path(pdf_path).stem
            self._save_json(
                result.transcript.model_dump(), output_dir / f"{stem}.json"
            )
            if self.config.save_validation:
                self._save_json(
                    result.validation.model_dump(),
                    output_dir / f"{stem}_validation.json",
                )

        return result

    def parse_bytes(
        self,
        content: bytes,
        source_name: str = "upload.pdf",
    ) -> ParseResult:
        """
        Parse an in-memory PDF. Nothing is written to disk.

        Raises:
            PdfTextError: If the content is not a readable PDF.
        """
        logger.info(f"Starting parse of in-memory PDF: {source_name}")

        document = DocumentMetadata(
            source_pdf=source_name,
            file_hash=hashlib.sha256(content).hexdigest(),
            file_size_bytes=len(content),
        )

        text, page_count = PageTextExtractor().extract_text_from_bytes(content)
        document.total_pages = page_count

        return self._build_result(text, document)

    def _build_result(
        self, text: str, document: DocumentMetadata
    ) -> ParseResult:
        """Run extraction and validation over extracted page text."""

        # ── Step 3: Field extraction ──────────────────────────────────
        logger.info("Phase 2: Transcript field extraction")
        extraction = extract_transcript(text)

        # ── Step 4: Validation ────────────────────────────────────────
        logger.info("Phase 3: Validation")
        validation = ValidationEngine().validate(extraction)

        parse_version = ParseVersion(
            parser_version=__version__,
            page_text_chars=len(text),
            activity_count=len(extraction.record.activities),
        )

        return ParseResult(
            document=document,
            parse_version=parse_version,
            transcript=extraction.record,
            validation=validation,
        )

    def _resolve_output_dir(self, pdf_path: str) -> Path:
        if self.config.output_dir:
            output_dir = Path(self.config.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            return output_dir
        return Path(pdf_path).parent

    def _build_document_metadata(self, pdf_path: str) -> DocumentMetadata:
        """Build document metadata from file info."""
        return DocumentMetadata(
            source_pdf=os.path.basename(pdf_path),
            file_hash=self._compute_file_hash(pdf_path),
            file_size_bytes=os.path.getsize(pdf_path),
        )

    def _compute_file_hash(self, filepath: str) -> str:
        """Compute SHA-256 hash of a file."""
        sha256 = hashlib.sha256()
        with open(filepath, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
        return sha256.hexdigest()

    def _save_json(self, data: dict, filepath: Path):
        """Save a dict to JSON file."""
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
                f.write("\n")
            logger.info(f"Saved JSON: {filepath}")
        except OSError as e:
            logger.error(f"Failed to save JSON: {e}")
