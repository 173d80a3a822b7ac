"""
Transcript Assembly
===================
Runs every extractor over the same normalized text and assembles the
TranscriptRecord.

Usage:
    extraction = extract_transcript(page_text)
    record = extraction.record

Architecture:
    raw text → normalize_text → {extract_header, extract_activities,
    extract_disclaimer} → TranscriptExtraction
"""

from __future__ import annotations

import logging

from .activities import extract_activities
from .disclaimer import extract_disclaimer
from .header import extract_header
from .models import TranscriptExtraction, TranscriptRecord
from .normalizer import normalize_text

logger = logging.getLogger(__name__)


def extract_transcript(raw_text: str) -> TranscriptExtraction:
    """
    Convert raw transcript text into a record plus diagnostics.

    Never raises for string input: unresolved fields are None and
    unrecognized rows are reported as rejected chunk outcomes.
    """
    text = normalize_text(raw_text)

    header = extract_header(text)
    activities = extract_activities(text)
    disclaimer = extract_disclaimer(text)

    record = TranscriptRecord(
        header=header.header,
        activities=activities.activities,
        disclaimer=disclaimer,
    )

    logger.debug(
        f"Extracted {len(activities.activities)} activities "
        f"({activities.rejected_count} chunks dropped)"
    )

    return TranscriptExtraction(
        record=record,
        header_sources=header.sources,
        chunk_outcomes=activities.outcomes,
        used_table_header=activities.used_table_header,
        retried_full_text=activities.retried_full_text,
    )


def parse_transcript_text(raw_text: str) -> TranscriptRecord:
    """Convenience wrapper returning only the record."""
    return extract_transcript(raw_text).record
