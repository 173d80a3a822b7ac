"""
Validation Engine
=================
Post-extraction diagnostics and reporting.

After extracting each transcript, generates a report:
    - Total Candidate Chunks
    - Activities Parsed
    - Rejected Chunks (by reason)
    - Activities With Low-Confidence Topic Split
    - Missing Header Fields
    - Strategy that resolved each header field

Never silently ignores dropped rows.
"""

from __future__ import annotations

import logging
from collections import Counter

from .models import (
    ChunkStatus,
    HeaderFields,
    TranscriptExtraction,
    ValidationReport,
)

logger = logging.getLogger(__name__)


class ValidationEngine:
    """
    Summarizes a TranscriptExtraction into a ValidationReport.
    """

    def validate(
        self,
        extraction: TranscriptExtraction,
    ) -> ValidationReport:
        """
        Run full validation on an extraction.

        Args:
            extraction: Result of extract_transcript().

        Returns:
            ValidationReport with all detected issues.
        """
        record = extraction.record
        outcomes = extraction.chunk_outcomes

        rejected = [o for o in outcomes if o.status == ChunkStatus.REJECTED]
        breakdown = Counter(o.reason for o in rejected)

        low_confidence = [
            idx
            for idx, activity in enumerate(record.activities, start=1)
            if activity.is_low_confidence
        ]

        missing = [
            name
            for name in HeaderFields.model_fields
            if getattr(record.header, name) is None
        ]

        report = ValidationReport(
            total_chunks=len(outcomes),
            activities_parsed=len(record.activities),
            rejected_chunks=len(rejected),
            rejection_breakdown=dict(breakdown),
            low_confidence_topics=low_confidence,
            missing_header_fields=missing,
            header_sources=dict(extraction.header_sources),
            used_table_header=extraction.used_table_header,
            retried_full_text=extraction.retried_full_text,
        )

        if not record.activities:
            logger.warning("No activity rows recognized")

        # Log summary
        logger.info("=" * 60)
        logger.info("VALIDATION REPORT")
        logger.info("=" * 60)
        logger.info(f"Candidate Chunks: {report.total_chunks}")
        logger.info(
            f"Activities Parsed: {report.activities_parsed} "
            f"({report.success_rate}%)"
        )
        logger.info(f"Rejected Chunks: {report.rejected_chunks}")
        logger.info(
            f"Low-Confidence Topic Splits: {len(report.low_confidence_topics)}"
        )
        logger.info(
            f"Missing Header Fields: "
            f"{', '.join(report.missing_header_fields) or 'none'}"
        )
        if report.retried_full_text:
            logger.info("Table body was empty; rows taken from full text")

        if report.rejection_breakdown:
            logger.info("Rejection Breakdown:")
            for reason, count in sorted(report.rejection_breakdown.items()):
                logger.info(f"  • {reason}: {count}")

        logger.info("=" * 60)

        return report
