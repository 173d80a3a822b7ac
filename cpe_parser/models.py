"""
Data Models
===========
Pydantic models for structured transcript output.
Record models are frozen and hold tuples, so nothing changes after
construction. All models serialize to JSON with stable field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ─── Enums ────────────────────────────────────────────────────────────────────


class CreditCode(str, Enum):
    """Accreditation code used for both the credit type and source columns."""
    ACPE = "ACPE"
    IPCE = "IPCE"


class TopicMatch(str, Enum):
    """How the topic of an activity row was recognized."""
    DICTIONARY = "dictionary"
    POSITIONAL = "positional"


class ChunkStatus(str, Enum):
    """Outcome of recognizing a single activity chunk."""
    PARSED = "parsed"
    REJECTED = "rejected"


class RejectReason(str, Enum):
    """Why an activity chunk produced no record."""
    MISSING_DATE = "missing_date"
    MISSING_CREDIT_CODES = "missing_credit_codes"
    MISSING_HOURS = "missing_hours"


# ─── Transcript Record ────────────────────────────────────────────────────────


class HeaderFields(BaseModel):
    """
    Participant header of a transcript.
    Every field is independently optional; None means "not found".
    """
    model_config = ConfigDict(frozen=True)

    participant_name: Optional[str] = None
    nabp_eprofile_id: Optional[str] = None
    cpe_activity_date_range: Optional[str] = None
    total_cpe_hours_earned: Optional[float] = None
    report_generated_at: Optional[str] = None


class ActivityRecord(BaseModel):
    """
    One row of the activity table.
    Dates are kept as the literal M/D/YYYY text found in the document.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    activity_date: str
    activity_number: str
    credit_type: CreditCode
    source: CreditCode
    title: str
    topic: str
    provider: str
    live_hours: float = Field(ge=0)
    home_hours: float = Field(ge=0)
    topic_match: TopicMatch = Field(
        default=TopicMatch.DICTIONARY,
        exclude=True,
        description="Positional matches are low-confidence guesses",
    )

    @property
    def is_low_confidence(self) -> bool:
        return self.topic_match == TopicMatch.POSITIONAL


class TranscriptRecord(BaseModel):
    """
    Complete structured transcript.
    This is the JSON shape handed to callers.
    """
    model_config = ConfigDict(frozen=True)

    header: HeaderFields = Field(default_factory=HeaderFields)
    activities: tuple[ActivityRecord, ...] = ()
    disclaimer: Optional[str] = None


# ─── Extraction Outcomes ──────────────────────────────────────────────────────


class ChunkOutcome(BaseModel):
    """Tagged result for one candidate activity chunk."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    status: ChunkStatus
    chunk: str
    reason: Optional[RejectReason] = None
    activity: Optional[ActivityRecord] = None

    @classmethod
    def parsed(cls, chunk: str, activity: ActivityRecord) -> ChunkOutcome:
        return cls(status=ChunkStatus.PARSED, chunk=chunk, activity=activity)

    @classmethod
    def rejected(cls, chunk: str, reason: RejectReason) -> ChunkOutcome:
        return cls(status=ChunkStatus.REJECTED, chunk=chunk, reason=reason)


class HeaderExtraction(BaseModel):
    """Header fields plus the name of the strategy that resolved each one."""
    model_config = ConfigDict(frozen=True)

    header: HeaderFields = Field(default_factory=HeaderFields)
    sources: dict[str, str] = Field(default_factory=dict)


class ActivityExtraction(BaseModel):
    """Activity rows plus per-chunk outcomes of the pass that produced them."""
    model_config = ConfigDict(frozen=True)

    activities: tuple[ActivityRecord, ...] = ()
    outcomes: tuple[ChunkOutcome, ...] = ()
    used_table_header: bool = False
    retried_full_text: bool = False

    @property
    def rejected_count(self) -> int:
        return sum(
            1 for o in self.outcomes if o.status == ChunkStatus.REJECTED
        )


class TranscriptExtraction(BaseModel):
    """
    Record plus diagnostics for one extraction call.
    The record alone keeps the default output shape.
    """
    model_config = ConfigDict(frozen=True)

    record: TranscriptRecord
    header_sources: dict[str, str] = Field(default_factory=dict)
    chunk_outcomes: tuple[ChunkOutcome, ...] = ()
    used_table_header: bool = False
    retried_full_text: bool = False


# ─── Parse Result Models ──────────────────────────────────────────────────────


class DocumentMetadata(BaseModel):
    """Metadata about the source PDF."""
    source_pdf: str = ""
    total_pages: int = 0
    file_hash: str = ""
    file_size_bytes: int = 0


class ParseVersion(BaseModel):
    """Version tracking for a parse run."""
    parser_version: str = "1.0.0"
    parse_timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    page_text_chars: int = 0
    activity_count: int = 0


class ValidationReport(BaseModel):
    """Post-extraction diagnostics report."""
    total_chunks: int = 0
    activities_parsed: int = 0
    rejected_chunks: int = 0
    rejection_breakdown: dict[str, int] = Field(default_factory=dict)
    low_confidence_topics: list[int] = Field(default_factory=list)
    missing_header_fields: list[str] = Field(default_factory=list)
    header_sources: dict[str, str] = Field(default_factory=dict)
    used_table_header: bool = False
    retried_full_text: bool = False

    @computed_field
    @property
    def success_rate(self) -> float:
        if self.total_chunks == 0:
            return 0.0
        return round(self.activities_parsed / self.total_chunks * 100, 2)


class ParseResult(BaseModel):
    """
    Complete output of a parse run.
    `transcript` is the record; the rest describes the run.
    """
    document: DocumentMetadata
    parse_version: ParseVersion
    transcript: TranscriptRecord
    validation: ValidationReport = Field(default_factory=ValidationReport)
