"""
Activity Table Extractor
========================
Segments the activity table into one chunk per row and recognizes the
nine fields of each row.

Expected column order once a chunk is flattened to one line:

    Date  Activity#  CreditType  Source  Title  Topic  Provider  Live  Home

Title, Topic and Provider are free text with no delimiters. They are
split using the canonical topic dictionary as an anchor, falling back to
a positional thirds split when no topic matches.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import (
    ActivityExtraction,
    ActivityRecord,
    ChunkOutcome,
    ChunkStatus,
    RejectReason,
    TopicMatch,
)
from .topics import TOPIC_PATTERNS

logger = logging.getLogger(__name__)

DATE = r"\d{1,2}/\d{1,2}/\d{4}"

# ─── Cleanup Patterns ─────────────────────────────────────────────────────────

# Per-page footer: "Report Generated @ ... Page 2 Of 5"
FOOTER_PATTERN = re.compile(
    r"Report(?:ed)?\s+Generated\s*@.*?Page\s+\d+\s+Of\s+\d+",
    re.IGNORECASE | re.DOTALL | re.ASCII,
)
DISCLAIMER_TAIL_PATTERN = re.compile(
    r"Disclaimer\s*:.*$", re.IGNORECASE | re.DOTALL
)
TABLE_HEADER_PATTERN = re.compile(r"Live\s+Hours\s+Home\s+Hours", re.IGNORECASE)

# ─── Row Patterns ─────────────────────────────────────────────────────────────

# Zero-width split point before every line that starts with a date
ROW_SPLIT_PATTERN = re.compile(rf"(?=\n\s*(?:{DATE})\s)", re.ASCII)

LEADING_DATE_PATTERN = re.compile(rf"^({DATE})", re.ASCII)

# Activity # may be wrapped, e.g. "JA0002895-0000-24-072- H01-P"
CODES_PATTERN = re.compile(r"^(.+?)\s+(ACPE|IPCE)\s+(ACPE|IPCE)\s+")

# Live / Home hours; whitespace between them so "30.75" is never split
HOURS_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s+(\d+(?:\.\d+)?)\s*$", re.ASCII
)

WHITESPACE_PATTERN = re.compile(r"\s+")

# Known line-wrap artifact in the topic column
WRAP_REPAIRS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"Substan\s+ce\b"), "Substance"),
)


def clean_table_text(text: str) -> str:
    """Strip every page footer and everything from "Disclaimer:" onward."""
    cleaned = FOOTER_PATTERN.sub("", text)
    cleaned = DISCLAIMER_TAIL_PATTERN.sub("", cleaned)
    return cleaned.strip()


def select_table_body(cleaned: str) -> tuple[str, bool]:
    """
    Return the text after the first table header phrase, if present.

    Returns:
        (body, used_table_header)
    """
    parts = TABLE_HEADER_PATTERN.split(cleaned, maxsplit=1)
    if len(parts) == 2:
        return parts[1].strip(), True
    return cleaned, False


def segment_rows(body: str) -> list[str]:
    """Split a table body into candidate row chunks, one per dated line."""
    return [
        chunk.strip()
        for chunk in ROW_SPLIT_PATTERN.split(body)
        if chunk.strip()
    ]


def repair_wrapped_words(text: str) -> str:
    for pattern, replacement in WRAP_REPAIRS:
        text = pattern.sub(replacement, text)
    return text


def match_topic(middle: str) -> Optional[tuple[str, str, str]]:
    """
    Split the middle region on the first dictionary topic that matches.

    Returns:
        (title, canonical_topic, provider) or None.
    """
    for topic, pattern in TOPIC_PATTERNS:
        match = pattern.match(middle)
        if match:
            return match.group(1).strip(), topic, match.group(3).strip()
    return None


def split_thirds(middle: str) -> tuple[str, str, str]:
    """
    Positional fallback: three contiguous word groups of near-equal size.
    The first group absorbs the remainder of the division.
    """
    words = middle.split()
    base, remainder = divmod(len(words), 3)
    first_end = base + remainder
    second_end = first_end + base
    return (
        " ".join(words[:first_end]),
        " ".join(words[first_end:second_end]),
        " ".join(words[second_end:]),
    )


def parse_activity_chunk(chunk: str) -> ChunkOutcome:
    """
    Recognize the fields of one activity chunk.

    Args:
        chunk: Raw chunk text, possibly spanning several lines.

    Returns:
        ChunkOutcome tagged PARSED with the record, or REJECTED with
        the first structural requirement that failed.
    """
    flat = WHITESPACE_PATTERN.sub(" ", chunk).strip()

    date_match = LEADING_DATE_PATTERN.match(flat)
    if not date_match:
        return ChunkOutcome.rejected(flat, RejectReason.MISSING_DATE)
    activity_date = date_match.group(1)
    rest = flat[date_match.end():].lstrip()

    codes_match = CODES_PATTERN.match(rest)
    if not codes_match:
        return ChunkOutcome.rejected(flat, RejectReason.MISSING_CREDIT_CODES)
    activity_number = codes_match.group(1).strip()
    credit_type = codes_match.group(2)
    source = codes_match.group(3)
    rest = rest[codes_match.end():].lstrip()

    hours_match = HOURS_PATTERN.search(rest)
    if not hours_match:
        return ChunkOutcome.rejected(flat, RejectReason.MISSING_HOURS)
    live_hours = float(hours_match.group(1))
    home_hours = float(hours_match.group(2))

    middle = repair_wrapped_words(rest[:hours_match.start()].strip())

    topic_split = match_topic(middle)
    if topic_split:
        title, topic, provider = topic_split
        topic_match = TopicMatch.DICTIONARY
    else:
        title, topic, provider = split_thirds(middle)
        topic_match = TopicMatch.POSITIONAL

    activity = ActivityRecord(
        activity_date=activity_date,
        activity_number=activity_number,
        credit_type=credit_type,
        source=source,
        title=title,
        topic=topic,
        provider=provider,
        live_hours=live_hours,
        home_hours=home_hours,
        topic_match=topic_match,
    )
    return ChunkOutcome.parsed(flat, activity)


def _scan_rows(body: str) -> list[ChunkOutcome]:
    outcomes = [parse_activity_chunk(chunk) for chunk in segment_rows(body)]
    for outcome in outcomes:
        if outcome.status == ChunkStatus.REJECTED:
            logger.debug(
                f"Dropped chunk ({outcome.reason}): {outcome.chunk[:60]!r}"
            )
    return outcomes


def extract_activities(text: str) -> ActivityExtraction:
    """
    Extract all activity rows from normalized transcript text.

    Prefers the body after the "Live Hours Home Hours" table header. When
    that body yields no rows, the whole cleaned text is scanned instead
    (some variants put the table before the header phrase).
    """
    cleaned = clean_table_text(text)
    body, used_table_header = select_table_body(cleaned)

    outcomes = _scan_rows(body)
    retried = False

    if used_table_header and not any(
        o.status == ChunkStatus.PARSED for o in outcomes
    ):
        logger.debug("No rows after table header, rescanning full text")
        outcomes = _scan_rows(cleaned)
        retried = True

    activities = [
        o.activity for o in outcomes if o.status == ChunkStatus.PARSED
    ]
    return ActivityExtraction(
        activities=activities,
        outcomes=outcomes,
        used_table_header=used_table_header,
        retried_full_text=retried,
    )
