"""
Header Extractor
================
Recovers participant header fields from normalized transcript text.

Each field is resolved by an ordered tuple of named strategies. A strategy
is a pure function of the HeaderContext returning the value or None; the
first strategy that returns a value wins. Block-scoped strategies come
first, whole-document fallbacks after them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .models import HeaderExtraction, HeaderFields

logger = logging.getLogger(__name__)

# ─── Anchor Patterns ──────────────────────────────────────────────────────────
# Patterns touching digits are compiled with re.ASCII: only 0-9 count.

DATE = r"\d{1,2}/\d{1,2}/\d{4}"

# "CPE Monitor Activity Transcript" ... up to the first "Report Generated @"
HEADER_BLOCK_PATTERN = re.compile(
    r"CPE Monitor Activity Transcript\s*(.*?)"
    r"(?=Report(?:ed)?\s+Generated\s*@|$)",
    re.IGNORECASE | re.DOTALL,
)

# "1/1/2023 to 12/31/2024"
DATE_RANGE_PATTERN = re.compile(rf"\b({DATE}\s+to\s+{DATE})\b", re.ASCII)

# "12.50" - exactly two fraction digits
HOURS_PATTERN = re.compile(r"\b(\d+\.\d{2})\b", re.ASCII)

# "Recorded CPE activity for this period ... . 12.50"
RECORDED_HOURS_PATTERN = re.compile(
    r"Recorded CPE activity[^.]*\.\s*(\d+\.\d{2})\b", re.ASCII
)

EPROFILE_ID_PATTERN = re.compile(r"\b(\d{6})\b", re.ASCII)

# "Report Generated @ 3/1/2024 10:15 AM Page 1 Of 3" (one per page)
REPORT_GENERATED_PATTERN = re.compile(
    r"Report(?:ed)?\s+Generated\s*@\s*(.+?)"
    r"(?:\s+Page\s+\d+\s+Of\s+\d+)?(?:\n|$)",
    re.IGNORECASE | re.ASCII,
)

# Capitalized 2-4 word name, e.g. "Jane Doe"
NAME_PATTERN = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,3}$")

BLOCK_LABEL_PATTERN = re.compile(
    r"^(Participant|NABP|CPE|Total|Recorded|If it)", re.IGNORECASE
)
BLOCK_NUMERIC_PATTERN = re.compile(r"^\d|^\d+/\d+|\.\d+", re.ASCII)

PARTICIPANT_LABEL_PATTERN = re.compile(r"Participant\s+Name", re.IGNORECASE)
DOCUMENT_LABEL_PATTERN = re.compile(
    r"^(NABP|CPE|Total|Recorded|If it|Disclaimer|\d)",
    re.IGNORECASE | re.ASCII,
)
LEADING_DATE_PATTERN = re.compile(rf"^{DATE}", re.ASCII)

# A date followed by more digits marks the start of the activity rows
ROW_MARKER_PATTERN = re.compile(rf"{DATE}\s+\d", re.ASCII)

LINE_SPLIT_PATTERN = re.compile(r"\n+")


@dataclass(frozen=True)
class HeaderContext:
    """Inputs shared by every header strategy."""
    text: str
    block: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> HeaderContext:
        return cls(text=text, block=find_header_block(text))


Strategy = tuple[str, Callable[[HeaderContext], Any]]


def find_header_block(text: str) -> Optional[str]:
    """Return the trimmed header block, or None when absent or empty."""
    match = HEADER_BLOCK_PATTERN.search(text)
    if not match:
        return None
    block = match.group(1).strip()
    return block or None


def _first_group(pattern: re.Pattern, text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def _as_hours(value: Optional[str]) -> Optional[float]:
    return float(value) if value is not None else None


# ─── Strategies ───────────────────────────────────────────────────────────────


def block_date_range(ctx: HeaderContext) -> Optional[str]:
    return _first_group(DATE_RANGE_PATTERN, ctx.block)


def document_date_range(ctx: HeaderContext) -> Optional[str]:
    return _first_group(DATE_RANGE_PATTERN, ctx.text)


def block_total_hours(ctx: HeaderContext) -> Optional[float]:
    return _as_hours(_first_group(HOURS_PATTERN, ctx.block))


def recorded_sentence_total_hours(ctx: HeaderContext) -> Optional[float]:
    return _as_hours(_first_group(RECORDED_HOURS_PATTERN, ctx.text))


def block_eprofile_id(ctx: HeaderContext) -> Optional[str]:
    return _first_group(EPROFILE_ID_PATTERN, ctx.block)


def document_eprofile_id(ctx: HeaderContext) -> Optional[str]:
    return _first_group(EPROFILE_ID_PATTERN, ctx.text)


def block_participant_name(ctx: HeaderContext) -> Optional[str]:
    """First name-shaped line of the header block that is not a label."""
    if not ctx.block:
        return None

    for line in LINE_SPLIT_PATTERN.split(ctx.block):
        line = line.strip()
        if not line or BLOCK_LABEL_PATTERN.match(line):
            continue
        if BLOCK_NUMERIC_PATTERN.search(line):
            continue
        if NAME_PATTERN.match(line):
            return line
    return None


def labeled_participant_name(ctx: HeaderContext) -> Optional[str]:
    """
    Scan the whole document below a "Participant Name" label.
    Stops at the first line that looks like an activity row.
    """
    after_label = False

    for line in LINE_SPLIT_PATTERN.split(ctx.text):
        line = line.strip()
        if PARTICIPANT_LABEL_PATTERN.search(line):
            after_label = True
            continue
        if not after_label:
            continue
        if (
            line
            and not DOCUMENT_LABEL_PATTERN.match(line)
            and not LEADING_DATE_PATTERN.match(line)
            and NAME_PATTERN.match(line)
        ):
            return line
        if ROW_MARKER_PATTERN.search(line):
            break
    return None


def last_report_generated(ctx: HeaderContext) -> Optional[str]:
    """
    Footer text of the last "Report Generated @" occurrence.
    The footer repeats on every page; the last one is kept.
    """
    matches = REPORT_GENERATED_PATTERN.findall(ctx.text)
    if not matches:
        return None
    return matches[-1].strip()


# Field name -> strategies in priority order
FIELD_STRATEGIES: dict[str, tuple[Strategy, ...]] = {
    "participant_name": (
        ("header_block_lines", block_participant_name),
        ("participant_label_scan", labeled_participant_name),
    ),
    "nabp_eprofile_id": (
        ("header_block", block_eprofile_id),
        ("document", document_eprofile_id),
    ),
    "cpe_activity_date_range": (
        ("header_block", block_date_range),
        ("document", document_date_range),
    ),
    "total_cpe_hours_earned": (
        ("header_block", block_total_hours),
        ("recorded_activity_sentence", recorded_sentence_total_hours),
    ),
    "report_generated_at": (
        ("last_report_footer", last_report_generated),
    ),
}


def resolve_field(
    strategies: tuple[Strategy, ...],
    ctx: HeaderContext,
) -> tuple[Any, Optional[str]]:
    """
    Evaluate strategies in order.

    Returns:
        (value, strategy_name) of the first hit, or (None, None).
    """
    for name, strategy in strategies:
        value = strategy(ctx)
        if value is not None:
            return value, name
    return None, None


def extract_header(text: str) -> HeaderExtraction:
    """
    Extract all header fields from normalized text.

    Args:
        text: Normalized transcript text.

    Returns:
        HeaderExtraction with the fields and the strategy behind each.
    """
    ctx = HeaderContext.from_text(text)
    values: dict[str, Any] = {}
    sources: dict[str, str] = {}

    for field_name, strategies in FIELD_STRATEGIES.items():
        value, source = resolve_field(strategies, ctx)
        values[field_name] = value
        if source:
            sources[field_name] = source
            logger.debug(f"Header {field_name} resolved by {source}")
        else:
            logger.debug(f"Header {field_name} not found")

    return HeaderExtraction(header=HeaderFields(**values), sources=sources)
