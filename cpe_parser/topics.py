"""
Topic Dictionary
================
Canonical CPE Monitor topic areas, used as anchors to split the
free-text title / topic / provider region of an activity row.

Order is significant: the first entry that matches a row wins, so
longer compound topics come before the shorter ones they contain.
"""

from __future__ import annotations

import re

CANONICAL_TOPICS: tuple[str, ...] = (
    "Opioids/Pain Management/Substance Use Disorder",
    "Disease State Management/Drug Therapy",
    "Law Related to Pharmacy Practice",
    "Medication Therapy Management",
    "Pharmacy Administration",
    "Additional Topic Areas",
    "Patient Safety",
    "Drug Information",
    "Pharmacy Informatics",
    "Public Health",
    "HIV/AIDS",
    "Immunizations",
    "Compounding",
)


def topic_anchor_pattern(topic: str) -> re.Pattern:
    """
    Build the `<title> <topic> <provider>` pattern for one topic.
    Internal whitespace of the topic is matched flexibly; the title is
    non-greedy so the earliest occurrence of the anchor is used.
    """
    anchor = r"\s+".join(re.escape(word) for word in topic.split())
    return re.compile(rf"^(.+?)\s+({anchor})\s+(.+)$", re.IGNORECASE)


TOPIC_PATTERNS: tuple[tuple[str, re.Pattern], ...] = tuple(
    (topic, topic_anchor_pattern(topic)) for topic in CANONICAL_TOPICS
)
