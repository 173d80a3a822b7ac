"""
Disclaimer Extractor
====================
Recovers the disclaimer paragraph printed at the end of a transcript.
"""

from __future__ import annotations

import re
from typing import Optional

DISCLAIMER_PATTERN = re.compile(
    r"Disclaimer\s*:\s*(.*?)(?:Report(?:ed)?\s+Generated\s*@|$)",
    re.IGNORECASE | re.DOTALL,
)
WHITESPACE_PATTERN = re.compile(r"\s+")


def extract_disclaimer(text: str) -> Optional[str]:
    """
    Text between "Disclaimer:" and the next "Report Generated @" (or the
    end of the document), with whitespace runs collapsed.
    """
    match = DISCLAIMER_PATTERN.search(text)
    if not match:
        return None
    return WHITESPACE_PATTERN.sub(" ", match.group(1)).strip()
