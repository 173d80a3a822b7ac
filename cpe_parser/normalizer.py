"""
Text Normalizer
===============
Canonicalizes raw page text before any field recognition runs.
"""

from __future__ import annotations

# Applied in order: "\r\n" must collapse before a lone "\r" is seen.
_LINE_BREAK_VARIANTS = ("\r\n", "\r", "\f")


def normalize_text(raw_text: str) -> str:
    """
    Convert every line-ending variant to "\\n" and turn form-feed page
    breaks into plain line breaks. Idempotent.
    """
    text = raw_text
    for variant in _LINE_BREAK_VARIANTS:
        text = text.replace(variant, "\n")
    return text
