"""
CPE Transcript Parser
=====================
Structured extraction for CPE Monitor activity transcripts.

Architecture:
    - Page Text Extractor: Pulls raw page text out of the PDF (PyMuPDF)
    - Text Normalizer: Canonicalizes line endings and page breaks
    - Header Extractor: Recovers participant fields via ordered strategies
    - Activity Table Extractor: Segments and recognizes activity rows
    - Disclaimer Extractor: Recovers the trailing disclaimer paragraph
    - Validation Engine: Summarizes dropped rows and low-confidence fields

Version: 1.0.0
"""

__version__ = "1.0.0"
