"""
Shared fixtures: synthetic CPE Monitor transcript text as it comes out
of page-text extraction (wrapped cells, repeated page footers).
"""

from __future__ import annotations

import logging

import pytest

SAMPLE_TRANSCRIPT = (
    "CPE Monitor Activity Transcript\r\n"
    "Participant Name\r\n"
    "Jane Doe\r\n"
    "NABP e-Profile ID\r\n"
    "123456\r\n"
    "CPE Activity Date Range\r\n"
    "1/1/2023 to 12/31/2024\r\n"
    "Total CPE Hours Earned\r\n"
    "12.50\r\n"
    "Report Generated @ 3/1/2024 10:15 AM Page 1 Of 2\r\n"
    "Activity Date Activity # Credit Type Source Title Topic Provider "
    "Live Hours Home Hours\r\n"
    "1/5/2024 JA0002895-0000-24-072-H01-P ACPE ACPE Managing Diabetes "
    "Drug Information ABC Pharmacy Inc 1.00 0.50\r\n"
    "2/10/2024 JA0000000-0000-24-001-\r\n"
    "H05-P ACPE ACPE Safe Opioid Prescribing Opioids/Pain Management/Substan\r\n"
    "ce Use Disorder Pharmacy Board Co 0.00 2.00\r\n"
    "Report Generated @ 3/1/2024 10:16 AM Page 2 Of 2\f"
    "3/3/2024 XY-123 IPCE IPCE Team Care Rounds Interprofessional "
    "Collaboration Group 1 2\n"
    "Disclaimer: This   is\n"
    "an official record.\n"
    "Report Generated @ 3/1/2024 10:17 AM Page 2 Of 2\n"
)


@pytest.fixture
def sample_transcript() -> str:
    return SAMPLE_TRANSCRIPT


@pytest.fixture(autouse=True)
def reset_package_logger():
    """ParserEngine attaches handlers to the package logger; drop them."""
    yield
    package_logger = logging.getLogger("cpe_parser")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
