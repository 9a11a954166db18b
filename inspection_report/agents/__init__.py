"""
Model-backed helpers for report content.
"""

from inspection_report.agents.summarizer import (
    NO_ITEMS_SUMMARY,
    SUMMARY_UNAVAILABLE,
    SummaryGenerator,
    generate_summary,
)

__all__ = [
    "NO_ITEMS_SUMMARY",
    "SUMMARY_UNAVAILABLE",
    "SummaryGenerator",
    "generate_summary",
]
