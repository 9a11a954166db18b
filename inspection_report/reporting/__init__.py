"""
Reporting module for the inspection report engine.
"""

from inspection_report.reporting.pdf_generator import (
    DocumentBuilder,
    generate_report,
    layout_report,
)
from inspection_report.reporting.layout import LayoutSettings, PageFlowCursor, TextMeasurer
from inspection_report.reporting.backends import RecordingBackend, ReportLabBackend, RenderBackend

__all__ = [
    "DocumentBuilder",
    "generate_report",
    "layout_report",
    "LayoutSettings",
    "PageFlowCursor",
    "TextMeasurer",
    "RecordingBackend",
    "ReportLabBackend",
    "RenderBackend",
]
