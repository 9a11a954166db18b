"""
Inspection report generation.
Lays out a ReportModel into a paginated PDF: details, observations, summary,
photographed items and signatures, then numbers every page.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from inspection_report.exceptions import GenerationError
from inspection_report.reporting.backends import RecordingBackend, RenderBackend, ReportLabBackend
from inspection_report.reporting.layout import LayoutSettings, PageFlowCursor, TextMeasurer
from inspection_report.reporting.renderers import (
    NO_ITEMS,
    DetailListRenderer,
    ItemRenderer,
    PageNumberStamper,
    SectionRenderer,
    SignatureRowRenderer,
    TextBlockRenderer,
)
from inspection_report.schemas.models import ReportModel
from utils.config import config
from utils.image_utils import ImageDecoder
from utils.logger import generation_context, setup_logger

logger = setup_logger(__name__, level=config.log_level, component="REPORTS")


# ============================================================================
# SECTION TITLES
# ============================================================================

DETAILS_TITLE = "Inspection Details"
OBSERVATIONS_TITLE = "General Observations"
SUMMARY_TITLE = "Property Condition Summary"
ITEMS_TITLE = "Inspected Items"
SIGNATURES_TITLE = "Signatures"


BackendFactory = Callable[..., RenderBackend]


class DocumentBuilder:
    """Orchestrates the renderers over one ReportModel per call."""

    def __init__(
        self,
        layout: Optional[LayoutSettings] = None,
        measurer: Optional[TextMeasurer] = None,
        decoder: Optional[ImageDecoder] = None,
        backend_factory: BackendFactory = ReportLabBackend
    ):
        self.logger = logger
        self.layout = layout or LayoutSettings.from_config()
        self.measurer = measurer or TextMeasurer.from_layout(self.layout)
        self.decoder = decoder or ImageDecoder()
        self.backend_factory = backend_factory

        self.sections = SectionRenderer(self.layout, self.measurer)
        self.details = DetailListRenderer(self.layout, self.measurer)
        self.text_blocks = TextBlockRenderer(self.layout, self.measurer)
        self.items = ItemRenderer(self.layout, self.measurer, self.decoder)
        self.signatures = SignatureRowRenderer(self.layout, self.measurer, self.decoder)
        self.stamper = PageNumberStamper(self.layout, self.measurer)

    def build(self, model: ReportModel, generated_at: Optional[datetime] = None) -> bytes:
        """
        Generate the finished document.

        Args:
            model: Report content
            generated_at: Timestamp printed in the footer; pass a fixed value
                for reproducible output

        Returns:
            The finished artifact (PDF bytes for the default backend)

        Raises:
            GenerationError: If anything other than an image decode fails
        """
        with generation_context() as request_id:
            self.logger.info(f"Generating report '{model.title}' ({len(model.items)} items)")

            try:
                backend = self.backend_factory(self.layout, title=model.title)
                self._render(backend, model, generated_at)
                artifact = backend.finish()
            except Exception as e:
                self.logger.error(f"Report generation failed: {e}")
                raise GenerationError(e, request_id=request_id) from e

            self.logger.info(f"Report generated: {backend.page_count} pages, {len(artifact)} bytes")
            return artifact

    def render(
        self,
        model: ReportModel,
        backend: RenderBackend,
        generated_at: Optional[datetime] = None
    ) -> RenderBackend:
        """
        Lay out and number pages on a caller-supplied backend without
        finishing it. Used to inspect the page structure.

        Raises:
            GenerationError: If anything other than an image decode fails
        """
        with generation_context() as request_id:
            try:
                self._render(backend, model, generated_at)
            except Exception as e:
                self.logger.error(f"Report layout failed: {e}")
                raise GenerationError(e, request_id=request_id) from e
            return backend

    def _render(self, backend: RenderBackend, model: ReportModel, generated_at: Optional[datetime]):
        cursor = PageFlowCursor(self.layout, backend)

        self._render_heading(cursor, model.title)

        self.sections.render_title(cursor, DETAILS_TITLE)
        self.details.render(cursor, model.details)

        if model.observations and model.observations.strip():
            self.sections.render_title(cursor, OBSERVATIONS_TITLE)
            self.text_blocks.render(cursor, model.observations)

        self.sections.render_title(cursor, SUMMARY_TITLE)
        self.text_blocks.render(cursor, model.summary)

        self.start_items_section(cursor)
        if model.items:
            for item in model.items:
                page_index = self.items.render(cursor, item)
                self.logger.debug(f"Item {item.ordinal} placed on page {page_index + 1}")
        else:
            self.text_blocks.render(cursor, NO_ITEMS)

        self.start_signature_section(cursor)
        self.signatures.render(cursor, model.signatures)

        self.stamper.stamp(backend, generated_at)

    def _render_heading(self, cursor: PageFlowCursor, title: str):
        layout = self.layout
        cursor.reserve(layout.title_advance)
        cursor.backend.draw_text(
            title,
            layout.page_width / 2,
            cursor.y,
            self.measurer.font_name(bold=True),
            layout.title_font_size,
            align="center",
        )
        cursor.advance(layout.title_advance)

    def start_items_section(self, cursor: PageFlowCursor):
        """Items always begin on a fresh page."""
        cursor.new_page()
        self.sections.render_title(cursor, ITEMS_TITLE)

    def start_signature_section(self, cursor: PageFlowCursor):
        """Signatures always begin on a fresh page."""
        cursor.new_page()
        self.sections.render_title(cursor, SIGNATURES_TITLE)


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def generate_report(
    model: ReportModel,
    output_path: Optional[Path] = None,
    generated_at: Optional[datetime] = None
) -> Path:
    """
    Generate the PDF report and write it to disk.

    The file is written only after the whole document was produced.
    """
    generated_at = generated_at or datetime.now()

    pdf_bytes = DocumentBuilder().build(model, generated_at=generated_at)

    if output_path is None:
        timestamp = generated_at.strftime("%Y%m%d_%H%M%S")
        output_path = config.get_report_dir() / f"inspection_report_{timestamp}.pdf"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(pdf_bytes)

    logger.info(f"PDF report written: {output_path}")
    return output_path


def layout_report(model: ReportModel, generated_at: Optional[datetime] = None) -> RecordingBackend:
    """Lay out a report onto a RecordingBackend for inspection."""
    builder = DocumentBuilder(backend_factory=RecordingBackend)
    backend = RecordingBackend(builder.layout, title=model.title)
    return builder.render(model, backend, generated_at=generated_at)
