"""
Layout primitives: page geometry, text measurement and the page-flow cursor.

All vertical positions are measured top-down from the page's top edge, in
points. Text is positioned by its baseline.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from inspection_report.exceptions import FontError, MeasurementError
from utils.config import config
from utils.logger import set_log_page, setup_logger

logger = setup_logger(__name__, level=config.log_level, component="LAYOUT")


PAGE_SIZES = {
    "A4": A4,
    "LETTER": letter,
}


# ============================================================================
# PAGE GEOMETRY
# ============================================================================

@dataclass(frozen=True)
class LayoutSettings:
    """Immutable geometry and spacing snapshot used by one generation."""

    page_width: float = A4[0]
    page_height: float = A4[1]
    margin_top: float = 40.0
    margin_bottom: float = 40.0
    margin_left: float = 40.0
    margin_right: float = 40.0

    font_regular: str = "Helvetica"
    font_bold: str = "Helvetica-Bold"
    font_regular_path: Optional[str] = None
    font_bold_path: Optional[str] = None
    body_font_size: float = 10.0
    line_height_factor: float = 1.2

    title_font_size: float = 18.0
    title_advance: float = 30.0

    section_title_height: float = 30.0
    section_title_font_size: float = 14.0
    section_title_advance: float = 20.0
    section_rule_gap: float = 15.0

    label_column_width: float = 80.0
    detail_row_gap: float = 5.0
    detail_list_gap: float = 10.0
    block_gap: float = 10.0

    item_label_font_size: float = 12.0
    item_label_advance: float = 20.0
    item_image_height: float = 200.0
    item_image_gap: float = 10.0
    item_trailing_gap: float = 20.0
    item_margin: float = 50.0

    signature_box_height: float = 50.0
    signature_box_padding: float = 10.0
    signature_rule_inset: float = 5.0
    signature_rule_offset: float = 60.0
    signature_name_offset: float = 75.0
    signature_role_offset: float = 85.0
    signature_name_font_size: float = 10.0
    signature_role_font_size: float = 8.0
    signature_row_gap: float = 15.0

    footer_font_size: float = 8.0
    footer_offset: float = 20.0

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def bottom_limit(self) -> float:
        """Lowest y content may reach: pageHeight - marginBottom."""
        return self.page_height - self.margin_bottom

    @property
    def usable_height(self) -> float:
        return self.bottom_limit - self.margin_top

    @classmethod
    def from_config(cls, cfg=None) -> "LayoutSettings":
        """Build layout settings from the application config."""
        cfg = cfg or config
        page_width, page_height = PAGE_SIZES[cfg.page_size]
        return cls(
            page_width=page_width,
            page_height=page_height,
            margin_top=cfg.page_margin,
            margin_bottom=cfg.page_margin,
            margin_left=cfg.page_margin,
            margin_right=cfg.page_margin,
            font_regular=cfg.font_regular,
            font_bold=cfg.font_bold,
            font_regular_path=cfg.font_regular_path,
            font_bold_path=cfg.font_bold_path,
            body_font_size=cfg.body_font_size,
            line_height_factor=cfg.line_height_factor,
            section_title_height=cfg.section_title_height,
            label_column_width=cfg.label_column_width,
            detail_row_gap=cfg.detail_row_gap,
            item_image_height=cfg.item_image_height,
            item_margin=cfg.item_margin,
            signature_box_height=cfg.signature_box_height,
        )


# ============================================================================
# TEXT MEASUREMENT
# ============================================================================

def register_font(font_name: str, font_path: Optional[str] = None) -> str:
    """
    Make a font available to reportlab under font_name.

    Standard PDF fonts (Helvetica, Times-Roman, ...) need no path. A TrueType
    file is registered when a path is given.

    Raises:
        FontError: If the TTF cannot be registered or the name is unknown
    """
    if font_path:
        try:
            pdfmetrics.registerFont(TTFont(font_name, font_path))
            logger.info(f"Registered font '{font_name}' from: {font_path}")
        except Exception as e:
            raise FontError(f"Failed to register font '{font_name}' from {font_path}: {e}") from e

    try:
        pdfmetrics.getFont(font_name)
    except KeyError as e:
        raise FontError(f"Font '{font_name}' is not registered") from e
    return font_name


class TextMeasurer:
    """Measures and wraps text for one font family with two weights."""

    def __init__(
        self,
        font_regular: str = "Helvetica",
        font_bold: str = "Helvetica-Bold",
        line_height_factor: float = 1.2,
        font_regular_path: Optional[str] = None,
        font_bold_path: Optional[str] = None
    ):
        self.font_regular = register_font(font_regular, font_regular_path)
        self.font_bold = register_font(font_bold, font_bold_path)
        self.line_height_factor = line_height_factor

    @classmethod
    def from_layout(cls, layout: LayoutSettings) -> "TextMeasurer":
        return cls(
            font_regular=layout.font_regular,
            font_bold=layout.font_bold,
            line_height_factor=layout.line_height_factor,
            font_regular_path=layout.font_regular_path,
            font_bold_path=layout.font_bold_path,
        )

    def font_name(self, bold: bool = False) -> str:
        return self.font_bold if bold else self.font_regular

    def width(self, text: str, font_size: float, bold: bool = False) -> float:
        """Rendered width of a single line of text."""
        return pdfmetrics.stringWidth(text, self.font_name(bold), font_size)

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_height_factor

    def measure_height(self, line_count: int, font_size: float) -> float:
        """Height of line_count lines: lineCount * fontSize * lineHeightFactor."""
        if line_count < 0:
            raise MeasurementError(f"line_count must not be negative, got {line_count}")
        return line_count * self.line_height(font_size)

    def wrap(
        self,
        text: Optional[str],
        max_width: float,
        font_size: float,
        bold: bool = False
    ) -> Iterator[str]:
        """
        Wrap text to max_width.

        Returns a one-shot iterator of lines, each no wider than max_width.
        Explicit newlines start a new line; blank lines inside the text are
        kept. Empty or whitespace-only text yields no lines.

        Raises:
            MeasurementError: If max_width or font_size is not positive
        """
        if max_width <= 0:
            raise MeasurementError(f"max_width must be positive, got {max_width}")
        if font_size <= 0:
            raise MeasurementError(f"font_size must be positive, got {font_size}")
        if text is None:
            return iter(())
        return self._iter_lines(str(text), max_width, font_size, bold)

    def _iter_lines(self, text: str, max_width: float, font_size: float, bold: bool) -> Iterator[str]:
        text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
        if not text:
            return

        for paragraph in text.split("\n"):
            words = paragraph.split()
            if not words:
                yield ""
                continue

            current = ""
            for word in words:
                for piece in self._split_long_word(word, max_width, font_size, bold):
                    candidate = f"{current} {piece}" if current else piece
                    if self.width(candidate, font_size, bold) <= max_width:
                        current = candidate
                    else:
                        if current:
                            yield current
                        current = piece
            if current:
                yield current

    def _split_long_word(self, word: str, max_width: float, font_size: float, bold: bool) -> List[str]:
        """Break a token wider than max_width into width-safe chunks."""
        if self.width(word, font_size, bold) <= max_width:
            return [word]

        chunks = []
        remaining = word
        while remaining:
            lo, hi = 1, len(remaining)
            fit = 1
            while lo <= hi:
                mid = (lo + hi) // 2
                if self.width(remaining[:mid], font_size, bold) <= max_width:
                    fit = mid
                    lo = mid + 1
                else:
                    hi = mid - 1
            chunks.append(remaining[:fit])
            remaining = remaining[fit:]
        return chunks


# ============================================================================
# PAGE FLOW CURSOR
# ============================================================================

class PageFlowCursor:
    """
    Vertical write position on the active page of one generation.

    The cursor starts pages on its backend; it is never shared between
    generations.
    """

    def __init__(self, layout: LayoutSettings, backend):
        self.layout = layout
        self.backend = backend
        self.y = layout.margin_top

    @property
    def page_index(self) -> int:
        return self.backend.page_count - 1

    @property
    def remaining(self) -> float:
        return self.layout.bottom_limit - self.y

    @property
    def at_page_top(self) -> bool:
        return self.y == self.layout.margin_top

    def fits(self, height: float) -> bool:
        return self.y + height <= self.layout.bottom_limit

    def reserve(self, height: float) -> bool:
        """
        Ensure height fits on the current page, breaking first if it does not.

        Content taller than a full page breaks at most once and then
        overflows into the bottom margin; it is never split.

        Returns:
            True if a page break was inserted
        """
        if self.fits(height):
            return False
        if self.at_page_top:
            logger.debug(
                f"Block of {height:.1f}pt exceeds usable height "
                f"{self.layout.usable_height:.1f}pt; drawing with overflow"
            )
            return False
        logger.debug(f"Page break before {height:.1f}pt block (remaining {self.remaining:.1f}pt)")
        self._start_page()
        return True

    def advance(self, height: float):
        """Move down past content that has been drawn."""
        self.y += height

    def new_page(self):
        """Unconditional forced page break."""
        self._start_page()

    def _start_page(self):
        self.backend.new_page()
        self.y = self.layout.margin_top
        set_log_page(self.page_index + 1)
