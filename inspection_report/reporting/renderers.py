"""
Section, detail, text, item and signature renderers plus the page-numbering
pass. Each renderer draws through the cursor's backend and keeps the cursor
in step with what it drew.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from inspection_report.exceptions import ImageDecodeError
from inspection_report.reporting.layout import LayoutSettings, PageFlowCursor, TextMeasurer
from utils.config import config
from utils.image_utils import ImageDecoder, fit_within, scale_to_height
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="RENDERERS")


# ============================================================================
# PLACEHOLDERS & LABELS
# ============================================================================

NOT_PROVIDED = "not provided"
IMAGE_FAILED = "image failed to load"
NO_ITEMS = "no items were added"
UNSIGNED = "[unsigned]"
SIGNATURE_FAILED = "signature failed to load"
ITEM_LABEL = "Item {ordinal}"
PAGE_LABEL = "page {index} of {total}"
GENERATED_LABEL = "generated {timestamp}"

SECTION_RULE_GRAY = 0.78
SIGNATURE_RULE_GRAY = 0.59


class SectionRenderer:
    """
    Draws a section title followed by a full-width rule.

    The reservation covers the title block plus the first body line, so a
    title is never left alone at the bottom of a page.
    """

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer):
        self.layout = layout
        self.measurer = measurer

    @property
    def reserve_height(self) -> float:
        layout = self.layout
        block = max(layout.section_title_height, layout.section_title_advance + layout.section_rule_gap)
        return block + self.measurer.line_height(layout.body_font_size)

    def render_title(self, cursor: PageFlowCursor, title: str):
        layout = self.layout
        cursor.reserve(self.reserve_height)
        cursor.backend.draw_text(
            title,
            layout.margin_left,
            cursor.y,
            self.measurer.font_name(bold=True),
            layout.section_title_font_size,
        )
        cursor.advance(layout.section_title_advance)
        cursor.backend.draw_line(
            layout.margin_left,
            cursor.y,
            layout.page_width - layout.margin_right,
            cursor.y,
            gray=SECTION_RULE_GRAY,
        )
        cursor.advance(layout.section_rule_gap)


class DetailListRenderer:
    """Draws label/value rows with the value wrapped beside a fixed label column."""

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer):
        self.layout = layout
        self.measurer = measurer

    def render(self, cursor: PageFlowCursor, fields: Sequence):
        layout = self.layout
        size = layout.body_font_size
        value_x = layout.margin_left + layout.label_column_width
        value_width = layout.content_width - layout.label_column_width
        line_height = self.measurer.line_height(size)

        for detail in fields:
            value = (detail.value or "").strip() or NOT_PROVIDED
            lines = list(self.measurer.wrap(value, value_width, size))
            row_height = self.measurer.measure_height(len(lines), size) + layout.detail_row_gap

            cursor.reserve(row_height)
            cursor.backend.draw_text(
                f"{detail.label}:",
                layout.margin_left,
                cursor.y,
                self.measurer.font_name(bold=True),
                size,
            )
            for i, line in enumerate(lines):
                cursor.backend.draw_text(
                    line,
                    value_x,
                    cursor.y + i * line_height,
                    self.measurer.font_name(bold=False),
                    size,
                )
            cursor.advance(row_height)

        cursor.advance(layout.detail_list_gap)


class TextBlockRenderer:
    """Draws free text at content width, flowing line by line across pages."""

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer):
        self.layout = layout
        self.measurer = measurer

    def render(self, cursor: PageFlowCursor, text: Optional[str], bold: bool = False) -> int:
        """Returns the number of lines drawn."""
        layout = self.layout
        size = layout.body_font_size
        lines = list(self.measurer.wrap(text, layout.content_width, size, bold=bold))
        if not lines:
            return 0

        line_height = self.measurer.line_height(size)
        for line in lines:
            cursor.reserve(line_height)
            cursor.backend.draw_text(
                line,
                layout.margin_left,
                cursor.y,
                self.measurer.font_name(bold=bold),
                size,
            )
            cursor.advance(line_height)

        cursor.advance(layout.block_gap)
        return len(lines)


class ItemRenderer:
    """
    Draws one inspected item (label, image, description) as an atomic unit.

    The item's height is estimated up front and reserved once, so a page
    break can only happen before its label. The estimate is
    image height + description height + item margin; when it is wrong the
    item overflows into the bottom margin rather than splitting.
    """

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer, decoder: ImageDecoder):
        self.layout = layout
        self.measurer = measurer
        self.decoder = decoder

    def estimate_height(self, description_lines: int) -> float:
        layout = self.layout
        text_height = self.measurer.measure_height(description_lines, layout.body_font_size)
        return layout.item_image_height + text_height + layout.item_margin

    def image_size(self, item) -> Optional[Tuple[float, float]]:
        """Drawn (width, height) of the item image, or None if it cannot be decoded."""
        try:
            src_width, src_height = self.decoder.size(item.image)
        except ImageDecodeError as e:
            logger.warning(f"Item {item.ordinal}: {e}; drawing placeholder")
            return None
        return scale_to_height(
            src_width,
            src_height,
            self.layout.item_image_height,
            self.layout.content_width,
        )

    def render(self, cursor: PageFlowCursor, item) -> int:
        """
        Draw the item and return the 0-based page index it landed on.
        """
        layout = self.layout
        size = layout.body_font_size
        backend = cursor.backend

        drawn_size = self.image_size(item)
        lines = list(self.measurer.wrap(item.description, layout.content_width, size))
        text_height = self.measurer.measure_height(len(lines), size)

        cursor.reserve(self.estimate_height(len(lines)))
        page_index = cursor.page_index

        backend.draw_text(
            ITEM_LABEL.format(ordinal=item.ordinal),
            layout.margin_left,
            cursor.y,
            self.measurer.font_name(bold=True),
            layout.item_label_font_size,
        )
        cursor.advance(layout.item_label_advance)

        if drawn_size is not None:
            width, height = drawn_size
            backend.draw_image(item.image, layout.margin_left, cursor.y, width, height)
            cursor.advance(height + layout.item_image_gap)
        else:
            backend.draw_text(
                IMAGE_FAILED,
                layout.margin_left,
                cursor.y,
                self.measurer.font_name(bold=False),
                size,
            )
            cursor.advance(layout.item_label_advance)

        line_height = self.measurer.line_height(size)
        for i, line in enumerate(lines):
            backend.draw_text(
                line,
                layout.margin_left,
                cursor.y + i * line_height,
                self.measurer.font_name(bold=False),
                size,
            )
        cursor.advance(text_height + layout.item_trailing_gap)

        return page_index


class SignatureRowRenderer:
    """Draws three equal-width signature columns from one shared row start."""

    COLUMNS = 3

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer, decoder: ImageDecoder):
        self.layout = layout
        self.measurer = measurer
        self.decoder = decoder

    @property
    def column_width(self) -> float:
        return self.layout.content_width / self.COLUMNS

    @property
    def row_height(self) -> float:
        return self.layout.signature_role_offset + self.layout.signature_row_gap

    def render(self, cursor: PageFlowCursor, slots: Sequence) -> float:
        """Draw the row and return its shared start y."""
        layout = self.layout
        backend = cursor.backend
        column_width = self.column_width

        cursor.reserve(self.row_height)
        row_y = cursor.y

        for index, slot in enumerate(slots):
            column_x = layout.margin_left + index * column_width
            center_x = column_x + column_width / 2

            self._draw_signature(backend, slot, column_x, center_x, row_y)

            rule_y = row_y + layout.signature_rule_offset
            backend.draw_line(
                column_x + layout.signature_rule_inset,
                rule_y,
                column_x + column_width - layout.signature_rule_inset,
                rule_y,
                gray=SIGNATURE_RULE_GRAY,
            )
            backend.draw_text(
                slot.signer_name.strip() or NOT_PROVIDED,
                center_x,
                row_y + layout.signature_name_offset,
                self.measurer.font_name(bold=True),
                layout.signature_name_font_size,
                align="center",
            )
            backend.draw_text(
                slot.role_title,
                center_x,
                row_y + layout.signature_role_offset,
                self.measurer.font_name(bold=False),
                layout.signature_role_font_size,
                align="center",
            )

        cursor.advance(self.row_height)
        return row_y

    def _draw_signature(self, backend, slot, column_x: float, center_x: float, row_y: float):
        layout = self.layout
        placeholder_y = row_y + layout.signature_box_height / 2

        if slot.image is None:
            backend.draw_text(
                UNSIGNED,
                center_x,
                placeholder_y,
                self.measurer.font_name(bold=False),
                layout.body_font_size,
                align="center",
            )
            return

        try:
            src_width, src_height = self.decoder.size(slot.image)
        except ImageDecodeError as e:
            logger.warning(f"Signature for {slot.role}: {e}; drawing placeholder")
            backend.draw_text(
                SIGNATURE_FAILED,
                center_x,
                placeholder_y,
                self.measurer.font_name(bold=False),
                layout.body_font_size,
                align="center",
            )
            return

        box_width = self.column_width - 2 * layout.signature_box_padding
        width, height = fit_within(src_width, src_height, box_width, layout.signature_box_height)
        box_x = column_x + layout.signature_box_padding
        backend.draw_image(
            slot.image,
            box_x + (box_width - width) / 2,
            row_y + (layout.signature_box_height - height) / 2,
            width,
            height,
        )


class PageNumberStamper:
    """Stamps "page i of N" on every finished page, once N is known."""

    def __init__(self, layout: LayoutSettings, measurer: TextMeasurer):
        self.layout = layout
        self.measurer = measurer

    def stamp(self, backend, generated_at: Optional[datetime] = None) -> List[int]:
        """
        Visit every page exactly once.

        Returns:
            Indices of the pages visited, in order
        """
        layout = self.layout
        total = backend.page_count
        footer_y = layout.page_height - layout.footer_offset
        font = self.measurer.font_name(bold=False)
        timestamp = generated_at.strftime("%Y-%m-%d %H:%M") if generated_at else None

        visited = []
        for index in backend.iter_pages():
            backend.draw_text(
                PAGE_LABEL.format(index=index + 1, total=total),
                layout.page_width / 2,
                footer_y,
                font,
                layout.footer_font_size,
                align="center",
            )
            if timestamp:
                backend.draw_text(
                    GENERATED_LABEL.format(timestamp=timestamp),
                    layout.margin_left,
                    footer_y,
                    font,
                    layout.footer_font_size,
                )
            visited.append(index)

        logger.debug(f"Stamped {len(visited)} of {total} pages")
        return visited
