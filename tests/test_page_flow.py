"""
Unit tests for the page-flow cursor.
"""

from inspection_report.reporting.layout import PageFlowCursor


class TestPageFlowCursor:
    """Tests for reserve/advance/new_page."""

    def test_starts_at_top_margin_of_first_page(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        assert cursor.y == layout.margin_top
        assert cursor.page_index == 0
        assert cursor.at_page_top

    def test_reserve_that_fits_does_not_break(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        assert cursor.reserve(100) is False
        assert backend.page_count == 1

    def test_reserve_exactly_to_bottom_limit_fits(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        cursor.advance(100)
        assert cursor.reserve(cursor.remaining) is False
        assert backend.page_count == 1

    def test_reserve_that_does_not_fit_breaks(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        cursor.advance(700)
        assert cursor.reserve(200) is True
        assert backend.page_count == 2
        assert cursor.y == layout.margin_top
        assert cursor.page_index == 1

    def test_oversize_block_at_page_top_overflows(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        assert cursor.reserve(layout.usable_height + 300) is False
        assert backend.page_count == 1

    def test_oversize_block_breaks_at_most_once(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        cursor.advance(10)
        assert cursor.reserve(layout.usable_height * 3) is True
        assert cursor.reserve(layout.usable_height * 3) is False
        assert backend.page_count == 2

    def test_new_page_is_unconditional(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        cursor.new_page()
        cursor.new_page()
        assert backend.page_count == 3
        assert cursor.at_page_top

    def test_advance_moves_down(self, layout, backend):
        cursor = PageFlowCursor(layout, backend)
        cursor.advance(25)
        assert cursor.y == layout.margin_top + 25
        assert cursor.remaining == layout.bottom_limit - cursor.y
