"""
Integration tests for DocumentBuilder and the report convenience functions.
"""

import json
from datetime import datetime

import pytest
from PIL import Image

from inspection_report.exceptions import GenerationError, RenderingError
from inspection_report.reporting.backends import ImageRegion, RecordingBackend, ReportLabBackend, TextRun
from inspection_report.reporting.pdf_generator import (
    ITEMS_TITLE,
    SIGNATURES_TITLE,
    DocumentBuilder,
    generate_report,
    layout_report,
)
from inspection_report.reporting.renderers import IMAGE_FAILED, NO_ITEMS, UNSIGNED
from inspection_report.schemas.models import ImageRef, InspectionItem


FIXED_TIME = datetime(2024, 5, 1, 9, 30)

LONG_DESCRIPTION = "The skirting board along the hallway shows scuffs and a loose joint near the door. " * 30


def page_of(backend, text):
    for page in backend.pages:
        if text in page.texts():
            return page.index
    raise AssertionError(f"{text!r} not drawn")


def render(builder, model):
    backend = RecordingBackend(builder.layout, title=model.title)
    return builder.render(model, backend, generated_at=FIXED_TIME)


class TestDocumentOrder:
    """Tests for section order and forced breaks."""

    def test_sections_in_order(self, recording_builder, sample_model):
        backend = render(recording_builder, sample_model)
        texts = [t for page in backend.pages for t in page.texts()]

        order = [
            sample_model.title,
            "Inspection Details",
            "General Observations",
            "Property Condition Summary",
            ITEMS_TITLE,
            SIGNATURES_TITLE,
        ]
        positions = [texts.index(t) for t in order]
        assert positions == sorted(positions)

    def test_items_and_signatures_start_fresh_pages(self, recording_builder, sample_model):
        backend = render(recording_builder, sample_model)
        for title in (ITEMS_TITLE, SIGNATURES_TITLE):
            page = backend.pages[page_of(backend, title)]
            assert page.texts()[0] == title

    def test_observations_section_skipped_when_blank(self, recording_builder, model_factory, item_factory):
        backend = render(recording_builder, model_factory(items=item_factory(1), observations="  "))
        assert "General Observations" not in [t for page in backend.pages for t in page.texts()]

    def test_details_from_inspection(self, recording_builder, sample_model):
        backend = render(recording_builder, sample_model)
        first = backend.pages[0].texts()
        assert "51.50740, -0.12780" in first
        assert "not provided" in first


class TestPagination:
    """Tests for page counting and item placement."""

    def test_page_count_and_single_stamp_per_page(self, recording_builder, sample_model):
        backend = render(recording_builder, sample_model)
        total = backend.page_count
        assert total >= 1
        for page in backend.pages:
            stamps = [t for t in page.texts() if t.startswith("page ")]
            assert stamps == [f"page {page.index + 1} of {total}"]

    def test_zero_items(self, recording_builder, model_factory):
        backend = render(recording_builder, model_factory(items=[]))

        items_page = page_of(backend, ITEMS_TITLE)
        assert page_of(backend, NO_ITEMS) == items_page

        signatures_page = page_of(backend, SIGNATURES_TITLE)
        assert signatures_page > items_page
        assert backend.pages[signatures_page].texts().count(UNSIGNED) == 3
        assert backend.page_count == 3

    def test_long_descriptions_need_more_pages(self, recording_builder, model_factory, item_factory):
        short = render(recording_builder, model_factory(items=item_factory(25, "Fine.")))
        long = render(recording_builder, model_factory(items=item_factory(25, LONG_DESCRIPTION)))

        assert long.page_count > short.page_count

        for backend in (short, long):
            for ordinal in range(1, 26):
                label_page = page_of(backend, f"Item {ordinal}")
                image_pages = [
                    page.index for page in backend.pages
                    if f"item {ordinal} photo" in [r.label for r in page.images()]
                ]
                assert image_pages == [label_page]

    def test_items_keep_order(self, recording_builder, model_factory, item_factory):
        backend = render(recording_builder, model_factory(items=item_factory(6)))
        labels = [t for page in backend.pages for t in page.texts() if t.startswith("Item ")]
        assert labels == [f"Item {i}" for i in range(1, 7)]


class TestBuild:
    """Tests for finished artifacts."""

    def test_pdf_bytes(self, pdf_builder, sample_model):
        pdf = pdf_builder.build(sample_model, generated_at=FIXED_TIME)
        assert pdf.startswith(b"%PDF")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_identical_input_gives_identical_pdf(self, pdf_builder, sample_model):
        first = pdf_builder.build(sample_model, generated_at=FIXED_TIME)
        second = pdf_builder.build(sample_model, generated_at=FIXED_TIME)
        assert first == second

    def test_identical_input_gives_identical_recording(self, recording_builder, sample_model):
        first = recording_builder.build(sample_model, generated_at=FIXED_TIME)
        second = recording_builder.build(sample_model, generated_at=FIXED_TIME)
        assert first == second
        assert json.loads(first)["title"] == sample_model.title

    def test_layout_report_returns_stamped_pages(self, sample_model):
        backend = layout_report(sample_model, generated_at=FIXED_TIME)
        assert backend.page_count >= 3
        assert "generated 2024-05-01 09:30" in backend.pages[0].texts()


class FailingBackend(RecordingBackend):
    def draw_line(self, x1, y1, x2, y2, gray=0.0):
        raise RenderingError("line drawing refused")


class TestFailures:
    """Tests for fatal failure handling."""

    def test_backend_failure_is_wrapped(self, layout, measurer, decoder, sample_model):
        builder = DocumentBuilder(layout, measurer, decoder, backend_factory=FailingBackend)
        with pytest.raises(GenerationError) as exc_info:
            builder.build(sample_model, generated_at=FIXED_TIME)

        assert isinstance(exc_info.value.original_exception, RenderingError)
        assert isinstance(exc_info.value.__cause__, RenderingError)
        assert exc_info.value.request_id

    def test_no_file_written_on_failure(self, monkeypatch, temp_dir, sample_model):
        def refuse(self, *args, **kwargs):
            raise RenderingError("line drawing refused")

        monkeypatch.setattr(ReportLabBackend, "draw_line", refuse)
        output = temp_dir / "report.pdf"

        with pytest.raises(GenerationError):
            generate_report(sample_model, output_path=output, generated_at=FIXED_TIME)
        assert not output.exists()

    def test_generate_report_writes_file(self, temp_dir, sample_model):
        output = temp_dir / "nested" / "report.pdf"
        path = generate_report(sample_model, output_path=output, generated_at=FIXED_TIME)
        assert path == output
        assert output.read_bytes().startswith(b"%PDF")

    def test_oversized_image_does_not_abort(self, monkeypatch, pdf_builder, recording_builder, model_factory, png_factory):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        items = [InspectionItem(ordinal=1, image=ImageRef(data=png_factory(100, 100), label="item 1 photo"))]
        model = model_factory(items=items)

        assert pdf_builder.build(model, generated_at=FIXED_TIME).startswith(b"%PDF")
        backend = render(recording_builder, model)
        assert IMAGE_FAILED in backend.pages[page_of(backend, "Item 1")].texts()


class TestPageBounds:
    """Everything but the footer stays between the top margin and the bottom limit."""

    @pytest.mark.parametrize("description", [
        "Fine.",
        LONG_DESCRIPTION,
        "Water staining on the ceiling above the bath, edges soft to the touch. " * 50,
    ])
    def test_draws_stay_inside_margins(self, recording_builder, layout, model_factory, item_factory, description):
        observations = "\n".join(f"Observation {i}: meter read and noted." for i in range(120))
        backend = render(recording_builder, model_factory(items=item_factory(12, description), observations=observations))
        footer_y = layout.page_height - layout.footer_offset

        for page in backend.pages:
            for command in page.commands:
                if isinstance(command, TextRun):
                    if command.y == footer_y:
                        continue
                    top, bottom = command.y, command.y
                elif isinstance(command, ImageRegion):
                    top, bottom = command.y, command.y + command.height
                else:
                    top, bottom = command.y1, command.y1
                assert top >= layout.margin_top, (page.index, command)
                assert bottom <= layout.bottom_limit + 1e-6, (page.index, command)
