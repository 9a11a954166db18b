"""
Shared fixtures for the report engine tests.
"""

import base64
import io
import shutil
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from inspection_report.reporting.backends import RecordingBackend
from inspection_report.reporting.layout import LayoutSettings, TextMeasurer
from inspection_report.reporting.pdf_generator import DocumentBuilder
from inspection_report.schemas.models import (
    ImageRef,
    InspectionData,
    InspectionItem,
    ReportModel,
    SignatureSlot,
)
from utils.image_utils import ImageDecoder


def make_png(width: int = 40, height: int = 20, color=(180, 180, 180)) -> bytes:
    """Encode a solid-color PNG of the given size."""
    img = Image.new("RGB", (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def data_url(data: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(data).decode("ascii")


def make_items(count: int, description: str = "Walls freshly painted.") -> list:
    png = make_png(400, 300)
    return [
        InspectionItem(
            ordinal=i,
            image=ImageRef(data=png, label=f"item {i} photo"),
            description=description,
        )
        for i in range(1, count + 1)
    ]


def unsigned_slots() -> list:
    return [
        SignatureSlot(role="inspector", signer_name="Ana Ruiz", role_title="Inspector"),
        SignatureSlot(role="landlord", signer_name="", role_title="Landlord"),
        SignatureSlot(role="tenant", signer_name="Sam Lee", role_title="Tenant"),
    ]


def make_model(items=None, summary: str = "Overall good condition.", observations=None) -> ReportModel:
    return ReportModel(
        title="Property Inspection Report (Initial)",
        details=[],
        observations=observations,
        summary=summary,
        items=items if items is not None else [],
        signatures=unsigned_slots(),
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def png_factory():
    """Factory for solid-color PNG bytes."""
    return make_png


@pytest.fixture
def layout():
    """Default A4 layout."""
    return LayoutSettings()


@pytest.fixture
def measurer(layout):
    return TextMeasurer.from_layout(layout)


@pytest.fixture
def decoder():
    return ImageDecoder()


@pytest.fixture
def backend(layout):
    """Fresh recording backend."""
    return RecordingBackend(layout, title="test")


@pytest.fixture
def recording_builder(layout, measurer, decoder):
    """Document builder that records pages instead of writing a PDF."""
    return DocumentBuilder(layout, measurer, decoder, backend_factory=RecordingBackend)


@pytest.fixture
def pdf_builder(layout, measurer, decoder):
    """Document builder with the reportlab backend."""
    return DocumentBuilder(layout, measurer, decoder)


@pytest.fixture
def inspection_payload():
    """Raw inspection record as stored by the capture application."""
    return {
        "inspectorName": "Ana Ruiz",
        "landlordName": "Bo Chen",
        "tenantName": "",
        "propertyAddress": "12 Harbour Street, Flat 3",
        "inspectionType": "Initial",
        "inspectionDate": "2024-05-01",
        "geolocation": {"latitude": 51.5074, "longitude": -0.1278},
        "photos": [
            {"id": "p1", "imageDataUrl": data_url(make_png(400, 300)), "description": "Kitchen counter scratched."},
            {"id": "p2", "imageDataUrl": data_url(make_png(300, 400)), "description": "Bathroom tiles intact."},
        ],
        "observations": "Keys handed over at 10:00.",
        "inspectorSignatureUrl": data_url(make_png(200, 80, (0, 0, 0))),
        "landlordSignatureUrl": None,
        "tenantSignatureUrl": None,
    }


@pytest.fixture
def inspection_data(inspection_payload):
    return InspectionData.model_validate(inspection_payload)


@pytest.fixture
def sample_model(inspection_data):
    return ReportModel.from_inspection(inspection_data, summary="Overall good condition.")


@pytest.fixture
def item_factory():
    """Factory for numbered items sharing one 400x300 photo."""
    return make_items


@pytest.fixture
def model_factory():
    """Factory for report models with three unsigned slots."""
    return make_model


@pytest.fixture
def slots():
    return unsigned_slots()
