"""
Pydantic schemas for the inspection report engine.
"""

from inspection_report.schemas.models import (
    ImageRef,
    DetailField,
    InspectionItem,
    SignatureSlot,
    ReportModel,
    Geolocation,
    PropertyPhoto,
    InspectionData,
)

__all__ = [
    "ImageRef",
    "DetailField",
    "InspectionItem",
    "SignatureSlot",
    "ReportModel",
    "Geolocation",
    "PropertyPhoto",
    "InspectionData",
]
