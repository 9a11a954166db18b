"""
Pydantic schemas for data validation.
"""

import base64
import binascii
import re
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inspection_report.exceptions import ValidationError
from utils.config import config
from utils.logger import setup_logger
from utils.validators import validate_inspection_type

logger = setup_logger(__name__, level=config.log_level, component="SCHEMAS")


DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?P<params>(;[\w-]+=[\w-]+)*)(?P<b64>;base64)?,(?P<payload>.*)$", re.DOTALL)

INSPECTION_TYPE_TITLES = {
    "initial": "Initial",
    "final": "Final",
}

SIGNATURE_ROLES = [
    ("inspector", "Inspector"),
    ("landlord", "Landlord"),
    ("tenant", "Tenant"),
]

GEOLOCATION_UNAVAILABLE = "not available"


class ImageRef(BaseModel):
    """Raster image bytes plus their intrinsic pixel size when already known."""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False, description="Encoded raster image bytes")
    width: Optional[int] = Field(None, gt=0, description="Intrinsic width in pixels")
    height: Optional[int] = Field(None, gt=0, description="Intrinsic height in pixels")
    label: str = Field(default="image", description="Name used in log messages")

    @model_validator(mode="after")
    def validate_size_pair(self):
        """Width and height are supplied together or not at all."""
        if (self.width is None) != (self.height is None):
            raise ValueError("ImageRef width and height must be given together")
        return self

    @property
    def has_size(self) -> bool:
        return self.width is not None

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Width over height, or None when the size is still unresolved."""
        if not self.has_size:
            return None
        return self.width / self.height

    @classmethod
    def from_data_url(cls, data_url: str, label: str = "image") -> "ImageRef":
        """
        Build an ImageRef from a base64 data URL.

        Raises:
            ValidationError: If the string is not a base64 data URL
        """
        match = DATA_URL_PATTERN.match(data_url.strip())
        if not match or not match.group("b64"):
            raise ValidationError(f"{label} is not a base64 data URL")
        try:
            data = base64.b64decode(match.group("payload"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"{label} has an invalid base64 payload: {e}")
        return cls(data=data, label=label)


class DetailField(BaseModel):
    """One label/value row of inspection metadata."""
    model_config = ConfigDict(frozen=True)

    label: str
    value: Optional[str] = None


class InspectionItem(BaseModel):
    """A photographed item with its description."""
    model_config = ConfigDict(frozen=True)

    ordinal: int = Field(..., ge=1)
    image: ImageRef
    description: str = ""


class SignatureSlot(BaseModel):
    """One of the three signature columns."""
    model_config = ConfigDict(frozen=True)

    role: str = Field(..., description="Stable role key (inspector, landlord, tenant)")
    signer_name: str = ""
    role_title: str
    image: Optional[ImageRef] = None


class ReportModel(BaseModel):
    """Normalized, immutable input of one report generation."""
    model_config = ConfigDict(frozen=True)

    title: str
    details: Tuple[DetailField, ...] = ()
    observations: Optional[str] = None
    summary: str = ""
    items: Tuple[InspectionItem, ...] = ()
    signatures: Tuple[SignatureSlot, ...]

    @field_validator("signatures")
    @classmethod
    def validate_three_signatures(cls, v: Tuple[SignatureSlot, ...]) -> Tuple[SignatureSlot, ...]:
        if len(v) != 3:
            raise ValueError(f"Exactly three signature slots are required, got {len(v)}")
        return v

    @classmethod
    def from_inspection(cls, data: "InspectionData", summary: str = "") -> "ReportModel":
        """
        Normalize a raw inspection capture into a ReportModel.

        Photos whose data URL cannot be parsed keep their slot with empty
        image bytes, so the layout engine renders its load-failure line.
        """
        type_title = INSPECTION_TYPE_TITLES[data.inspection_type]

        if data.geolocation:
            geolocation = f"{data.geolocation.latitude:.5f}, {data.geolocation.longitude:.5f}"
        else:
            geolocation = GEOLOCATION_UNAVAILABLE

        details = [
            DetailField(label="Inspector", value=data.inspector_name),
            DetailField(label="Landlord", value=data.landlord_name),
            DetailField(label="Tenant", value=data.tenant_name),
            DetailField(label="Address", value=data.property_address),
            DetailField(label="Date", value=data.inspection_date),
            DetailField(label="Geolocation", value=geolocation),
        ]

        items = []
        for ordinal, photo in enumerate(data.photos, 1):
            items.append(InspectionItem(
                ordinal=ordinal,
                image=_image_or_placeholder(photo.image_data_url, f"item {ordinal} photo"),
                description=photo.description,
            ))

        names = {
            "inspector": data.inspector_name,
            "landlord": data.landlord_name,
            "tenant": data.tenant_name,
        }
        urls = {
            "inspector": data.inspector_signature_url,
            "landlord": data.landlord_signature_url,
            "tenant": data.tenant_signature_url,
        }
        signatures = []
        for role, role_title in SIGNATURE_ROLES:
            url = urls[role]
            signatures.append(SignatureSlot(
                role=role,
                signer_name=names[role],
                role_title=role_title,
                image=_image_or_placeholder(url, f"{role} signature") if url else None,
            ))

        return cls(
            title=f"Property Inspection Report ({type_title})",
            details=details,
            observations=data.observations or None,
            summary=summary,
            items=items,
            signatures=signatures,
        )


def _image_or_placeholder(data_url: str, label: str) -> ImageRef:
    try:
        return ImageRef.from_data_url(data_url, label=label)
    except ValidationError as e:
        logger.warning(f"{e}; keeping an empty image so the slot still renders")
        return ImageRef(data=b"", label=label)


# ============================================================================
# RAW CAPTURE RECORD
# ============================================================================

class Geolocation(BaseModel):
    """Coordinates captured at inspection time."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PropertyPhoto(BaseModel):
    """A captured photo with its dictated or typed description."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    image_data_url: str = Field(..., alias="imageDataUrl")
    description: str = ""


class InspectionData(BaseModel):
    """
    Raw inspection record as captured by the field application.

    Accepts both snake_case names and the camelCase keys the capture
    application stores.
    """
    model_config = ConfigDict(populate_by_name=True)

    inspector_name: str = Field(..., alias="inspectorName")
    landlord_name: str = Field("", alias="landlordName")
    tenant_name: str = Field("", alias="tenantName")
    property_address: str = Field("", alias="propertyAddress")
    inspection_type: Literal["initial", "final"] = Field(..., alias="inspectionType")
    inspection_date: str = Field("", alias="inspectionDate")
    geolocation: Optional[Geolocation] = None
    photos: List[PropertyPhoto] = Field(default_factory=list)
    observations: Optional[str] = None
    inspector_signature_url: Optional[str] = Field(None, alias="inspectorSignatureUrl")
    landlord_signature_url: Optional[str] = Field(None, alias="landlordSignatureUrl")
    tenant_signature_url: Optional[str] = Field(None, alias="tenantSignatureUrl")

    @field_validator("inspection_type", mode="before")
    @classmethod
    def normalize_inspection_type(cls, v):
        """Normalize inspection type to lowercase and reject unknown types."""
        if not isinstance(v, str):
            return v
        valid, error, normalized = validate_inspection_type(v)
        if not valid:
            raise ValueError(error)
        return normalized

    @property
    def descriptions(self) -> List[str]:
        """Photo descriptions in capture order."""
        return [photo.description for photo in self.photos]
