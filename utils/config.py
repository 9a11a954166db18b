"""
Unified configuration management with Pydantic validation.
Loads and validates all environment variables.
"""

from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field, field_validator, ValidationError
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Application configuration with validation."""

    # ========================
    # Page Geometry
    # ========================
    page_size: str = Field(default="A4", alias="PAGE_SIZE")
    page_margin: float = Field(default=40.0, alias="PAGE_MARGIN")

    # ========================
    # Typography
    # ========================
    font_regular: str = Field(default="Helvetica", alias="FONT_REGULAR")
    font_bold: str = Field(default="Helvetica-Bold", alias="FONT_BOLD")
    font_regular_path: Optional[str] = Field(default=None, alias="FONT_REGULAR_PATH")
    font_bold_path: Optional[str] = Field(default=None, alias="FONT_BOLD_PATH")
    body_font_size: float = Field(default=10.0, alias="BODY_FONT_SIZE")
    line_height_factor: float = Field(default=1.2, alias="LINE_HEIGHT_FACTOR")

    # ========================
    # Layout Blocks
    # ========================
    section_title_height: float = Field(default=30.0, alias="SECTION_TITLE_HEIGHT")
    label_column_width: float = Field(default=80.0, alias="LABEL_COLUMN_WIDTH")
    detail_row_gap: float = Field(default=5.0, alias="DETAIL_ROW_GAP")
    item_image_height: float = Field(default=200.0, alias="ITEM_IMAGE_HEIGHT")
    item_margin: float = Field(default=50.0, alias="ITEM_MARGIN")
    signature_box_height: float = Field(default=50.0, alias="SIGNATURE_BOX_HEIGHT")

    # ========================
    # Summary Generation
    # ========================
    huggingface_api_key: Optional[str] = Field(default=None, alias="HUGGINGFACE_API_KEY")
    summary_model: str = Field(
        default="meta-llama/Llama-3.1-8B-Instruct",
        alias="SUMMARY_MODEL"
    )
    summary_temperature: float = Field(default=0.3, alias="SUMMARY_TEMPERATURE")
    summary_max_tokens: int = Field(default=1024, alias="SUMMARY_MAX_TOKENS")
    api_timeout: int = Field(default=60, alias="API_TIMEOUT")

    # ========================
    # File Storage Configuration
    # ========================
    report_dir: str = Field(default="reports", alias="REPORT_DIR")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    # ========================
    # Logging Configuration
    # ========================
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    # ========================
    # Validators
    # ========================

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: str) -> str:
        """Validate page size name."""
        valid_sizes = ["A4", "LETTER"]
        if v.upper() not in valid_sizes:
            raise ValueError(f"PAGE_SIZE must be one of {valid_sizes}")
        return v.upper()

    @field_validator(
        "page_margin",
        "body_font_size",
        "line_height_factor",
        "section_title_height",
        "item_image_height",
        "signature_box_height",
    )
    @classmethod
    def validate_positive(cls, v: float, info) -> float:
        """Validate strictly positive layout values."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("label_column_width", "detail_row_gap", "item_margin")
    @classmethod
    def validate_non_negative(cls, v: float, info) -> float:
        """Validate non-negative spacing values."""
        if v < 0:
            raise ValueError(f"{info.field_name} must not be negative")
        return v

    @field_validator("summary_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Validate sampling temperature."""
        if not 0 <= v <= 2:
            raise ValueError("SUMMARY_TEMPERATURE must be between 0 and 2")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # ========================
    # Helper Properties
    # ========================

    @property
    def summary_enabled(self) -> bool:
        """Check if hosted summary generation can be used."""
        return bool(self.huggingface_api_key)

    def get_report_dir(self) -> Path:
        """Get report directory as Path object."""
        path = Path(self.report_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_log_dir(self) -> Path:
        """Get log directory as Path object."""
        path = Path(self.log_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def get_config() -> Config:
    """
    Load and validate configuration.
    Exits if configuration is invalid.
    """
    try:
        return Config()

    except ValidationError as e:
        print("\n❌ Configuration Error:")
        print("=" * 60)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"\n Field: {field}")
            print(f"  Error: {error['msg']}")
            if "input" in error:
                print(f"  Value: {error['input']}")
        print("\n" + "=" * 60)
        print("\nPlease check your .env file and fix the errors above.")
        print("See .env.example for reference.\n")
        raise SystemExit(1)


# Global configuration instance
config = get_config()


# Export commonly used paths (created on first write, not at import)
REPORT_DIR = Path(config.report_dir)
LOG_DIR = Path(config.log_dir)
