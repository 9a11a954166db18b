"""
Utility modules for the inspection report engine.
"""

from utils.config import config, REPORT_DIR, LOG_DIR
from utils.logger import setup_logger
from utils.prompts import (
    SUMMARY_PROMPT,
    format_descriptions,
    get_prompt
)
from utils.image_utils import (
    ImageDecoder,
    fit_within,
    load_image,
    scale_to_height
)
from utils.validators import (
    validate_input_path,
    validate_inspection_type,
    validate_output_path,
    validate_timestamp
)

__all__ = [
    "config",
    "REPORT_DIR",
    "LOG_DIR",
    "setup_logger",
    "SUMMARY_PROMPT",
    "format_descriptions",
    "get_prompt",
    "ImageDecoder",
    "fit_within",
    "load_image",
    "scale_to_height",
    "validate_input_path",
    "validate_inspection_type",
    "validate_output_path",
    "validate_timestamp",
]
