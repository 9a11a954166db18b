"""
Command line entry point: render an inspection record (JSON) to a PDF report.
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from inspection_report.agents.summarizer import SummaryGenerator
from inspection_report.exceptions import GenerationError
from inspection_report.reporting.pdf_generator import generate_report
from inspection_report.schemas.models import InspectionData, ReportModel
from utils.config import config
from utils.logger import print_error, print_summary_panel, setup_logger
from utils.validators import validate_input_path, validate_output_path, validate_timestamp

logger = setup_logger(
    __name__,
    level=config.log_level,
    log_file=config.get_log_dir() / "inspection_report.log" if config.log_to_file else None,
    component="CLI"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inspection-report",
        description="Render a property inspection record to a paginated PDF report.",
    )
    parser.add_argument("input", help="Inspection record (.json)")
    parser.add_argument("-o", "--output", help="Output PDF path (default: report directory)")

    summary = parser.add_mutually_exclusive_group()
    summary.add_argument("--summary", help="Property condition summary text")
    summary.add_argument(
        "--generate-summary",
        action="store_true",
        help="Generate the summary from item descriptions with the hosted model",
    )

    parser.add_argument(
        "--timestamp",
        help="ISO 8601 generation time printed in the footer (fixes the output)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    valid, error, input_path = validate_input_path(args.input)
    if not valid:
        print_error("Invalid input", error)
        return 2

    valid, error, output_path = validate_output_path(args.output)
    if not valid:
        print_error("Invalid output", error)
        return 2

    valid, error, generated_at = validate_timestamp(args.timestamp)
    if not valid:
        print_error("Invalid timestamp", error)
        return 2

    try:
        raw = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print_error("Unreadable inspection record", f"{input_path} could not be read", str(e))
        return 2

    try:
        data = InspectionData.model_validate_json(raw)
    except PydanticValidationError as e:
        print_error("Invalid inspection record", f"{input_path} failed validation", str(e))
        return 2

    if args.generate_summary:
        summary = SummaryGenerator().generate(data.descriptions)
    else:
        summary = args.summary or ""

    model = ReportModel.from_inspection(data, summary=summary)

    try:
        path = generate_report(model, output_path=output_path, generated_at=generated_at)
    except GenerationError as e:
        logger.error(f"Generation {e.request_id} failed")
        print_error(
            "Report generation failed",
            str(e.original_exception),
            f"request id: {e.request_id}",
        )
        return 1

    print_summary_panel(
        "Report generated",
        {
            "Title": model.title,
            "Items": len(model.items),
            "Output": path,
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
