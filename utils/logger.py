"""
Logging for the report engine: colorlog console output, optional JSON-line
file output, and rich panels for the command line.

Every record carries the id of the generation it belongs to and the page the
layout cursor is on, so one report's page breaks and image failures can be
followed in a shared log.
"""

import logging
import re
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator, Optional

import colorlog
from rich.console import Console
from rich.panel import Panel

console = Console()

NO_GENERATION = "--------"

_generation_id: ContextVar[str] = ContextVar("generation_id", default=NO_GENERATION)
_page_number: ContextVar[Optional[int]] = ContextVar("page_number", default=None)


# ============================================================================
# GENERATION CONTEXT
# ============================================================================

def new_generation_id() -> str:
    return str(uuid.uuid4())[:8]


def current_generation_id() -> str:
    return _generation_id.get()


@contextmanager
def generation_context(generation_id: Optional[str] = None) -> Iterator[str]:
    """
    Tag log records emitted inside the block with one generation id.

    The previous id and page are restored on exit, so nested or concurrent
    generations (threads, asyncio tasks) keep their own values.
    """
    gen_token = _generation_id.set(generation_id or new_generation_id())
    page_token = _page_number.set(1)
    try:
        yield _generation_id.get()
    finally:
        _page_number.reset(page_token)
        _generation_id.reset(gen_token)


def set_log_page(page_number: int):
    """Record the 1-based page the layout cursor is writing to (inside a generation only)."""
    if _generation_id.get() != NO_GENERATION:
        _page_number.set(page_number)


# ============================================================================
# FILTERS
# ============================================================================

class SensitiveDataFilter(logging.Filter):
    """Mask Hugging Face tokens and keep embedded image payloads out of logs."""

    PATTERNS = [
        (re.compile(r"hf_[A-Za-z0-9]{8,}"), "hf_***MASKED***"),
        (re.compile(r"(HUGGINGFACE_API_KEY\s*[=:]\s*)\S+", re.IGNORECASE), r"\1***MASKED***"),
        (re.compile(r"(Bearer\s+)[A-Za-z0-9._-]+"), r"\1***MASKED***"),
        (re.compile(r"(data:[\w/+.-]+;base64,)[A-Za-z0-9+/=]{16,}"), r"\1<elided>"),
    ]

    def filter(self, record):
        if record.msg:
            msg = record.getMessage()
            for pattern, replacement in self.PATTERNS:
                msg = pattern.sub(replacement, msg)
            record.msg = msg
            record.args = None
        return True


class GenerationContextFilter(logging.Filter):
    """Attach generation id, page and component to each record."""

    def __init__(self, component: str):
        super().__init__()
        self.component = component

    def filter(self, record):
        record.generation_id = _generation_id.get()
        page = _page_number.get()
        record.page = f"p{page}" if page is not None else "--"
        record.component = self.component
        return True


# ============================================================================
# LOGGER SETUP
# ============================================================================

CONSOLE_FORMAT = (
    "%(log_color)s%(asctime)s %(levelname)-8s "
    "%(white)s[%(generation_id)s %(page)s] "
    "%(cyan)s%(component)s: "
    "%(message_log_color)s%(message)s"
)

FILE_FORMAT = (
    '{"ts":"%(asctime)s","level":"%(levelname)s",'
    '"generation":"%(generation_id)s","page":"%(page)s",'
    '"component":"%(component)s","message":"%(message)s"}'
)


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[Path] = None,
    component: str = None
) -> logging.Logger:
    """
    Configure a named logger with a colored console handler.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional JSON-lines log file
        component: Tag shown on every line; defaults to the last name part

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()
    logger.propagate = False

    context_filter = GenerationContextFilter(component or name.split(".")[-1].upper())
    masking_filter = SensitiveDataFilter()

    console_handler = colorlog.StreamHandler(sys.stdout)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt=CONSOLE_FORMAT,
        datefmt="%H:%M:%S",
        log_colors={
            "DEBUG": "blue",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={"message": {"WARNING": "yellow", "ERROR": "red", "CRITICAL": "red"}},
    ))
    console_handler.addFilter(context_filter)
    console_handler.addFilter(masking_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        file_handler.addFilter(context_filter)
        file_handler.addFilter(masking_filter)
        logger.addHandler(file_handler)

    return logger


# ============================================================================
# CONSOLE PANELS
# ============================================================================

def print_summary_panel(title: str, content: dict, style: str = "green"):
    """Print key/value pairs in a bordered panel."""
    text = "\n".join(f"[bold]{k}:[/bold] {v}" for k, v in content.items())
    console.print(Panel(text, title=title, border_style=style, expand=False))


def print_error(error_type: str, message: str, details: Optional[str] = None):
    content = f"[bold red]{error_type}[/bold red]\n\n{message}"
    if details:
        content += f"\n\n[dim]{details}[/dim]"
    console.print(Panel(content, title="Error", border_style="red", expand=False))
