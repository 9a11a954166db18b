"""
Rendering backends.

Renderers issue draw calls in top-down page coordinates. A backend places
text runs, image regions and lines on the active page, starts new pages, and
lets the page-numbering pass seek back over every created page once.

- ReportLabBackend: draws onto a reportlab canvas and produces PDF bytes.
- RecordingBackend: keeps every page as a list of draw commands, for
  inspection and tests without a PDF parser.
"""

import hashlib
import io
import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Iterator, List, Optional, Union

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from inspection_report.exceptions import RenderingError
from inspection_report.reporting.layout import LayoutSettings
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="BACKEND")


ALIGNMENTS = ("left", "center", "right")


# ============================================================================
# DRAW COMMANDS
# ============================================================================

@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float
    font_name: str
    font_size: float
    align: str = "left"
    kind: str = "text"


@dataclass(frozen=True)
class ImageRegion:
    label: str
    digest: str
    x: float
    y: float
    width: float
    height: float
    kind: str = "image"


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    gray: float
    kind: str = "line"


DrawCommand = Union[TextRun, ImageRegion, Line]


@dataclass
class Page:
    """Append-only sequence of draw commands for one page."""
    index: int
    commands: List[DrawCommand] = field(default_factory=list)

    def texts(self) -> List[str]:
        return [c.text for c in self.commands if isinstance(c, TextRun)]

    def images(self) -> List[ImageRegion]:
        return [c for c in self.commands if isinstance(c, ImageRegion)]

    def lines(self) -> List[Line]:
        return [c for c in self.commands if isinstance(c, Line)]


# ============================================================================
# BACKEND INTERFACE
# ============================================================================

class RenderBackend(ABC):
    """Drawing surface used by the layout engine."""

    def __init__(self, layout: LayoutSettings, title: str = ""):
        self.layout = layout
        self.title = title
        self._pages_committed = False
        self._finished = False

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages created so far (always >= 1)."""

    @abstractmethod
    def draw_text(self, text: str, x: float, y: float, font_name: str, font_size: float, align: str = "left"):
        """Place a text run with its baseline at y."""

    @abstractmethod
    def draw_image(self, image_ref, x: float, y: float, width: float, height: float):
        """Place an image region whose top-left corner is (x, y)."""

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float, gray: float = 0.0):
        """Draw a straight line; gray is 0 (black) to 1 (white)."""

    @abstractmethod
    def new_page(self):
        """Finalize the active page and start a new one."""

    @abstractmethod
    def iter_pages(self) -> Iterator[int]:
        """
        Seek to every created page in order, yielding its 0-based index.

        Draw calls made while a page is yielded land on that page. Can only
        be run once; afterwards no page accepts further content.
        """

    @abstractmethod
    def finish(self) -> bytes:
        """Close the document and return the finished artifact."""

    def _check_open(self):
        if self._finished:
            raise RenderingError("Backend is finished; no further drawing is accepted")

    def _check_align(self, align: str):
        if align not in ALIGNMENTS:
            raise RenderingError(f"Unsupported text alignment '{align}'")

    def _claim_page_pass(self):
        if self._pages_committed:
            raise RenderingError("Pages were already committed; they can only be visited once")
        self._pages_committed = True


# ============================================================================
# RECORDING BACKEND
# ============================================================================

class RecordingBackend(RenderBackend):
    """Backend that records draw commands per page."""

    def __init__(self, layout: LayoutSettings, title: str = ""):
        super().__init__(layout, title)
        self.pages: List[Page] = [Page(index=0)]
        self._active = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def active_page(self) -> Page:
        return self.pages[self._active]

    def draw_text(self, text, x, y, font_name, font_size, align="left"):
        self._check_open()
        self._check_align(align)
        self.active_page.commands.append(TextRun(str(text), x, y, font_name, font_size, align))

    def draw_image(self, image_ref, x, y, width, height):
        self._check_open()
        digest = hashlib.sha256(image_ref.data).hexdigest()[:16]
        self.active_page.commands.append(ImageRegion(image_ref.label, digest, x, y, width, height))

    def draw_line(self, x1, y1, x2, y2, gray=0.0):
        self._check_open()
        self.active_page.commands.append(Line(x1, y1, x2, y2, gray))

    def new_page(self):
        self._check_open()
        if self._pages_committed:
            raise RenderingError("Cannot add pages after they were committed")
        self.pages.append(Page(index=len(self.pages)))
        self._active = len(self.pages) - 1

    def iter_pages(self) -> Iterator[int]:
        self._check_open()
        self._claim_page_pass()
        for page in self.pages:
            self._active = page.index
            yield page.index

    def finish(self) -> bytes:
        """Serialize the recorded pages as canonical JSON."""
        self._check_open()
        self._finished = True
        payload = {
            "title": self.title,
            "page_size": [self.layout.page_width, self.layout.page_height],
            "pages": [
                {"index": page.index, "commands": [asdict(c) for c in page.commands]}
                for page in self.pages
            ],
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


# ============================================================================
# REPORTLAB BACKEND
# ============================================================================

class DeferredPageCanvas(canvas.Canvas):
    """Canvas that holds finished pages back so they can be revisited."""

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    @property
    def saved_page_count(self) -> int:
        return len(self._saved_page_states)

    def replay_pages(self) -> Iterator[int]:
        """Restore each held page in order, then emit it."""
        for index, state in enumerate(list(self._saved_page_states)):
            self.__dict__.update(state)
            yield index
            canvas.Canvas.showPage(self)


class ReportLabBackend(RenderBackend):
    """Backend that draws onto a reportlab canvas and returns PDF bytes."""

    def __init__(self, layout: LayoutSettings, title: str = "", invariant: bool = True):
        super().__init__(layout, title)
        self._buffer = io.BytesIO()
        self._canvas = DeferredPageCanvas(
            self._buffer,
            pagesize=(layout.page_width, layout.page_height),
            invariant=1 if invariant else 0,
        )
        if title:
            self._canvas.setTitle(title)
        self._open_page_pending = True

    @property
    def page_count(self) -> int:
        return self._canvas.saved_page_count + (1 if self._open_page_pending else 0)

    def _to_pdf_y(self, y: float) -> float:
        return self.layout.page_height - y

    def draw_text(self, text, x, y, font_name, font_size, align="left"):
        self._check_open()
        self._check_align(align)
        c = self._canvas
        try:
            c.setFont(font_name, font_size)
            c.setFillColorRGB(0, 0, 0)
            pdf_y = self._to_pdf_y(y)
            if align == "center":
                c.drawCentredString(x, pdf_y, str(text))
            elif align == "right":
                c.drawRightString(x, pdf_y, str(text))
            else:
                c.drawString(x, pdf_y, str(text))
        except Exception as e:
            raise RenderingError(f"Failed to draw text run: {e}") from e

    def draw_image(self, image_ref, x, y, width, height):
        self._check_open()
        try:
            reader = ImageReader(io.BytesIO(image_ref.data))
            self._canvas.drawImage(
                reader,
                x,
                self._to_pdf_y(y) - height,
                width=width,
                height=height,
                mask="auto"
            )
        except Exception as e:
            raise RenderingError(f"Failed to draw {image_ref.label}: {e}") from e

    def draw_line(self, x1, y1, x2, y2, gray=0.0):
        self._check_open()
        c = self._canvas
        try:
            c.saveState()
            c.setStrokeGray(gray)
            c.line(x1, self._to_pdf_y(y1), x2, self._to_pdf_y(y2))
            c.restoreState()
        except Exception as e:
            raise RenderingError(f"Failed to draw line: {e}") from e

    def new_page(self):
        self._check_open()
        if self._pages_committed:
            raise RenderingError("Cannot add pages after they were committed")
        self._canvas.showPage()

    def iter_pages(self) -> Iterator[int]:
        self._check_open()
        self._claim_page_pass()
        # Hold the last open page back too, so every page is revisited
        self._canvas.showPage()
        self._open_page_pending = False
        yield from self._canvas.replay_pages()

    def finish(self) -> bytes:
        self._check_open()
        if not self._pages_committed:
            for _ in self.iter_pages():
                pass
        try:
            canvas.Canvas.save(self._canvas)
        except Exception as e:
            raise RenderingError(f"Failed to write PDF: {e}") from e
        self._finished = True
        logger.debug(f"PDF finished: {len(self._buffer.getvalue())} bytes")
        return self._buffer.getvalue()
