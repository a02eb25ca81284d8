from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Protocol, Tuple, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .wrap import wrap_text

Pathish = Union[str, Path]

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


class DrawingSurface(Protocol):
    """Operations the paginator needs; units are mm, y measured from the top."""

    def set_font_size(self, size: float) -> None: ...

    def set_bold(self, bold: bool) -> None: ...

    def set_text_color(self, r: int, g: int, b: int) -> None: ...

    def reset_text_color(self) -> None: ...

    def text(self, x: float, y: float, s: str) -> None: ...

    def split_text(self, s: str, max_width: float) -> List[str]: ...

    def add_page(self) -> None: ...

    def save(self, path: Pathish) -> None: ...


def _measure_mm(s: str, font: str, size: float) -> float:
    return stringWidth(s, font, size) / mm


class ReportLabSurface:
    """
    Draws onto a reportlab canvas held in memory.

    The PDF is written only by save(); nothing touches the filesystem before.
    """

    def __init__(self, *, pagesize: Tuple[float, float] = A4) -> None:
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize)
        self._page_height = pagesize[1]
        self._size: float = 12
        self._bold = False
        self._rgb: Tuple[int, int, int] = (0, 0, 0)
        self._saved = False
        self._apply_state()

    @property
    def font_name(self) -> str:
        return BOLD_FONT if self._bold else REGULAR_FONT

    def set_font_size(self, size: float) -> None:
        self._size = size
        self._apply_state()

    def set_bold(self, bold: bool) -> None:
        self._bold = bold
        self._apply_state()

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self._rgb = (r, g, b)
        self._apply_state()

    def reset_text_color(self) -> None:
        self.set_text_color(0, 0, 0)

    def text(self, x: float, y: float, s: str) -> None:
        self._canvas.drawString(x * mm, self._page_height - y * mm, s)

    def split_text(self, s: str, max_width: float) -> List[str]:
        font, size = self.font_name, self._size
        return wrap_text(s, max_width, lambda t: _measure_mm(t, font, size))

    def add_page(self) -> None:
        self._canvas.showPage()
        # showPage() resets the graphics state
        self._apply_state()

    def pdf_bytes(self) -> bytes:
        if not self._saved:
            self._canvas.save()
            self._saved = True
        return self._buffer.getvalue()

    def save(self, path: Pathish) -> None:
        Path(path).write_bytes(self.pdf_bytes())

    def _apply_state(self) -> None:
        self._canvas.setFont(self.font_name, self._size)
        r, g, b = self._rgb
        self._canvas.setFillColorRGB(r / 255.0, g / 255.0, b / 255.0)


@dataclass(frozen=True)
class DrawOp:
    kind: str
    args: Tuple[Any, ...] = ()

    def as_json(self) -> dict:
        return {"op": self.kind, "args": list(self.args)}


class RecordingSurface:
    """Keeps every drawing call as a DrawOp; measures with Helvetica metrics."""

    def __init__(self) -> None:
        self.ops: List[DrawOp] = []
        self._size: float = 12
        self._bold = False

    def set_font_size(self, size: float) -> None:
        self._size = size
        self.ops.append(DrawOp("font_size", (size,)))

    def set_bold(self, bold: bool) -> None:
        self._bold = bold
        self.ops.append(DrawOp("bold", (bold,)))

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self.ops.append(DrawOp("color", (r, g, b)))

    def reset_text_color(self) -> None:
        self.ops.append(DrawOp("color_reset"))

    def text(self, x: float, y: float, s: str) -> None:
        self.ops.append(DrawOp("text", (x, y, s)))

    def split_text(self, s: str, max_width: float) -> List[str]:
        font = BOLD_FONT if self._bold else REGULAR_FONT
        size = self._size
        return wrap_text(s, max_width, lambda t: _measure_mm(t, font, size))

    def add_page(self) -> None:
        self.ops.append(DrawOp("page"))

    def save(self, path: Pathish) -> None:
        self.ops.append(DrawOp("save", (str(path),)))

    # ---- inspection ----

    def pages(self) -> List[List[str]]:
        """Text written on each page, in drawing order."""
        out: List[List[str]] = [[]]
        for op in self.ops:
            if op.kind == "page":
                out.append([])
            elif op.kind == "text":
                out[-1].append(op.args[2])
        return out

    def lines(self) -> List[str]:
        return [s for page in self.pages() for s in page]
