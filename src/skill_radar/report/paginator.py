from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from skill_radar.core import RadarPoint, SkillRecord
from skill_radar.validation import format_score

from .layout import PageLayout
from .surface import DrawingSurface

NOT_AVAILABLE = "N/A"
FLAG_WARNING = "AI/Plagiarism Suspected"

Logger = Callable[[str], None]


class ReportError(RuntimeError):
    """Raised when the drawing surface fails during report generation."""


@dataclass(frozen=True)
class SectionPlacement:
    name: str
    page_index: int
    top_y: float
    bottom_y: float


@dataclass(frozen=True)
class ReportSummary:
    page_count: int
    sections: Tuple[SectionPlacement, ...]


def format_attempts(
    timestamps: Sequence[datetime],
    *,
    fmt: str = "%Y-%m-%d %H:%M",
    separator: str = " -> ",
) -> str:
    if not timestamps:
        return NOT_AVAILABLE
    return separator.join(ts.strftime(fmt) for ts in timestamps)


def format_iteration_depth(depth: Optional[int]) -> str:
    return NOT_AVAILABLE if depth is None else str(depth)


class ReportPaginator:
    """
    Lays out the skill report onto a DrawingSurface, page by page.

    Document order:
      1. title heading and one "<name>: <score>/10" line per radar point
         (no page-fit check; the score block is assumed to fit on page 0)
      2. one detail section per record, in snapshot order
    Page breaks only happen between sections: after a section ends past
    ``layout.page_break_y`` a new page is started, unless it was the last one.
    """

    def __init__(self, layout: Optional[PageLayout] = None, *, logger: Optional[Logger] = None) -> None:
        self.layout = layout or PageLayout()
        self.logger = logger
        self.cursor_y: float = self.layout.top_margin
        self.page_index: int = 0

    def render(
        self,
        records: Sequence[SkillRecord],
        radar: Sequence[RadarPoint],
        surface: DrawingSurface,
    ) -> ReportSummary:
        self.cursor_y = self.layout.top_margin
        self.page_index = 0

        try:
            self._title_block(radar, surface)
            sections = self._detail_sections(records, surface)
        except ReportError:
            raise
        except Exception as e:
            raise ReportError(f"report generation failed on page {self.page_index + 1}: {e}") from e

        return ReportSummary(page_count=self.page_index + 1, sections=tuple(sections))

    def export(
        self,
        records: Sequence[SkillRecord],
        radar: Sequence[RadarPoint],
        surface: DrawingSurface,
        path: Union[str, Path],
    ) -> ReportSummary:
        summary = self.render(records, radar, surface)
        try:
            surface.save(path)
        except Exception as e:
            raise ReportError(f"could not save report to {path}: {e}") from e
        self._log(f"saved {summary.page_count} page(s) to {path}")
        return summary

    # ---- layout steps ----

    def _title_block(self, radar: Sequence[RadarPoint], surface: DrawingSurface) -> None:
        lay = self.layout
        surface.set_font_size(lay.title_font_size)
        surface.text(lay.title_x, lay.title_y, lay.title)
        surface.set_font_size(lay.body_font_size)

        if not radar:
            self.cursor_y = lay.title_y
            return

        self.cursor_y = lay.scores_start_y
        for point in radar:
            surface.text(lay.title_x, self.cursor_y, f"{point.name}: {format_score(point.score)}/10")
            self.cursor_y += lay.score_line_height
        self.cursor_y += lay.after_scores_gap

    def _detail_sections(self, records: Sequence[SkillRecord], surface: DrawingSurface) -> List[SectionPlacement]:
        placements: List[SectionPlacement] = []
        last = len(records) - 1

        for idx, record in enumerate(records):
            top = self.cursor_y
            self._section(record, surface)
            placements.append(
                SectionPlacement(name=record.name, page_index=self.page_index, top_y=top, bottom_y=self.cursor_y)
            )
            self._log(f"section '{record.name}' on page {self.page_index + 1}")

            if self.cursor_y > self.layout.page_break_y and idx < last:
                self._new_page(surface)

        return placements

    def _section(self, record: SkillRecord, surface: DrawingSurface) -> None:
        lay = self.layout

        surface.set_bold(True)
        surface.text(lay.header_x, self.cursor_y, f"{record.name} Details")
        surface.set_bold(False)
        self.cursor_y += lay.header_line_height

        attempts = format_attempts(
            record.attempt_timestamps,
            fmt=lay.timestamp_format,
            separator=lay.attempt_separator,
        )
        self._wrapped(surface, f"Attempts: {attempts}", lay.body_x, lay.body_line_height)

        surface.text(lay.body_x, self.cursor_y, f"Iteration Depth: {format_iteration_depth(record.iteration_depth)}")
        self.cursor_y += lay.body_line_height

        if record.is_flagged:
            surface.set_text_color(*lay.warning_color)
            surface.text(lay.body_x, self.cursor_y, FLAG_WARNING)
            surface.reset_text_color()
            self.cursor_y += lay.body_line_height

        surface.text(lay.body_x, self.cursor_y, "Code Snippets:")
        self.cursor_y += lay.body_line_height

        if record.code_snippets:
            for snippet in record.code_snippets:
                self._wrapped(surface, snippet, lay.snippet_x, lay.snippet_line_height)
        else:
            surface.text(lay.snippet_x, self.cursor_y, NOT_AVAILABLE)
            self.cursor_y += lay.empty_snippet_line_height

        self.cursor_y += lay.section_gap

    def _wrapped(self, surface: DrawingSurface, text: str, x: float, line_height: float) -> None:
        try:
            lines = surface.split_text(text, self.layout.wrap_width)
        except Exception as e:
            raise ReportError(f"text measurement failed: {e}") from e

        for line in lines:
            surface.text(x, self.cursor_y, line)
            self.cursor_y += line_height

    def _new_page(self, surface: DrawingSurface) -> None:
        surface.add_page()
        self.page_index += 1
        self.cursor_y = self.layout.top_margin
        self._log(f"page break -> page {self.page_index + 1}")

    def _log(self, msg: str) -> None:
        if self.logger:
            self.logger(msg)
