from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class PageLayout:
    """Report geometry in millimetres, y growing downward from the page top."""

    title: str = "Skill Radar Report"
    title_font_size: float = 18
    body_font_size: float = 12

    title_x: float = 10
    title_y: float = 15
    scores_start_y: float = 25
    score_line_height: float = 8
    after_scores_gap: float = 5

    header_x: float = 10
    header_line_height: float = 6
    body_x: float = 12
    body_line_height: float = 6
    snippet_x: float = 14
    snippet_line_height: float = 5
    empty_snippet_line_height: float = 6
    section_gap: float = 2

    page_break_y: float = 270
    top_margin: float = 15
    wrap_width: float = 180

    warning_color: RGB = (255, 0, 0)
    timestamp_format: str = "%Y-%m-%d %H:%M"
    attempt_separator: str = " -> "

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PageLayout":
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"unknown report setting '{key}'")
            default = known[key].default
            if isinstance(default, tuple):
                value = tuple(int(v) for v in value)
            elif isinstance(default, str):
                value = str(value)
            else:
                value = float(value)
            kwargs[key] = value
        return cls(**kwargs)

    def validate(self) -> Dict[str, str]:
        issues: Dict[str, str] = {}
        if self.wrap_width <= 0:
            issues["wrap_width"] = "wrap_width must be positive"
        if self.top_margin >= self.page_break_y:
            issues["top_margin"] = "top_margin must be above page_break_y"
        for label in ("score_line_height", "header_line_height", "body_line_height", "snippet_line_height"):
            if getattr(self, label) <= 0:
                issues[label] = f"{label} must be positive"
        if len(self.warning_color) != 3 or any(not 0 <= c <= 255 for c in self.warning_color):
            issues["warning_color"] = "warning_color must be three values in 0..255"
        return issues
