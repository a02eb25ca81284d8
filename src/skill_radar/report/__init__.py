from .layout import PageLayout
from .paginator import (
    FLAG_WARNING,
    NOT_AVAILABLE,
    ReportError,
    ReportPaginator,
    ReportSummary,
    SectionPlacement,
    format_attempts,
    format_iteration_depth,
)
from .surface import DrawingSurface, DrawOp, RecordingSurface, ReportLabSurface
from .wrap import wrap_text

__all__ = [
    "FLAG_WARNING",
    "NOT_AVAILABLE",
    "DrawOp",
    "DrawingSurface",
    "PageLayout",
    "RecordingSurface",
    "ReportError",
    "ReportLabSurface",
    "ReportPaginator",
    "ReportSummary",
    "SectionPlacement",
    "format_attempts",
    "format_iteration_depth",
    "wrap_text",
]
