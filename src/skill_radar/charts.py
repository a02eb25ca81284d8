from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from skill_radar.core import RadarPoint, TrendPoint
from skill_radar.validation import SCORE_MAX

Pathish = Union[str, Path]

BACKGROUND = (255, 255, 255)
GRID = (200, 200, 200)
LABEL = (40, 40, 40)
CURRENT = (37, 99, 235)       # #2563eb
PREVIOUS = (130, 202, 157)    # #82ca9d

EMPTY_TEXT = "No skills found."


def _empty(size: Tuple[int, int]) -> Image.Image:
    img = Image.new("RGB", size, BACKGROUND)
    draw = ImageDraw.Draw(img)
    draw.text((size[0] // 2 - 40, size[1] // 2 - 6), EMPTY_TEXT, fill=LABEL)
    return img


def radar_vertices(scores: Sequence[float], *, center: Tuple[float, float], radius: float) -> np.ndarray:
    """Polygon vertices, first axis pointing up, going clockwise."""
    n = len(scores)
    angles = -np.pi / 2 + np.arange(n) * (2 * np.pi / n)
    r = np.clip(np.asarray(scores, dtype=float), 0.0, SCORE_MAX) / SCORE_MAX * radius
    xs = center[0] + r * np.cos(angles)
    ys = center[1] + r * np.sin(angles)
    return np.stack([xs, ys], axis=1)


def draw_radar(points: Sequence[RadarPoint], *, size: int = 400) -> Image.Image:
    if not points:
        return _empty((size, size))

    img = Image.new("RGB", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(img)
    center = (size / 2, size / 2)
    radius = size * 0.3

    n = len(points)
    for ring in (2, 4, 6, 8, 10):
        ring_pts = radar_vertices([ring] * max(n, 3), center=center, radius=radius)
        draw.polygon([tuple(p) for p in ring_pts], outline=GRID)

    spokes = radar_vertices([SCORE_MAX] * n, center=center, radius=radius)
    labels = radar_vertices([SCORE_MAX] * n, center=center, radius=radius * 1.15)
    for spoke, label_at, p in zip(spokes, labels, points):
        draw.line([center, tuple(spoke)], fill=GRID)
        draw.text((label_at[0] - 3 * len(p.name), label_at[1] - 6), p.name, fill=LABEL)

    shape = radar_vertices([p.score for p in points], center=center, radius=radius)
    if n >= 3:
        draw.polygon([tuple(v) for v in shape], outline=CURRENT, fill=(146, 177, 245))
    elif n == 2:
        draw.line([tuple(v) for v in shape], fill=CURRENT, width=2)
    else:
        x, y = shape[0]
        draw.ellipse([x - 4, y - 4, x + 4, y + 4], fill=CURRENT)
    return img


def _trend_y(value: float, top: float, height: float) -> float:
    return top + height * (1 - min(max(value, 0.0), SCORE_MAX) / SCORE_MAX)


def draw_trend(points: Sequence[TrendPoint], *, width: int = 400, height: int = 300) -> Image.Image:
    if not points:
        return _empty((width, height))

    img = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(img)
    left, right, top, bottom = 40.0, width - 20.0, 20.0, height - 40.0
    plot_h = bottom - top

    for tick in range(0, 11, 2):
        y = _trend_y(tick, top, plot_h)
        draw.line([(left, y), (right, y)], fill=GRID)
        draw.text((left - 22, y - 6), str(tick), fill=LABEL)

    xs = np.linspace(left + 10, right - 10, num=len(points)) if len(points) > 1 else np.array([(left + right) / 2])
    for series, colour in (("previous", PREVIOUS), ("current", CURRENT)):
        coords: List[Tuple[float, float]] = [
            (float(x), _trend_y(getattr(p, series), top, plot_h)) for x, p in zip(xs, points)
        ]
        if len(coords) > 1:
            draw.line(coords, fill=colour, width=2)
        for x, y in coords:
            draw.ellipse([x - 3, y - 3, x + 3, y + 3], outline=colour, fill=BACKGROUND)

    for x, p in zip(xs, points):
        draw.text((float(x) - 3 * len(p.name), bottom + 8), p.name, fill=LABEL)
    return img


def render_radar_png(points: Sequence[RadarPoint], path: Pathish, *, size: int = 400) -> Path:
    out = Path(path)
    draw_radar(points, size=size).save(out, format="PNG")
    return out


def render_trend_png(points: Sequence[TrendPoint], path: Pathish, *, width: int = 400, height: int = 300) -> Path:
    out = Path(path)
    draw_trend(points, width=width, height=height).save(out, format="PNG")
    return out
