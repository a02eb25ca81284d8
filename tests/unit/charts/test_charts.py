import math

import pytest

np = pytest.importorskip("numpy")
pytest.importorskip("PIL")

from PIL import Image  # noqa: E402

from skill_radar.charts import (  # noqa: E402
    draw_radar,
    draw_trend,
    radar_vertices,
    render_radar_png,
    render_trend_png,
)
from skill_radar.core import RadarPoint, TrendPoint  # noqa: E402


def test_radar_vertices_first_axis_points_up():
    verts = radar_vertices([10, 10, 10, 10], center=(100, 100), radius=50)

    assert verts.shape == (4, 2)
    assert verts[0][0] == pytest.approx(100)
    assert verts[0][1] == pytest.approx(50)
    # clockwise on screen: second axis to the right
    assert verts[1][0] == pytest.approx(150)
    assert verts[1][1] == pytest.approx(100)


def test_radar_vertices_scale_and_clip():
    verts = radar_vertices([5, 15, -3], center=(0, 0), radius=10)
    radii = [math.hypot(x, y) for x, y in verts]
    assert radii == pytest.approx([5, 10, 0])


@pytest.mark.parametrize("count", [1, 2, 3, 5])
def test_draw_radar_any_point_count(count):
    points = [RadarPoint(f"S{i}", float(i + 1)) for i in range(count)]
    img = draw_radar(points, size=240)
    assert img.size == (240, 240)


def test_draw_empty_charts():
    assert draw_radar([], size=200).size == (200, 200)
    assert draw_trend([], width=300, height=120).size == (300, 120)


def test_render_pngs(tmp_path, sample_records):
    radar = [RadarPoint(r.name, r.score) for r in sample_records]
    trend = [TrendPoint("Algorithms", 6.5, 7.5), TrendPoint("System Design", 4.1, 5.1)]

    radar_path = render_radar_png(radar, tmp_path / "radar.png")
    trend_path = render_trend_png(trend, tmp_path / "trend.png", width=320, height=200)

    with Image.open(radar_path) as img:
        assert img.format == "PNG"
        assert img.size == (400, 400)
    with Image.open(trend_path) as img:
        assert img.size == (320, 200)
