"""
Render tests: colors, hit testing, instance transforms and PNG export.
"""

import numpy as np
import pytest

from render.hex_render import (
    DEFAULT_OVERLAY_COLOR,
    ELEVATION_STEP,
    OVERLAY_COLORS,
    TERRAIN_COLORS,
    HexRenderer,
)
from render.map_plot import MapPlotRenderer
from core.types import HexCell, Terrain


class FakeCanvas:
    """Records create_* calls like a Tkinter Canvas would receive them."""

    def __init__(self):
        self.calls = []

    def create_polygon(self, points, **kwargs):
        self.calls.append(("polygon", points, kwargs))
        return len(self.calls)

    def create_text(self, x, y, **kwargs):
        self.calls.append(("text", (x, y), kwargs))
        return len(self.calls)


def test_top_overlay_wins_color():
    renderer = HexRenderer()
    assert renderer.cell_color(HexCell(0, 0, Terrain.WATER)) == TERRAIN_COLORS["water"]
    cell = HexCell(0, 0, Terrain.WATER, overlays=("tree", "castle"))
    assert renderer.cell_color(cell) == OVERLAY_COLORS["castle"]
    assert renderer.cell_color(HexCell(0, 0, Terrain.GRASS, overlays=("banner",))) == DEFAULT_OVERLAY_COLOR


def test_hit_test_with_offset():
    renderer = HexRenderer(hex_size=20)
    x, y = renderer.axial_to_pixel(-2, 3, offset_x=200, offset_y=150)
    assert renderer.pixel_to_axial(x + 3, y - 2, offset_x=200, offset_y=150) == (-2, 3)


def test_hex_points_are_on_radius():
    renderer = HexRenderer(hex_size=10)
    points = renderer.get_hex_points(0, 0)
    assert len(points) == 12
    assert points[0] == pytest.approx(0.0, abs=1e-9)
    assert points[1] == pytest.approx(-10.0)
    for x, y in zip(points[::2], points[1::2]):
        assert (x * x + y * y) ** 0.5 == pytest.approx(10.0)


def test_instance_transforms(small_map):
    renderer = HexRenderer()
    positions = renderer.instance_transforms(small_map)
    assert positions.shape == (3, 3)
    np.testing.assert_allclose(positions[0], [0.0, 2 * ELEVATION_STEP, 0.0])
    assert positions[1, 1] == 0.0
    assert positions[1, 0] == pytest.approx(0.5 * 3 ** 0.5)


def test_draw_cell_on_canvas():
    renderer = HexRenderer(hex_size=20)
    canvas = FakeCanvas()
    item = renderer.draw_cell(canvas, HexCell(1, 0, Terrain.SAND))
    renderer.draw_text_in_hex(canvas, 1, 0, "3")
    assert item == 1
    kind, points, kwargs = canvas.calls[0]
    assert kind == "polygon"
    assert kwargs["fill"] == TERRAIN_COLORS["sand"]
    assert canvas.calls[1][2]["text"] == "3"


def test_renderer_rejects_bad_size():
    with pytest.raises(ValueError):
        HexRenderer(hex_size=-1)


def test_render_map_draws_every_cell(small_map):
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    try:
        MapPlotRenderer(radius=1.0).render_map(small_map, ax)
        assert len(ax.patches) == 3
        # Only (0,0) is elevated
        assert [t.get_text() for t in ax.texts] == ["2"]
    finally:
        plt.close(fig)


def test_save_png(small_map, tmp_path):
    path = tmp_path / "map.png"
    MapPlotRenderer().save_png(small_map, str(path), dpi=50, title="Small map")
    with open(path, "rb") as f:
        assert f.read(8) == b"\x89PNG\r\n\x1a\n"


def test_save_png_empty_map(hex_map, tmp_path):
    path = tmp_path / "empty.png"
    MapPlotRenderer().save_png(hex_map, str(path))
    assert path.exists()
