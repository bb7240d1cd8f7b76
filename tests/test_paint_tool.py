"""
PaintTool tests: a stroke edits each cell once, whatever the number of
pointer events inside that cell.
"""

import pytest

from core.paint_tool import PaintTool
from core.types import Terrain
from utils.hex_coords import axial_to_pixel_pointy_top

SIZE = 0.5


def _center(q, r):
    return axial_to_pixel_pointy_top(q, r, SIZE)


@pytest.fixture
def tool(hex_map):
    return PaintTool(hex_map, hex_size=SIZE)


def test_stroke_dedupes_cells(tool, hex_map):
    x, y = _center(0, 0)
    assert tool.press(x, y) == (0, 0)
    assert tool.drag(x + 0.05, y) is None
    assert tool.drag(x - 0.05, y + 0.05) is None

    x1, y1 = _center(1, 0)
    assert tool.drag(x1, y1) == (1, 0)
    # Back over a visited cell
    assert tool.drag(x, y) is None

    assert tool.release() == 2
    assert hex_map.get_history_info()["past_commands"] == 2


def test_drag_without_press_does_nothing(tool, hex_map):
    assert tool.drag(*_center(0, 0)) is None
    assert len(hex_map) == 0


def test_new_stroke_can_revisit(tool, hex_map):
    tool.set_terrain("water")
    tool.press(*_center(0, 0))
    tool.release()
    tool.set_terrain(Terrain.SAND)
    assert tool.press(*_center(0, 0)) == (0, 0)
    assert hex_map.get_cell(0, 0).terrain == Terrain.SAND


def test_modes(tool, hex_map):
    tool.press(*_center(0, 0))
    tool.release()

    tool.set_mode("elevation")
    tool.elevation = 4
    tool.press(*_center(0, 0))
    tool.release()
    assert hex_map.get_elevation(0, 0) == 4

    tool.set_mode("overlay")
    tool.overlay = "house"
    tool.press(*_center(0, 0))
    tool.release()
    assert hex_map.top_overlay(0, 0) == "house"

    # Elevation on an empty cell is a no-op
    tool.set_mode("elevation")
    assert tool.press(*_center(3, 3)) is None
    tool.release()

    tool.set_mode("erase")
    tool.press(*_center(0, 0))
    tool.release()
    assert len(hex_map) == 0


def test_offsets_and_hover(tool):
    tool.offset_x = 100.0
    tool.offset_y = 50.0
    x, y = _center(2, -1)
    assert tool.hover(x + 100.0, y + 50.0) == (2, -1)


def test_invalid_mode_and_size(tool, hex_map):
    with pytest.raises(ValueError):
        tool.set_mode("smudge")
    with pytest.raises(ValueError):
        PaintTool(hex_map, hex_size=0)
