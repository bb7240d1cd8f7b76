"""
PaintTool - turns pointer gestures into undoable map edits.

A stroke runs from press() through any number of drag() calls to release().
Pointer-move events arrive many times per cell; within one stroke each cell
key is edited at most once so the history gets one entry per cell reached.
"""
from typing import Optional, Set

from core.hex_map import HexMap
from core.types import DEFAULT_HEX_SIZE, Terrain
from utils.cell_keys import cell_key
from utils.hex_coords import AxialCoord, pixel_to_cell

PAINT_MODES = ("terrain", "erase", "elevation", "overlay")


class PaintTool:
    """
    Pointer-driven brush for a HexMap.

    Modes:
        terrain: paint the current terrain
        erase: remove cells
        elevation: set the current elevation on existing cells
        overlay: push the current overlay tag on existing cells
    """

    def __init__(self, hex_map: HexMap, hex_size: float = DEFAULT_HEX_SIZE):
        if hex_size <= 0:
            raise ValueError(f"Hex size must be positive: {hex_size}")
        self.hex_map = hex_map
        self.hex_size = hex_size
        self.mode = "terrain"
        self.terrain = Terrain.GRASS
        self.elevation = 1
        self.overlay = "tree"
        self.offset_x = 0.0
        self.offset_y = 0.0

        self._stroke_active = False
        self._visited: Set[str] = set()
        self._last_key: Optional[str] = None

    def set_mode(self, mode: str) -> None:
        if mode not in PAINT_MODES:
            raise ValueError(f"Unknown paint mode '{mode}', expected one of {PAINT_MODES}")
        self.mode = mode

    def set_terrain(self, terrain) -> None:
        self.terrain = Terrain(terrain) if not isinstance(terrain, Terrain) else terrain
        self.mode = "terrain"

    # =============================================================================
    # POINTER EVENTS
    # =============================================================================

    def press(self, x: float, y: float) -> Optional[AxialCoord]:
        """Start a stroke at a canvas position."""
        self._stroke_active = True
        self._visited.clear()
        self._last_key = None
        return self.drag(x, y)

    def drag(self, x: float, y: float) -> Optional[AxialCoord]:
        """
        Continue the stroke.

        Returns:
            The cell that was edited, or None if the pointer stayed on an
            already-visited cell, no stroke is active, or the edit was a no-op
        """
        if not self._stroke_active:
            return None

        q, r = pixel_to_cell(x - self.offset_x, y - self.offset_y, self.hex_size)
        key = cell_key(q, r)
        if key == self._last_key or key in self._visited:
            return None
        self._last_key = key
        self._visited.add(key)

        if self._apply(q, r):
            return AxialCoord(q, r)
        return None

    def release(self) -> int:
        """End the stroke. Returns the number of cells the stroke visited."""
        visited = len(self._visited)
        self._stroke_active = False
        self._visited.clear()
        self._last_key = None
        return visited

    def hover(self, x: float, y: float) -> AxialCoord:
        """Cell under the pointer, for position displays."""
        return pixel_to_cell(x - self.offset_x, y - self.offset_y, self.hex_size)

    def _apply(self, q: int, r: int) -> bool:
        if self.mode == "terrain":
            return self.hex_map.cmd_set_terrain(q, r, self.terrain)
        elif self.mode == "erase":
            return self.hex_map.cmd_remove_cell(q, r)
        elif self.mode == "elevation":
            return self.hex_map.cmd_set_elevation(q, r, self.elevation)
        elif self.mode == "overlay":
            return self.hex_map.cmd_push_overlay(q, r, self.overlay)
        return False
