"""
Hexagonal rendering utilities for pointy-top axial maps.

Positions cells for canvas drawing and instanced 3D rendering, and maps
pointer positions back to cells. Drawing targets any Tkinter-Canvas-like
object (create_polygon / create_text).
"""
import math
from typing import List, Optional, Tuple

import numpy as np

from core.types import DEFAULT_HEX_SIZE, HexCell
from utils.hex_coords import AxialCoord, axial_to_pixel_pointy_top, pixel_to_cell

# World-space rise per elevation step
ELEVATION_STEP = 0.1

DEFAULT_TERRAIN_COLOR = "#9E9E9E"
DEFAULT_OVERLAY_COLOR = "#FF00FF"

TERRAIN_COLORS = {
    "grass": "#4CAF50",
    "water": "#2196F3",
    "sand": "#FFC107",
    "rock": "#795548",
    "snow": "#ECEFF1",
    "forest": "#388E3C",
}

OVERLAY_COLORS = {
    "tree": "#00AA00",
    "rock": "#777777",
    "house": "#AA5500",
    "tower": "#AAAAAA",
    "castle": "#880000",
    "mountain": "#555555",
}


class HexRenderer:
    """Handles pointy-top hex layout calculations and drawing."""

    def __init__(self, hex_size: float = DEFAULT_HEX_SIZE):
        """
        Initialize hex renderer.

        Args:
            hex_size: Radius of hexagon (distance from center to vertex)
        """
        if hex_size <= 0:
            raise ValueError(f"Hex size must be positive: {hex_size}")
        self.hex_size = hex_size
        self.hex_width = hex_size * math.sqrt(3)
        self.hex_height = hex_size * 2

    def axial_to_pixel(self, q: int, r: int, offset_x: float = 0, offset_y: float = 0) -> Tuple[float, float]:
        """
        Center of cell (q, r) on the canvas.

        Args:
            q, r: Axial coordinates
            offset_x, offset_y: Canvas offset for positioning

        Returns:
            (x, y) pixel coordinates for hexagon center
        """
        x, y = axial_to_pixel_pointy_top(q, r, self.hex_size)
        return x + offset_x, y + offset_y

    def pixel_to_axial(self, pixel_x: float, pixel_y: float, offset_x: float = 0, offset_y: float = 0) -> AxialCoord:
        """
        Cell under a canvas position. Used for mouse hit testing.

        Args:
            pixel_x, pixel_y: Canvas pixel coordinates
            offset_x, offset_y: Canvas offset used in drawing

        Returns:
            Integer axial coordinates of the hex containing the point
        """
        return pixel_to_cell(pixel_x - offset_x, pixel_y - offset_y, self.hex_size)

    def get_hex_points(self, center_x: float, center_y: float) -> List[float]:
        """
        Get the 6 vertices of a pointy-top hexagon for polygon drawing.

        Returns:
            List of coordinates [x1, y1, x2, y2, ...], top vertex first, clockwise
        """
        points = []
        for i in range(6):
            angle = math.pi / 2 - (math.pi / 3 * i)
            x = center_x + self.hex_size * math.cos(angle)
            y = center_y - self.hex_size * math.sin(angle)  # Negative for screen coordinates
            points.extend([x, y])
        return points

    def cell_color(self, cell: Optional[HexCell]) -> str:
        """Fill color: the top overlay wins over the terrain."""
        if cell is None:
            return DEFAULT_TERRAIN_COLOR
        if cell.overlays:
            return OVERLAY_COLORS.get(cell.overlays[-1], DEFAULT_OVERLAY_COLOR)
        return TERRAIN_COLORS.get(cell.terrain.value, DEFAULT_TERRAIN_COLOR)

    def instance_transforms(self, hex_map) -> np.ndarray:
        """
        World positions for instanced rendering, one row per cell.

        Returns:
            Array of shape (n, 3): (x, elevation * ELEVATION_STEP, y),
            rows in the map's cell order
        """
        cells = hex_map.cells_list()
        positions = np.zeros((len(cells), 3), dtype=float)
        for i, cell in enumerate(cells):
            x, y = axial_to_pixel_pointy_top(cell.q, cell.r, self.hex_size)
            positions[i] = (x, (cell.elevation or 0) * ELEVATION_STEP, y)
        return positions

    def draw_cell(self, canvas, cell: HexCell, outline_color: str = "black",
                  offset_x: float = 0, offset_y: float = 0) -> int:
        """
        Draw a single cell on a canvas.

        Args:
            canvas: Tkinter Canvas (or anything with create_polygon)
            cell: Cell to draw
            outline_color: Border color
            offset_x, offset_y: Canvas positioning offset

        Returns:
            Canvas item ID for the drawn hexagon
        """
        center_x, center_y = self.axial_to_pixel(cell.q, cell.r, offset_x, offset_y)
        points = self.get_hex_points(center_x, center_y)

        return canvas.create_polygon(
            points,
            fill=self.cell_color(cell),
            outline=outline_color,
            width=2
        )

    def draw_text_in_hex(self, canvas, q: int, r: int, text: str,
                         offset_x: float = 0, offset_y: float = 0) -> int:
        """Draw text in the center of a hexagon, e.g. an elevation label."""
        center_x, center_y = self.axial_to_pixel(q, r, offset_x, offset_y)

        return canvas.create_text(
            center_x, center_y,
            text=text,
            font=("Arial", 12, "bold"),
            fill="black"
        )
