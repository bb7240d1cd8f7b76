# render/map_plot.py
"""
Matplotlib snapshot of a hex map.

Draws every cell as a pointy-top hexagon colored by its top overlay or
terrain, labels elevated cells, and writes PNG exports.
"""

import numpy as np
import matplotlib.patches as patches
from typing import Dict, Optional, Tuple

from render.hex_render import HexRenderer
from utils.hex_coords import axial_to_pixel_pointy_top


class MapPlotRenderer:
    """
    Render a HexMap on a matplotlib axis.
    """

    def __init__(self, radius: float = 1.0, padding: float = 1.0, text_weight: str = 'bold'):
        """
        Initialize the renderer.

        Args:
            radius: Radius of hexagonal cells in plot units
            padding: Padding around the map in units of radius
            text_weight: Font weight for elevation labels ('normal' or 'bold')
        """
        self.R = float(radius)
        self.pad = float(padding)
        self.tw = text_weight
        self.colors = HexRenderer(hex_size=self.R)

    def _get_centers(self, hex_map) -> Dict[str, Tuple[float, float]]:
        """Cell key -> (x, y) plot position."""
        centers = {}
        for cell in hex_map.cells_list():
            centers[cell.key] = tuple(axial_to_pixel_pointy_top(cell.q, cell.r, self.R))
        return centers

    def _draw_hex(self, ax, cx: float, cy: float, facecolor: str, edgecolor: str = 'black', linewidth: float = 1):
        """Draw a single pointy-top hexagon at the specified center."""
        angles = np.deg2rad([30, 90, 150, 210, 270, 330, 30])
        pts = np.column_stack([cx + self.R * np.cos(angles), cy + self.R * np.sin(angles)])

        poly = patches.Polygon(
            pts, closed=True,
            facecolor=facecolor,
            edgecolor=edgecolor,
            linewidth=linewidth
        )
        ax.add_patch(poly)

    def render_map(self, hex_map, ax=None, *, show_elevation: bool = True):
        """
        Render all cells of a map.

        Args:
            hex_map: HexMap to draw
            ax: Optional matplotlib axis (creates new figure if None)
            show_elevation: Label cells that are above ground level

        Returns:
            Matplotlib axis object
        """
        if ax is None:
            import matplotlib.pyplot as plt
            fig, ax = plt.subplots(figsize=(10, 8))

        centers = self._get_centers(hex_map)

        for cell in hex_map.cells_list():
            cx, cy = centers[cell.key]
            self._draw_hex(ax, cx, cy, self.colors.cell_color(cell))

            if show_elevation and cell.elevation:
                font_size = max(6, min(18, 12 * self.R))
                ax.text(cx, cy, str(cell.elevation),
                        ha='center', va='center',
                        fontsize=font_size,
                        fontweight=self.tw,
                        color='black')

        # Set up the axis
        if centers:
            xy = np.array(list(centers.values()))
            min_x, min_y = xy.min(axis=0)
            max_x, max_y = xy.max(axis=0)
        else:
            min_x = min_y = max_x = max_y = 0.0
        pad = self.R * (1 + self.pad)

        ax.set_aspect('equal')
        ax.set_xlim(min_x - pad, max_x + pad)
        ax.set_ylim(max_y + pad, min_y - pad)  # Invert Y so +r runs down like screen space
        ax.axis('off')

        return ax

    def save_png(self, hex_map, filename: str, dpi: int = 100, title: Optional[str] = None) -> None:
        """Render a map to a PNG file."""
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(8, 8))
        try:
            self.render_map(hex_map, ax)
            if title:
                ax.set_title(title, fontsize=14, pad=20)
            fig.savefig(filename, dpi=dpi, bbox_inches='tight')
        finally:
            plt.close(fig)
