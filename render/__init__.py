"""
Hex map editor - Rendering Package
Pointy-top layout geometry and matplotlib map snapshots.
"""
from .hex_render import HexRenderer
from .map_plot import MapPlotRenderer

__all__ = ['HexRenderer', 'MapPlotRenderer']
