"""
Hex map editor - Utilities Package
Pointy-top axial coordinate engine and cell key helpers.
"""
from .hex_coords import (
    AxialCoord,
    CubeCoord,
    PixelPoint,
    axial_to_cube,
    cube_to_axial,
    cube_round,
    axial_round,
    axial_to_pixel_pointy_top,
    pixel_to_axial_pointy_top,
    pixel_to_cell,
    axial_distance,
    get_axial_neighbors,
    axial_neighbor,
    AXIAL_DIRECTIONS,
)
from .cell_keys import cell_key, parse_cell_key

__all__ = [
    'AxialCoord', 'CubeCoord', 'PixelPoint',
    'axial_to_cube', 'cube_to_axial', 'cube_round', 'axial_round',
    'axial_to_pixel_pointy_top', 'pixel_to_axial_pointy_top', 'pixel_to_cell',
    'axial_distance', 'get_axial_neighbors', 'axial_neighbor', 'AXIAL_DIRECTIONS',
    'cell_key', 'parse_cell_key',
]
