# utils/hex_coords.py
"""
Axial / cube / pixel conversions for pointy-top hexagonal grids.

Conventions:
- Axial (q, r) is the storage coordinate of every cell.
- Cube (x, y, z) with x + y + z == 0 is only used for rounding and distance.
- Pixel (x, y) is world space, computed on demand from axial and a hex size
  (center-to-vertex radius).

Reference: Red Blob Games hexagonal grid guide
https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations
import math
from typing import List, NamedTuple, Tuple


SQRT3 = math.sqrt(3.0)


class AxialCoord(NamedTuple):
    q: float
    r: float


class CubeCoord(NamedTuple):
    x: float
    y: float
    z: float


class PixelPoint(NamedTuple):
    x: float
    y: float


# Direction offsets, index order is part of the contract:
# E, NE, NW, W, SW, SE
AXIAL_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    ( 1,  0),
    ( 1, -1),
    ( 0, -1),
    (-1,  0),
    (-1,  1),
    ( 0,  1),
)


def axial_to_cube(q: float, r: float) -> CubeCoord:
    """Convert axial (q, r) to cube (x, y, z)."""
    x = q
    z = r
    y = -x - z
    return CubeCoord(x, y, z)


def cube_to_axial(cube: Tuple[float, float, float]) -> AxialCoord:
    """Convert a cube triple back to axial (q = x, r = z)."""
    x, _, z = cube
    return AxialCoord(x, z)


def cube_round(x: float, y: float, z: float) -> CubeCoord:
    """
    Round a fractional cube triple to the nearest valid cube coordinate.

    Each component is rounded on its own; the one with the largest rounding
    error is then rebuilt from the other two so that x + y + z == 0.
    """
    rx = _round_half_up(x)
    ry = _round_half_up(y)
    rz = _round_half_up(z)

    x_diff = abs(rx - x)
    y_diff = abs(ry - y)
    z_diff = abs(rz - z)

    if x_diff > y_diff and x_diff > z_diff:
        rx = -ry - rz
    elif y_diff > z_diff:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return CubeCoord(rx, ry, rz)


def axial_round(q: float, r: float) -> AxialCoord:
    """Snap a fractional axial position to the cell that contains it."""
    cube = cube_round(q, -q - r, r)
    return cube_to_axial(cube)


def axial_to_pixel_pointy_top(q: float, r: float, size: float) -> PixelPoint:
    """
    Center of cell (q, r) in world space for a pointy-top layout.

    Args:
        q, r: Axial coordinates
        size: Hex radius (center to vertex), must be > 0

    Returns:
        PixelPoint of the hex center

    Raises:
        ValueError: If size is not positive
    """
    _check_size(size)
    x = size * SQRT3 * (q + r / 2.0)
    y = size * 1.5 * r
    return PixelPoint(x, y)


def pixel_to_axial_pointy_top(x: float, y: float, size: float) -> AxialCoord:
    """
    Exact inverse of :func:`axial_to_pixel_pointy_top`.

    The result is fractional; pass it through :func:`axial_round` (or use
    :func:`pixel_to_cell`) when an integer cell is needed.

    Raises:
        ValueError: If size is not positive
    """
    _check_size(size)
    q = (SQRT3 / 3.0 * x - y / 3.0) / size
    r = (2.0 / 3.0 * y) / size
    return AxialCoord(q, r)


def pixel_to_cell(x: float, y: float, size: float) -> AxialCoord:
    """Hit test: the integer cell under world point (x, y)."""
    fq, fr = pixel_to_axial_pointy_top(x, y, size)
    return axial_round(fq, fr)


def axial_distance(q1: int, r1: int, q2: int, r2: int) -> int:
    """Number of steps between two cells."""
    a = axial_to_cube(q1, r1)
    b = axial_to_cube(q2, r2)
    return int((abs(a.x - b.x) + abs(a.y - b.y) + abs(a.z - b.z)) // 2)


def get_axial_neighbors(q: int, r: int) -> List[AxialCoord]:
    """The six adjacent cells, in AXIAL_DIRECTIONS order."""
    return [AxialCoord(q + dq, r + dr) for dq, dr in AXIAL_DIRECTIONS]


def axial_neighbor(q: int, r: int, direction: int) -> AxialCoord:
    """Adjacent cell in one direction (index into AXIAL_DIRECTIONS, wraps)."""
    dq, dr = AXIAL_DIRECTIONS[direction % 6]
    return AxialCoord(q + dq, r + dr)


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; pointer snapping expects .5 to go up
    return int(math.floor(value + 0.5))


def _check_size(size: float) -> None:
    if size <= 0:
        raise ValueError(f"Hex size must be positive: {size}")
