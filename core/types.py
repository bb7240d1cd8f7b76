"""
Shared types for the hex map editor core.
Separated to avoid circular imports between modules.

Every stored record is immutable so that history payloads hold values,
never references into live state.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.cell_keys import cell_key

MAX_OVERLAYS = 16
MAX_HISTORY = 100

# Hex radius in world units (1 unit = 1 m)
DEFAULT_HEX_SIZE = 0.5

class Terrain(Enum):
    """Closed set of terrain types a cell can carry."""
    GRASS = "grass"
    WATER = "water"
    SAND = "sand"
    ROCK = "rock"
    SNOW = "snow"
    FOREST = "forest"

# Overlay tags offered by the palette; the store accepts any string tag
OVERLAY_TYPES: Tuple[str, ...] = ("tree", "rock", "house", "tower", "castle", "mountain")


@dataclass(frozen=True)
class HexCell:
    """
    One cell of the map.

    elevation is None at ground level; overlays is ordered bottom to top
    and empty when the cell has none.
    """
    q: int
    r: int
    terrain: Terrain
    elevation: Optional[int] = None
    overlays: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return cell_key(self.q, self.r)

    def to_record(self) -> Dict[str, Any]:
        """Flat export record (elevation defaults to 0, overlays to [])."""
        return {
            "q": self.q,
            "r": self.r,
            "terrain": self.terrain.value,
            "elevation": self.elevation or 0,
            "overlays": list(self.overlays),
        }


# =============================================================================
# SCENE ASSETS
# =============================================================================

# Column-major 4x4 identity
IDENTITY_MATRIX: Tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)

@dataclass(frozen=True)
class MaterialProperties:
    """PBR material settings for a mesh asset."""
    base_color: str = "#cccccc"
    metallic: float = 0.0           # 0-1
    roughness: float = 0.7          # 0-1
    emissive: str = "#000000"
    emissive_intensity: float = 0.0  # 0+

DEFAULT_MATERIAL = MaterialProperties()

@dataclass(frozen=True)
class MeshAsset:
    """Imported mesh: opaque encoded buffer plus its world transform."""
    asset_id: str
    name: str
    buffer: bytes = b""
    matrix: Tuple[float, ...] = IDENTITY_MATRIX
    material: Optional[MaterialProperties] = None


# =============================================================================
# PATTERN RINGS
# =============================================================================

@dataclass(frozen=True)
class RingStyle:
    color: str = "#ff5500"
    stroke_width: float = 2
    opacity: float = 1.0

DEFAULT_RING_STYLE = RingStyle()

@dataclass(frozen=True)
class Ring:
    ring_id: str
    symmetry: int = 6
    style: RingStyle = field(default_factory=RingStyle)

@dataclass(frozen=True)
class RingElement:
    """Element placed on a ring at an angle (radians)."""
    element_id: str
    ring_id: str
    angle: float = 0.0
    kind: str = "circle"
    style_override: Optional[RingStyle] = None
