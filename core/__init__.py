"""
Hex map editor - Core Package
Cell store, shared undo/redo store, command log and editable state slices.
"""
from .types import HexCell, Terrain, MeshAsset, MaterialProperties, Ring, RingElement, RingStyle
from .commands import Operation, SliceOperation, CompositeOperation, CommandEntry, CommandHistory
from .store import EditorStore, StateSlice
from .hex_map import HexMap
from .scene_assets import SceneAssets
from .pattern import PatternRings
from .paint_tool import PaintTool

__all__ = [
    'HexCell', 'Terrain', 'MeshAsset', 'MaterialProperties', 'Ring', 'RingElement', 'RingStyle',
    'Operation', 'SliceOperation', 'CompositeOperation', 'CommandEntry', 'CommandHistory',
    'EditorStore', 'StateSlice',
    'HexMap', 'SceneAssets', 'PatternRings', 'PaintTool',
]
