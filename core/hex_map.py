"""
HexMap - cell store for the hex map editor.

Cells are keyed by "q,r" (pointy-top axial coordinates) in a flat dict.
Each cell carries a terrain, an optional elevation and a bounded overlay stack.

Two layers of mutation:
- Direct methods (set_terrain, push_overlay, ...) change state and return
  True when something changed. They are also what history replays.
- cmd_* methods read the current state, build the forward operation and its
  inverse, and dispatch both through the store so the edit can be undone.
  Edits that would change nothing (missing cell, duplicate overlay, full
  stack) return False and record nothing.

Missing cells: elevation and overlay operations on a cell that does not
exist are no-ops. Only set_terrain creates cells.
"""
import json
import logging
from collections import Counter
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from core.commands import CompositeOperation
from core.store import EditorStore, StateSlice
from core.types import HexCell, MAX_OVERLAYS, Terrain
from utils.cell_keys import cell_key
from utils.hex_coords import get_axial_neighbors

logger = logging.getLogger(__name__)

TerrainLike = Union[Terrain, str]

MAP_FORMAT_VERSION = "1.0"
MAP_FORMAT_TYPE = "hex-map"


class HexMap(StateSlice):
    """
    Flat keyed store of hex cells.

    Attributes:
        cells: Mapping of "q,r" to HexCell, insertion ordered
        store: EditorStore holding the shared undo/redo history
    """

    operation_names = frozenset({
        "set_terrain",
        "remove_cell",
        "restore_cell",
        "set_elevation",
        "push_overlay",
        "pop_overlay",
        "clear_overlays",
        "restore_overlays",
        "replace_cells",
    })

    def __init__(self, store: Optional[EditorStore] = None, name: str = "map"):
        """
        Create an empty map.

        Args:
            store: Shared store to register with; a private one is created if None
            name: Slice name inside the store
        """
        super().__init__()
        self.cells: Dict[str, HexCell] = {}
        if store is None:
            store = EditorStore()
        store.register(name, self)

    # =============================================================================
    # CELL QUERIES
    # =============================================================================

    def get_cell(self, q: int, r: int) -> Optional[HexCell]:
        return self.cells.get(cell_key(q, r))

    def cell_exists(self, q: int, r: int) -> bool:
        return cell_key(q, r) in self.cells

    def get_elevation(self, q: int, r: int) -> int:
        """Elevation of a cell; 0 for ground level or a missing cell."""
        cell = self.get_cell(q, r)
        if cell is None or cell.elevation is None:
            return 0
        return cell.elevation

    def get_overlays(self, q: int, r: int) -> Tuple[str, ...]:
        """Overlay stack bottom to top (empty for a missing cell)."""
        cell = self.get_cell(q, r)
        return cell.overlays if cell is not None else ()

    def top_overlay(self, q: int, r: int) -> Optional[str]:
        """The overlay rendered on top, if any."""
        overlays = self.get_overlays(q, r)
        return overlays[-1] if overlays else None

    def get_neighbors(self, q: int, r: int) -> List[HexCell]:
        """Existing cells adjacent to (q, r), in direction order."""
        neighbors = []
        for nq, nr in get_axial_neighbors(q, r):
            cell = self.get_cell(nq, nr)
            if cell is not None:
                neighbors.append(cell)
        return neighbors

    def cells_list(self) -> List[HexCell]:
        return list(self.cells.values())

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, coord) -> bool:
        q, r = coord
        return self.cell_exists(q, r)

    # =============================================================================
    # DIRECT CELL MUTATIONS (replayed by history, use cmd_* for undo/redo)
    # =============================================================================

    def set_terrain(self, q: int, r: int, terrain: TerrainLike) -> bool:
        """Create the cell or overwrite its terrain, keeping elevation and overlays."""
        terrain = _coerce_terrain(terrain)
        key = cell_key(q, r)
        cell = self.cells.get(key)

        if cell is None:
            self.cells[key] = HexCell(q, r, terrain)
            return True
        if cell.terrain == terrain:
            return False
        self.cells[key] = replace(cell, terrain=terrain)
        return True

    def remove_cell(self, q: int, r: int) -> bool:
        """Delete the cell with its elevation and overlays."""
        return self.cells.pop(cell_key(q, r), None) is not None

    def restore_cell(self, q: int, r: int, terrain: TerrainLike,
                     elevation: Optional[int] = None, overlays: Iterable[str] = ()) -> bool:
        """Write a complete cell record, replacing whatever is at (q, r)."""
        cell = HexCell(
            int(q), int(r),
            _coerce_terrain(terrain),
            _normalize_elevation(elevation),
            _normalize_overlays(overlays),
        )
        self.cells[cell.key] = cell
        return True

    def set_elevation(self, q: int, r: int, elevation: int) -> bool:
        """
        Set a cell's elevation (0 means ground level).

        Returns:
            False if the cell is missing, elevation is negative or unchanged
        """
        cell = self.get_cell(q, r)
        if cell is None or elevation < 0:
            return False

        value = _normalize_elevation(elevation)
        if cell.elevation == value:
            return False
        self.cells[cell.key] = replace(cell, elevation=value)
        return True

    def push_overlay(self, q: int, r: int, tag: str) -> bool:
        """
        Put an overlay on top of the stack.

        Returns:
            False if the cell is missing, the tag is already present,
            or the stack already holds MAX_OVERLAYS tags
        """
        cell = self.get_cell(q, r)
        if not self._can_push_overlay(cell, tag):
            return False
        self.cells[cell.key] = replace(cell, overlays=cell.overlays + (tag,))
        return True

    def pop_overlay(self, q: int, r: int, tag: str) -> bool:
        """Remove one overlay tag wherever it sits in the stack."""
        cell = self.get_cell(q, r)
        if cell is None or tag not in cell.overlays:
            return False
        remaining = tuple(o for o in cell.overlays if o != tag)
        self.cells[cell.key] = replace(cell, overlays=remaining)
        return True

    def clear_overlays(self, q: int, r: int) -> bool:
        cell = self.get_cell(q, r)
        if cell is None or not cell.overlays:
            return False
        self.cells[cell.key] = replace(cell, overlays=())
        return True

    def restore_overlays(self, q: int, r: int, overlays: Iterable[str]) -> bool:
        """Replace the whole overlay stack, keeping the given order."""
        cell = self.get_cell(q, r)
        if cell is None:
            return False
        self.cells[cell.key] = replace(cell, overlays=_normalize_overlays(overlays))
        return True

    def replace_cells(self, cells: Iterable[HexCell]) -> bool:
        """Swap in a complete set of cells."""
        self.cells = {cell.key: cell for cell in cells}
        return True

    def _can_push_overlay(self, cell: Optional[HexCell], tag: str) -> bool:
        if cell is None:
            return False
        if tag in cell.overlays:
            return False
        return len(cell.overlays) < MAX_OVERLAYS

    # =============================================================================
    # COMMAND-BASED MUTATIONS (use these for user operations with undo/redo)
    # =============================================================================

    def cmd_set_terrain(self, q: int, r: int, terrain: TerrainLike) -> bool:
        """Paint terrain; undo restores the previous cell or removes a new one."""
        terrain = _coerce_terrain(terrain)
        previous = self.get_cell(q, r)
        if previous is not None and previous.terrain == terrain:
            return False

        forward = self.op("set_terrain", q=q, r=r, terrain=terrain.value)
        if previous is not None:
            inverse = self._restore_op(previous)
        else:
            inverse = self.op("remove_cell", q=q, r=r)
        return self.store.dispatch(forward, inverse, f"Paint ({q}, {r}) {terrain.value}")

    def cmd_remove_cell(self, q: int, r: int) -> bool:
        """Erase a cell; undo restores the full record."""
        previous = self.get_cell(q, r)
        if previous is None:
            return False

        forward = self.op("remove_cell", q=q, r=r)
        return self.store.dispatch(forward, self._restore_op(previous), f"Erase ({q}, {r})")

    def cmd_set_elevation(self, q: int, r: int, elevation: int) -> bool:
        """Change elevation; undo restores the previous value (0 if none)."""
        cell = self.get_cell(q, r)
        if cell is None or elevation < 0:
            return False

        previous = cell.elevation or 0
        if previous == elevation:
            return False

        forward = self.op("set_elevation", q=q, r=r, elevation=int(elevation))
        inverse = self.op("set_elevation", q=q, r=r, elevation=previous)
        return self.store.dispatch(forward, inverse, f"Elevation ({q}, {r}) {previous} → {elevation}")

    def cmd_push_overlay(self, q: int, r: int, tag: str) -> bool:
        """Add an overlay on top; undo removes that tag."""
        cell = self.get_cell(q, r)
        if not self._can_push_overlay(cell, tag):
            return False

        forward = self.op("push_overlay", q=q, r=r, tag=tag)
        inverse = self.op("pop_overlay", q=q, r=r, tag=tag)
        return self.store.dispatch(forward, inverse, f"Add overlay {tag} at ({q}, {r})")

    def cmd_pop_overlay(self, q: int, r: int, tag: str) -> bool:
        """Remove an overlay; undo puts it back at its previous position."""
        cell = self.get_cell(q, r)
        if cell is None or tag not in cell.overlays:
            return False

        forward = self.op("pop_overlay", q=q, r=r, tag=tag)
        inverse = self.op("restore_overlays", q=q, r=r, overlays=cell.overlays)
        return self.store.dispatch(forward, inverse, f"Remove overlay {tag} at ({q}, {r})")

    def cmd_clear_overlays(self, q: int, r: int) -> bool:
        """Empty the overlay stack; undo restores it in the exact prior order."""
        cell = self.get_cell(q, r)
        if cell is None or not cell.overlays:
            return False

        forward = self.op("clear_overlays", q=q, r=r)
        inverse = self.op("restore_overlays", q=q, r=r, overlays=cell.overlays)
        return self.store.dispatch(forward, inverse, f"Clear overlays at ({q}, {r})")

    def cmd_clear_map(self) -> bool:
        """Remove every cell as a single undoable step."""
        if not self.cells:
            return False

        existing = list(self.cells.values())
        forward = CompositeOperation(
            tuple(self.op("remove_cell", q=c.q, r=c.r) for c in existing), "Clear map")
        inverse = CompositeOperation(
            tuple(self._restore_op(c) for c in existing), "Restore map")
        return self.store.dispatch(forward, inverse, "Clear map")

    def cmd_import_records(self, records: Iterable[Mapping[str, Any]]) -> bool:
        """Replace the whole map from export records as a single undoable step."""
        new_cells = tuple(_cells_from_records(records))
        old_cells = tuple(self.cells.values())

        forward = self.op("replace_cells", cells=new_cells)
        inverse = self.op("replace_cells", cells=old_cells)
        return self.store.dispatch(forward, inverse, f"Import map ({len(new_cells)} cells)")

    def _restore_op(self, cell: HexCell):
        return self.op(
            "restore_cell",
            q=cell.q, r=cell.r,
            terrain=cell.terrain.value,
            elevation=cell.elevation,
            overlays=cell.overlays,
        )

    # =============================================================================
    # STATISTICS
    # =============================================================================

    def get_statistics(self) -> Dict:
        """
        Get map statistics.

        Returns:
            Dict with cell counts per terrain, overlay and elevation totals,
            and undo/redo availability
        """
        terrain_counts = Counter(cell.terrain.value for cell in self.cells.values())
        stats = {
            "total_cells": len(self.cells),
            "terrain": {terrain.value: terrain_counts.get(terrain.value, 0) for terrain in Terrain},
            "overlays": sum(len(cell.overlays) for cell in self.cells.values()),
            "elevated_cells": sum(1 for cell in self.cells.values() if cell.elevation),
            "max_elevation": max((cell.elevation or 0 for cell in self.cells.values()), default=0),
        }

        history_info = self.get_history_info()
        stats.update({
            "can_undo": history_info["can_undo"],
            "can_redo": history_info["can_redo"],
            "past_commands": history_info["past_commands"]
        })
        return stats

    # =============================================================================
    # JSON IMPORT/EXPORT
    # =============================================================================

    def to_records(self) -> List[Dict[str, Any]]:
        """Flat snapshot: one record per cell, in insertion order."""
        return [cell.to_record() for cell in self.cells.values()]

    def load_records(self, records: Iterable[Mapping[str, Any]]) -> None:
        """
        Replace the map from export records without recording history.

        The shared history is cleared: its entries describe the replaced state.
        """
        self.replace_cells(_cells_from_records(records))
        self.clear_history()

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]],
                     store: Optional[EditorStore] = None, name: str = "map") -> 'HexMap':
        """Create a HexMap from export records (malformed records are skipped)."""
        hex_map = cls(store=store, name=name)
        hex_map.load_records(records)
        return hex_map

    def to_json(self) -> Dict:
        """Export the map as a JSON-ready document."""
        return {
            "version": MAP_FORMAT_VERSION,
            "type": MAP_FORMAT_TYPE,
            "data": {
                "hexes": self.to_records()
            }
        }

    @classmethod
    def from_json(cls, json_data: Union[Dict, List],
                  store: Optional[EditorStore] = None, name: str = "map") -> 'HexMap':
        """
        Create a HexMap from an exported document.

        Accepts the full document produced by to_json() or a bare record list.
        """
        if isinstance(json_data, list):
            records = json_data
        else:
            records = json_data.get("data", {}).get("hexes", [])
        return cls.from_records(records, store=store, name=name)

    @classmethod
    def load_from_file(cls, filename: str, store: Optional[EditorStore] = None,
                       name: str = "map") -> 'HexMap':
        """Load a HexMap from a JSON file."""
        with open(filename, 'r') as f:
            json_data = json.load(f)
        return cls.from_json(json_data, store=store, name=name)

    def save_json(self, filename: str) -> None:
        """Save map to JSON file."""
        with open(filename, 'w') as f:
            json.dump(self.to_json(), f, indent=2)


def _coerce_terrain(terrain: TerrainLike) -> Terrain:
    if isinstance(terrain, Terrain):
        return terrain
    return Terrain(terrain)


def _normalize_elevation(elevation: Optional[int]) -> Optional[int]:
    # Ground level is stored as "no elevation"
    if not elevation:
        return None
    return int(elevation)


def _normalize_overlays(overlays: Iterable[str]) -> Tuple[str, ...]:
    stack: List[str] = []
    for tag in overlays:
        if tag not in stack:
            stack.append(tag)
    return tuple(stack[:MAX_OVERLAYS])


def _cells_from_records(records: Iterable[Mapping[str, Any]]) -> List[HexCell]:
    """Build cells from export records, skipping malformed ones."""
    cells: Dict[str, HexCell] = {}
    for index, record in enumerate(records):
        try:
            q = int(record["q"])
            r = int(record["r"])
            terrain = _coerce_terrain(record["terrain"])
            elevation = int(record.get("elevation") or 0)
            if elevation < 0:
                raise ValueError(f"negative elevation {elevation}")
            overlays = record.get("overlays") or []
            if isinstance(overlays, str):
                raise ValueError("overlays must be a list")
            cell = HexCell(q, r, terrain, _normalize_elevation(elevation),
                           _normalize_overlays(str(tag) for tag in overlays))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping malformed map record %d: %s", index, exc)
            continue
        cells[cell.key] = cell
    return list(cells.values())
