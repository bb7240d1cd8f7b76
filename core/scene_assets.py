"""
SceneAssets - mesh assets placed in the 3D scene.

Holds imported meshes (opaque encoded buffers), their 4x4 transforms,
material settings and the current selection. Mesh decoding, rendering and
boolean operations live outside this module; a boolean union is handed in
as a finished MeshAsset and applied as one undoable step.
"""
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from core.commands import CompositeOperation
from core.store import EditorStore, StateSlice
from core.types import DEFAULT_MATERIAL, IDENTITY_MATRIX, MaterialProperties, MeshAsset


class SceneAssets(StateSlice):
    """
    Mesh assets keyed by id, plus the selected asset.

    Attributes:
        assets: Mapping of asset id to MeshAsset, insertion ordered
        selected_asset_id: Id of the selected asset, or None
    """

    operation_names = frozenset({
        "add_asset",
        "remove_asset",
        "select_asset",
        "set_transform",
        "set_material",
    })

    def __init__(self, store: Optional[EditorStore] = None, name: str = "geometry"):
        super().__init__()
        self.assets: Dict[str, MeshAsset] = {}
        self.selected_asset_id: Optional[str] = None
        if store is None:
            store = EditorStore()
        store.register(name, self)

    def get_asset(self, asset_id: str) -> Optional[MeshAsset]:
        return self.assets.get(asset_id)

    def get_selected_asset(self) -> Optional[MeshAsset]:
        if self.selected_asset_id is None:
            return None
        return self.assets.get(self.selected_asset_id)

    # =============================================================================
    # DIRECT MUTATIONS (replayed by history)
    # =============================================================================

    def add_asset(self, asset: MeshAsset, select: bool = True) -> bool:
        """Insert or overwrite an asset; newly added assets become selected."""
        self.assets[asset.asset_id] = asset
        if select:
            self.selected_asset_id = asset.asset_id
        return True

    def remove_asset(self, asset_id: str) -> bool:
        if self.assets.pop(asset_id, None) is None:
            return False
        if self.selected_asset_id == asset_id:
            self.selected_asset_id = None
        return True

    def select_asset(self, asset_id: Optional[str]) -> bool:
        if asset_id is not None and asset_id not in self.assets:
            return False
        self.selected_asset_id = asset_id
        return True

    def set_transform(self, asset_id: str, matrix: Iterable[float]) -> bool:
        asset = self.assets.get(asset_id)
        if asset is None:
            return False
        self.assets[asset_id] = replace(asset, matrix=_normalize_matrix(matrix))
        return True

    def set_material(self, asset_id: str, material: Optional[MaterialProperties]) -> bool:
        """Replace the material; None drops back to the default look."""
        asset = self.assets.get(asset_id)
        if asset is None:
            return False
        self.assets[asset_id] = replace(asset, material=material)
        return True

    # =============================================================================
    # COMMAND-BASED MUTATIONS
    # =============================================================================

    def cmd_add_asset(self, asset_id: str, name: str, buffer: bytes = b"",
                      matrix: Iterable[float] = IDENTITY_MATRIX) -> bool:
        """Add a mesh with an identity (or given) transform and select it."""
        if asset_id in self.assets:
            return False

        asset = MeshAsset(asset_id, name, bytes(buffer), _normalize_matrix(matrix))
        previous_selection = self.selected_asset_id
        self.add_asset(asset)

        undo = CompositeOperation((
            self.op("remove_asset", asset_id=asset_id),
            self.op("select_asset", asset_id=previous_selection),
        ), "Remove asset")
        redo = self.op("add_asset", asset=asset, select=True)
        return self.store.record(undo, redo, f"Add asset '{name}'")

    def cmd_remove_asset(self, asset_id: str) -> bool:
        asset = self.assets.get(asset_id)
        if asset is None:
            return False

        forward = self.op("remove_asset", asset_id=asset_id)
        inverse = CompositeOperation((
            self.op("add_asset", asset=asset, select=False),
            self.op("select_asset", asset_id=self.selected_asset_id),
        ), "Restore asset")
        return self.store.dispatch(forward, inverse, f"Remove asset '{asset.name}'")

    def cmd_select_asset(self, asset_id: Optional[str]) -> bool:
        """Change selection (not recorded in history)."""
        return self.select_asset(asset_id)

    def cmd_update_transform(self, asset_id: str, matrix: Iterable[float]) -> bool:
        """
        Replace an asset's transform.

        Raises:
            ValueError: If matrix does not hold exactly 16 numbers
        """
        matrix = _normalize_matrix(matrix)
        asset = self.assets.get(asset_id)
        if asset is None or asset.matrix == matrix:
            return False

        forward = self.op("set_transform", asset_id=asset_id, matrix=matrix)
        inverse = self.op("set_transform", asset_id=asset_id, matrix=asset.matrix)
        return self.store.dispatch(forward, inverse, f"Transform '{asset.name}'")

    def cmd_update_material(self, asset_id: str, **properties) -> bool:
        """
        Update some material properties, starting from defaults if the asset
        has no material yet. Unknown property names raise TypeError.
        """
        asset = self.assets.get(asset_id)
        if asset is None:
            return False

        material = replace(asset.material or DEFAULT_MATERIAL, **properties)
        if material == asset.material:
            return False

        forward = self.op("set_material", asset_id=asset_id, material=material)
        inverse = self.op("set_material", asset_id=asset_id, material=asset.material)
        return self.store.dispatch(forward, inverse, f"Material '{asset.name}'")

    def cmd_merge_assets(self, asset_a_id: str, asset_b_id: str, merged_asset: MeshAsset) -> bool:
        """
        Replace two assets with the result of their boolean union.

        The union itself is computed by the caller; this applies the finished
        result as one undoable step. Undo restores both sources and selects
        the first one.
        """
        asset_a = self.assets.get(asset_a_id)
        asset_b = self.assets.get(asset_b_id)
        if asset_a is None or asset_b is None or asset_a_id == asset_b_id:
            return False
        if merged_asset.asset_id in self.assets:
            return False

        forward = CompositeOperation((
            self.op("remove_asset", asset_id=asset_a_id),
            self.op("remove_asset", asset_id=asset_b_id),
            self.op("add_asset", asset=merged_asset, select=True),
        ), "Merge assets")
        inverse = CompositeOperation((
            self.op("remove_asset", asset_id=merged_asset.asset_id),
            self.op("add_asset", asset=asset_a, select=False),
            self.op("add_asset", asset=asset_b, select=False),
            self.op("select_asset", asset_id=asset_a_id),
        ), "Unmerge assets")
        return self.store.dispatch(forward, inverse, f"Merge '{asset_a.name}' + '{asset_b.name}'")

    def merge_with(self, asset_a_id: str, asset_b_id: str,
                   union: Callable[[MeshAsset, MeshAsset], MeshAsset]) -> bool:
        """Run an external union on two assets and apply its result."""
        asset_a = self.assets.get(asset_a_id)
        asset_b = self.assets.get(asset_b_id)
        if asset_a is None or asset_b is None:
            return False
        return self.cmd_merge_assets(asset_a_id, asset_b_id, union(asset_a, asset_b))

    def asset_ids(self) -> List[str]:
        return list(self.assets.keys())


def _normalize_matrix(matrix: Iterable[float]) -> Tuple[float, ...]:
    values = tuple(float(v) for v in matrix)
    if len(values) != 16:
        raise ValueError(f"Transform matrix needs 16 values, got {len(values)}")
    return values
