"""
SceneAssets tests: add/remove with selection, transforms, materials and
merging two assets into one undoable step.
"""

import pytest

from core.types import DEFAULT_MATERIAL, IDENTITY_MATRIX, MeshAsset

MOVED = tuple(float(v) for v in (
    1, 0, 0, 0,
    0, 1, 0, 0,
    0, 0, 1, 0,
    2, 3, 4, 1,
))


def test_add_asset_selects_and_undo_restores_selection(scene):
    assert scene.cmd_add_asset("a", "Cube", b"\x00\x01")
    assert scene.cmd_add_asset("b", "Sphere")
    assert scene.selected_asset_id == "b"
    assert scene.get_asset("a").matrix == IDENTITY_MATRIX

    scene.undo()
    assert scene.get_asset("b") is None
    assert scene.selected_asset_id == "a"

    scene.redo()
    assert scene.selected_asset_id == "b"
    assert scene.asset_ids() == ["a", "b"]


def test_duplicate_asset_id_rejected(scene):
    scene.cmd_add_asset("a", "Cube")
    assert scene.cmd_add_asset("a", "Other") is False
    assert scene.get_asset("a").name == "Cube"


def test_remove_asset_undo(scene):
    scene.cmd_add_asset("a", "Cube")
    assert scene.cmd_remove_asset("a")
    assert scene.get_selected_asset() is None

    scene.undo()
    assert scene.get_asset("a").name == "Cube"
    assert scene.selected_asset_id == "a"
    assert scene.cmd_remove_asset("missing") is False


def test_select_is_not_recorded(scene):
    scene.cmd_add_asset("a", "Cube")
    scene.cmd_add_asset("b", "Sphere")
    past = scene.get_history_info()["past_commands"]

    assert scene.cmd_select_asset("a")
    assert scene.cmd_select_asset("missing") is False
    assert scene.cmd_select_asset(None)
    assert scene.get_history_info()["past_commands"] == past


def test_update_transform_undo(scene):
    scene.cmd_add_asset("a", "Cube")
    assert scene.cmd_update_transform("a", MOVED)
    assert scene.get_asset("a").matrix == MOVED
    assert scene.cmd_update_transform("a", MOVED) is False

    scene.undo()
    assert scene.get_asset("a").matrix == IDENTITY_MATRIX


def test_transform_needs_16_values(scene):
    scene.cmd_add_asset("a", "Cube")
    with pytest.raises(ValueError):
        scene.cmd_update_transform("a", [1.0, 0.0, 0.0])


def test_update_material_starts_from_defaults(scene):
    scene.cmd_add_asset("a", "Cube")
    assert scene.get_asset("a").material is None

    assert scene.cmd_update_material("a", base_color="#ff0000", metallic=0.5)
    material = scene.get_asset("a").material
    assert material.base_color == "#ff0000"
    assert material.metallic == 0.5
    assert material.roughness == DEFAULT_MATERIAL.roughness

    scene.undo()
    assert scene.get_asset("a").material is None


def test_update_material_unknown_property(scene):
    scene.cmd_add_asset("a", "Cube")
    with pytest.raises(TypeError):
        scene.cmd_update_material("a", shininess=3)


def test_merge_assets_undo_redo(scene):
    scene.cmd_add_asset("a", "Cube")
    scene.cmd_add_asset("b", "Sphere")
    merged = MeshAsset("ab", "Cube + Sphere", b"merged")

    assert scene.cmd_merge_assets("a", "b", merged)
    assert scene.asset_ids() == ["ab"]
    assert scene.selected_asset_id == "ab"

    scene.undo()
    assert sorted(scene.asset_ids()) == ["a", "b"]
    assert scene.selected_asset_id == "a"

    scene.redo()
    assert scene.asset_ids() == ["ab"]


def test_merge_rejects_bad_input(scene):
    scene.cmd_add_asset("a", "Cube")
    merged = MeshAsset("ab", "Merged")
    assert scene.cmd_merge_assets("a", "missing", merged) is False
    assert scene.cmd_merge_assets("a", "a", merged) is False


def test_merge_with_external_union(scene):
    scene.cmd_add_asset("a", "Cube", b"A")
    scene.cmd_add_asset("b", "Sphere", b"B")

    def union(first, second):
        return MeshAsset(f"{first.asset_id}+{second.asset_id}", "Union", first.buffer + second.buffer)

    assert scene.merge_with("a", "b", union)
    assert scene.get_asset("a+b").buffer == b"AB"
