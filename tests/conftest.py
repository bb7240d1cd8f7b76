import os
import sys
import pytest

# Add project root to sys.path (so tests can import core.*)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(PROJECT_ROOT)

# Headless backend for PNG export tests
import matplotlib
matplotlib.use("Agg")

from core.store import EditorStore
from core.hex_map import HexMap
from core.scene_assets import SceneAssets
from core.pattern import PatternRings


@pytest.fixture
def store():
    """Empty shared store."""
    return EditorStore()


@pytest.fixture
def hex_map(store):
    return HexMap(store=store)


@pytest.fixture
def scene(store):
    return SceneAssets(store=store)


@pytest.fixture
def pattern(store):
    return PatternRings(store=store)


@pytest.fixture
def small_map(hex_map):
    """
    Returns a map with three cells and no history:
      (0,0) grass, elevation 2, overlays [tree]
      (1,0) water
      (0,1) sand
    """
    hex_map.load_records([
        {"q": 0, "r": 0, "terrain": "grass", "elevation": 2, "overlays": ["tree"]},
        {"q": 1, "r": 0, "terrain": "water"},
        {"q": 0, "r": 1, "terrain": "sand"},
    ])
    return hex_map
