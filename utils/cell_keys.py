"""
Cell key helpers: the "q,r" string that addresses a cell in the map store
and in exported snapshots.
"""
from typing import Tuple


def cell_key(q: int, r: int) -> str:
    """Convert an axial pair to its canonical key string."""
    return f"{q},{r}"


def parse_cell_key(key: str) -> Tuple[int, int]:
    """Convert a key string back to (q, r). Raises ValueError if malformed."""
    q, r = key.split(',')
    return int(q), int(r)
