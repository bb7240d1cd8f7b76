"""
PatternRings - ring pattern editor state.

An ordered list of rings (symmetry + stroke style) and the elements placed
on them. Elements belong to exactly one ring; removing a ring removes its
elements, so undoing that removal must bring back the ring and every one of
its elements at their former positions.
"""
from dataclasses import replace
from typing import List, Optional, Tuple

from core.commands import CompositeOperation
from core.store import EditorStore, StateSlice
from core.types import DEFAULT_RING_STYLE, Ring, RingElement, RingStyle


class PatternRings(StateSlice):
    """
    Rings and ring elements, both kept in display order.

    Attributes:
        rings: Rings, innermost first
        elements: Elements of all rings
    """

    operation_names = frozenset({
        "add_ring",
        "insert_ring",
        "remove_ring",
        "set_ring_symmetry",
        "set_ring_style",
        "add_element",
        "restore_element",
        "remove_element",
        "set_element_style",
    })

    def __init__(self, store: Optional[EditorStore] = None, name: str = "pattern"):
        super().__init__()
        self.rings: List[Ring] = []
        self.elements: List[RingElement] = []
        if store is None:
            store = EditorStore()
        store.register(name, self)

    # =============================================================================
    # QUERIES
    # =============================================================================

    def get_ring(self, ring_id: str) -> Optional[Ring]:
        for ring in self.rings:
            if ring.ring_id == ring_id:
                return ring
        return None

    def get_element(self, element_id: str) -> Optional[RingElement]:
        for element in self.elements:
            if element.element_id == element_id:
                return element
        return None

    def elements_of(self, ring_id: str) -> List[RingElement]:
        return [e for e in self.elements if e.ring_id == ring_id]

    def effective_style(self, element_id: str) -> Optional[RingStyle]:
        """Style an element is drawn with: its override, else its ring's style."""
        element = self.get_element(element_id)
        if element is None:
            return None
        if element.style_override is not None:
            return element.style_override
        ring = self.get_ring(element.ring_id)
        return ring.style if ring is not None else DEFAULT_RING_STYLE

    def _ring_index(self, ring_id: str) -> int:
        for index, ring in enumerate(self.rings):
            if ring.ring_id == ring_id:
                return index
        return -1

    def _element_index(self, element_id: str) -> int:
        for index, element in enumerate(self.elements):
            if element.element_id == element_id:
                return index
        return -1

    # =============================================================================
    # DIRECT MUTATIONS (replayed by history)
    # =============================================================================

    def add_ring(self, ring_id: str) -> bool:
        """Append a ring with 6-fold symmetry and the default style."""
        if self.get_ring(ring_id) is not None:
            return False
        self.rings.append(Ring(ring_id))
        return True

    def insert_ring(self, ring: Ring, index: int) -> bool:
        if self.get_ring(ring.ring_id) is not None:
            return False
        self.rings.insert(index, ring)
        return True

    def remove_ring(self, ring_id: str) -> bool:
        """Remove a ring together with all its elements."""
        if self.get_ring(ring_id) is None:
            return False
        self.rings = [r for r in self.rings if r.ring_id != ring_id]
        self.elements = [e for e in self.elements if e.ring_id != ring_id]
        return True

    def set_ring_symmetry(self, ring_id: str, symmetry: int) -> bool:
        index = self._ring_index(ring_id)
        if index < 0:
            return False
        self.rings[index] = replace(self.rings[index], symmetry=symmetry)
        return True

    def set_ring_style(self, ring_id: str, style: RingStyle) -> bool:
        index = self._ring_index(ring_id)
        if index < 0:
            return False
        self.rings[index] = replace(self.rings[index], style=style)
        return True

    def add_element(self, element: RingElement) -> bool:
        return self.restore_element(element, len(self.elements))

    def restore_element(self, element: RingElement, index: int) -> bool:
        if self.get_element(element.element_id) is not None:
            return False
        self.elements.insert(index, element)
        return True

    def remove_element(self, element_id: str) -> bool:
        index = self._element_index(element_id)
        if index < 0:
            return False
        del self.elements[index]
        return True

    def set_element_style(self, element_id: str, style: Optional[RingStyle]) -> bool:
        """Set or (with None) drop an element's style override."""
        index = self._element_index(element_id)
        if index < 0:
            return False
        self.elements[index] = replace(self.elements[index], style_override=style)
        return True

    # =============================================================================
    # COMMAND-BASED MUTATIONS
    # =============================================================================

    def cmd_add_ring(self, ring_id: str) -> bool:
        """Add a ring, then record the pair (the add already happened)."""
        if not self.add_ring(ring_id):
            return False
        return self.store.record(
            self.op("remove_ring", ring_id=ring_id),
            self.op("add_ring", ring_id=ring_id),
            f"Add ring {ring_id}",
        )

    def cmd_remove_ring(self, ring_id: str) -> bool:
        """Remove a ring; undo restores the ring and all its elements in place."""
        index = self._ring_index(ring_id)
        if index < 0:
            return False

        ring = self.rings[index]
        owned: List[Tuple[int, RingElement]] = [
            (i, e) for i, e in enumerate(self.elements) if e.ring_id == ring_id
        ]

        forward = self.op("remove_ring", ring_id=ring_id)
        # Elements go back in ascending index order so every position is exact
        inverse = CompositeOperation(
            (self.op("insert_ring", ring=ring, index=index),)
            + tuple(self.op("restore_element", element=e, index=i) for i, e in owned),
            "Restore ring",
        )
        return self.store.dispatch(forward, inverse, f"Remove ring {ring_id}")

    def cmd_set_ring_symmetry(self, ring_id: str, symmetry: int) -> bool:
        ring = self.get_ring(ring_id)
        if ring is None or symmetry < 1 or ring.symmetry == symmetry:
            return False

        forward = self.op("set_ring_symmetry", ring_id=ring_id, symmetry=symmetry)
        inverse = self.op("set_ring_symmetry", ring_id=ring_id, symmetry=ring.symmetry)
        return self.store.dispatch(forward, inverse, f"Ring {ring_id} symmetry {ring.symmetry} → {symmetry}")

    def cmd_update_ring_style(self, ring_id: str, **style) -> bool:
        """Merge some style fields into a ring's style."""
        ring = self.get_ring(ring_id)
        if ring is None:
            return False

        new_style = replace(ring.style, **style)
        if new_style == ring.style:
            return False

        forward = self.op("set_ring_style", ring_id=ring_id, style=new_style)
        inverse = self.op("set_ring_style", ring_id=ring_id, style=ring.style)
        return self.store.dispatch(forward, inverse, f"Style ring {ring_id}")

    def cmd_add_element(self, element: RingElement) -> bool:
        """Add an element to an existing ring, then record the pair."""
        if self.get_ring(element.ring_id) is None:
            return False
        if not self.add_element(element):
            return False
        return self.store.record(
            self.op("remove_element", element_id=element.element_id),
            self.op("add_element", element=element),
            f"Add element {element.element_id}",
        )

    def cmd_remove_element(self, element_id: str) -> bool:
        index = self._element_index(element_id)
        if index < 0:
            return False

        element = self.elements[index]
        forward = self.op("remove_element", element_id=element_id)
        inverse = self.op("restore_element", element=element, index=index)
        return self.store.dispatch(forward, inverse, f"Remove element {element_id}")

    def cmd_update_element_style(self, element_id: str, style: Optional[dict]) -> bool:
        """
        Override some style fields of one element, or drop the override (None).

        A new override starts from the element's current effective style.
        """
        element = self.get_element(element_id)
        if element is None:
            return False

        if style is None:
            new_override = None
        else:
            new_override = replace(self.effective_style(element_id), **style)
        if new_override == element.style_override:
            return False

        forward = self.op("set_element_style", element_id=element_id, style=new_override)
        inverse = self.op("set_element_style", element_id=element_id, style=element.style_override)
        return self.store.dispatch(forward, inverse, f"Style element {element_id}")
