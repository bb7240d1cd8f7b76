"""
EditorStore - single dispatch point for every state slice of the editor.

Independent editors (map cells, scene assets, pattern rings) register as
named slices and share one command history. A reversible edit is dispatched
as a forward operation plus the inverse computed from the state observed just
before it; the store applies the forward step and records the pair.
"""
import logging
from typing import Any, Dict, FrozenSet, Optional

from core.commands import CommandEntry, CommandHistory, Operation, SliceOperation
from core.types import MAX_HISTORY

logger = logging.getLogger(__name__)


class StateSlice:
    """
    Base class for a piece of editor state driven through the store.

    Subclasses list the operations they accept in ``operation_names``; each
    name is a method taking the payload as keyword arguments. Those methods
    are the only way recorded history touches the slice.
    """

    operation_names: FrozenSet[str] = frozenset()

    def __init__(self):
        self.store: Optional["EditorStore"] = None
        self.slice_name: Optional[str] = None

    def attach(self, store: "EditorStore", name: str) -> None:
        self.store = store
        self.slice_name = name

    def apply_operation(self, name: str, payload: Dict[str, Any]) -> None:
        """Run a named operation (used by history replay)."""
        if name not in self.operation_names:
            raise ValueError(f"{type(self).__name__} has no operation '{name}'")
        getattr(self, name)(**payload)

    def op(self, operation_name: str, **payload) -> SliceOperation:
        """Describe one of this slice's operations as a history payload."""
        return SliceOperation(self.slice_name, operation_name, payload)

    # =============================================================================
    # UNDO/REDO OPERATIONS (delegated to the shared store)
    # =============================================================================

    def undo(self) -> bool:
        """Undo the last operation in the shared history."""
        return self.store.undo()

    def redo(self) -> bool:
        """Redo the next operation in the shared history."""
        return self.store.redo()

    def can_undo(self) -> bool:
        return self.store.can_undo()

    def can_redo(self) -> bool:
        return self.store.can_redo()

    def clear_history(self) -> None:
        self.store.clear_history()

    def get_history_info(self) -> Dict:
        return self.store.get_history_info()


class EditorStore:
    """
    Registry of state slices plus the shared command history.

    Attributes:
        slices: Mapping of slice name to StateSlice
        history: Past/future stacks of recorded entries
    """

    def __init__(self, max_history: Optional[int] = MAX_HISTORY):
        self.slices: Dict[str, StateSlice] = {}
        self.history: CommandHistory = CommandHistory(max_history=max_history)

    def register(self, name: str, state_slice: StateSlice) -> StateSlice:
        """Add a slice under a unique name and bind it to this store."""
        if name in self.slices:
            raise ValueError(f"Slice '{name}' is already registered")
        self.slices[name] = state_slice
        state_slice.attach(self, name)
        return state_slice

    def get_slice(self, name: str) -> StateSlice:
        try:
            return self.slices[name]
        except KeyError:
            raise KeyError(f"No slice registered as '{name}'") from None

    # =============================================================================
    # DISPATCH
    # =============================================================================

    def apply(self, operation: Operation) -> None:
        """Apply an operation without recording it (loads, resets)."""
        logger.debug("apply %s", operation.describe())
        operation.apply(self)

    def dispatch(self, forward: Operation, inverse: Operation, description: str = "") -> bool:
        """
        Apply a reversible edit and record it.

        Args:
            forward: Mutation to apply now (also used for redo)
            inverse: Mutation restoring the state observed before ``forward``
            description: Human-readable label for history displays

        Returns:
            True once applied and recorded
        """
        forward.apply(self)
        self.history.push(CommandEntry(inverse, forward, description))
        logger.debug("dispatch %s", description or forward.describe())
        return True

    def record(self, undo_operation: Operation, redo_operation: Operation, description: str = "") -> bool:
        """
        Record an edit whose forward step already happened through direct calls.

        Nothing is executed; the pair is pushed as-is.
        """
        self.history.push(CommandEntry(undo_operation, redo_operation, description))
        logger.debug("record %s", description or redo_operation.describe())
        return True

    # =============================================================================
    # UNDO/REDO OPERATIONS
    # =============================================================================

    def undo(self) -> bool:
        """Undo the last recorded edit. False when history is empty."""
        description = self.history.get_undo_description()
        done = self.history.undo(self)
        if done:
            logger.debug("undo %s", description)
        return done

    def redo(self) -> bool:
        """Redo the last undone edit. False when there is nothing to redo."""
        description = self.history.get_redo_description()
        done = self.history.redo(self)
        if done:
            logger.debug("redo %s", description)
        return done

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def get_undo_description(self) -> Optional[str]:
        return self.history.get_undo_description()

    def get_redo_description(self) -> Optional[str]:
        return self.history.get_redo_description()

    def clear_history(self) -> None:
        """Clear undo/redo history."""
        self.history.clear_history()

    def get_history_info(self) -> Dict:
        """Get detailed history information."""
        return self.history.get_history_info()
