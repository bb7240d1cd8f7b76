"""
Command log for undo/redo across every editable state slice.

History entries store operation descriptions by value: which slice, which
named operation, which payload. Nothing in the log closes over live state,
so any entry can be replayed on its own.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.types import MAX_HISTORY

class Operation(ABC):
    """Abstract base class for a replayable state mutation."""

    @abstractmethod
    def apply(self, store) -> None:
        """Apply the mutation to the store's slices."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Get human-readable description of the operation."""
        pass

@dataclass(frozen=True)
class SliceOperation(Operation):
    """Named operation with its payload, addressed to one state slice."""
    target: str
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def apply(self, store) -> None:
        store.get_slice(self.target).apply_operation(self.name, self.payload)

    def describe(self) -> str:
        return f"{self.target}.{self.name}"

@dataclass(frozen=True)
class CompositeOperation(Operation):
    """Several operations applied in order as one unit."""
    operations: Tuple[Operation, ...]
    label: str = "batch"

    def apply(self, store) -> None:
        for operation in self.operations:
            operation.apply(store)

    def describe(self) -> str:
        return f"{self.label} ({len(self.operations)} operations)"

@dataclass(frozen=True)
class CommandEntry:
    """Undo/redo pair; both operations are complete on their own."""
    undo_operation: Operation
    redo_operation: Operation
    description: str = ""

    def get_description(self) -> str:
        return self.description or self.redo_operation.describe()

class CommandHistory:
    """
    Past and future stacks of command entries.

    Pushing a new entry always discards the future: history does not branch.
    """

    def __init__(self, max_history: Optional[int] = MAX_HISTORY):
        if max_history is not None and max_history <= 0:
            raise ValueError(f"max_history must be positive: {max_history}")
        self.max_history = max_history
        self.past: List[CommandEntry] = []
        self.future: List[CommandEntry] = []

    def push(self, entry: CommandEntry) -> None:
        """Record an entry that has already taken effect."""
        self.past.append(entry)
        self.future.clear()

        # Limit history size
        if self.max_history is not None and len(self.past) > self.max_history:
            self.past.pop(0)

    def can_undo(self) -> bool:
        """Check if undo is possible."""
        return len(self.past) > 0

    def can_redo(self) -> bool:
        """Check if redo is possible."""
        return len(self.future) > 0

    def undo(self, store) -> bool:
        """Undo the last entry. Returns False when there is nothing to undo."""
        if not self.can_undo():
            return False

        entry = self.past[-1]
        entry.undo_operation.apply(store)
        self.past.pop()
        self.future.append(entry)
        return True

    def redo(self, store) -> bool:
        """Redo the last undone entry. Returns False when there is nothing to redo."""
        if not self.can_redo():
            return False

        entry = self.future[-1]
        entry.redo_operation.apply(store)
        self.future.pop()
        self.past.append(entry)
        return True

    def get_undo_description(self) -> Optional[str]:
        """Get description of the entry that would be undone."""
        if not self.can_undo():
            return None
        return self.past[-1].get_description()

    def get_redo_description(self) -> Optional[str]:
        """Get description of the entry that would be redone."""
        if not self.can_redo():
            return None
        return self.future[-1].get_description()

    def clear_history(self):
        """Clear all command history."""
        self.past.clear()
        self.future.clear()

    def get_history_info(self) -> Dict[str, Any]:
        """Get information about current history state."""
        return {
            "past_commands": len(self.past),
            "future_commands": len(self.future),
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
            "undo_description": self.get_undo_description(),
            "redo_description": self.get_redo_description()
        }
