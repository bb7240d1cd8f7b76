"""
Command log tests:
- push discards the future
- undo/redo on empty stacks change nothing
- max_history drops the oldest entries
- record() pushes without executing, dispatch() executes
- composite operations apply in order
"""

import pytest

from core.commands import CommandEntry, CommandHistory, CompositeOperation, SliceOperation
from core.store import EditorStore, StateSlice


class Counter(StateSlice):
    """Minimal slice: a value and a log of the operations it received."""

    operation_names = frozenset({"set_value", "append"})

    def __init__(self):
        super().__init__()
        self.value = 0
        self.log = []

    def set_value(self, value):
        self.value = value

    def append(self, item):
        self.log.append(item)


@pytest.fixture
def counter(store):
    return store.register("counter", Counter())


def _set(counter, old, new):
    counter.store.dispatch(counter.op("set_value", value=new),
                           counter.op("set_value", value=old),
                           f"{old} -> {new}")


def test_dispatch_applies_and_records(store, counter):
    _set(counter, 0, 5)
    assert counter.value == 5
    assert store.can_undo() and not store.can_redo()
    assert store.get_undo_description() == "0 -> 5"


def test_undo_redo_restores_state(store, counter):
    _set(counter, 0, 1)
    _set(counter, 1, 2)

    assert store.undo()
    assert counter.value == 1
    assert store.get_redo_description() == "1 -> 2"
    assert store.redo()
    assert counter.value == 2


def test_push_clears_future(store, counter):
    _set(counter, 0, 1)
    _set(counter, 1, 2)
    store.undo()
    assert store.can_redo()

    _set(counter, 1, 7)
    assert not store.can_redo()
    assert store.history.future == []


def test_empty_stacks_are_noops(store, counter):
    assert store.undo() is False
    assert store.redo() is False
    _set(counter, 0, 3)
    assert store.redo() is False
    info = store.get_history_info()
    assert info["past_commands"] == 1
    assert info["future_commands"] == 0
    assert counter.value == 3


def test_max_history_drops_oldest():
    store = EditorStore(max_history=3)
    counter = store.register("counter", Counter())
    for i in range(5):
        _set(counter, i, i + 1)

    assert len(store.history.past) == 3
    while store.undo():
        pass
    # Entries 0->1 and 1->2 fell off the log
    assert counter.value == 2


def test_unbounded_history():
    history = CommandHistory(max_history=None)
    noop = CompositeOperation(())
    for _ in range(250):
        history.push(CommandEntry(noop, noop))
    assert len(history.past) == 250


@pytest.mark.parametrize("size", [0, -5])
def test_invalid_max_history(size):
    with pytest.raises(ValueError):
        CommandHistory(max_history=size)


def test_record_does_not_execute(store, counter):
    counter.value = 4
    store.record(counter.op("set_value", value=0), counter.op("set_value", value=4), "set 4")
    assert counter.value == 4

    store.undo()
    assert counter.value == 0
    store.redo()
    assert counter.value == 4


def test_composite_applies_in_order(store, counter):
    forward = CompositeOperation((
        counter.op("append", item="a"),
        counter.op("append", item="b"),
        counter.op("append", item="c"),
    ), "abc")
    store.dispatch(forward, CompositeOperation(()), "")
    assert counter.log == ["a", "b", "c"]
    assert store.get_undo_description() == "abc (3 operations)"


def test_unknown_operation_rejected(store, counter):
    with pytest.raises(ValueError):
        SliceOperation("counter", "__init__", {}).apply(store)


def test_unknown_slice_and_duplicate_name(store, counter):
    with pytest.raises(KeyError):
        store.get_slice("missing")
    with pytest.raises(ValueError):
        store.register("counter", Counter())


def test_clear_history(store, counter):
    _set(counter, 0, 1)
    store.undo()
    store.clear_history()
    info = store.get_history_info()
    assert info == {
        "past_commands": 0,
        "future_commands": 0,
        "can_undo": False,
        "can_redo": False,
        "undo_description": None,
        "redo_description": None,
    }
