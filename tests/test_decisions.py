"""Tests for the decision store."""

from unittest.mock import MagicMock

import pytest

from swipe_split.decisions import DecisionStore
from swipe_split.exceptions import InvalidDecisionError


@pytest.fixture
def store():
    """Create an empty decision store."""
    return DecisionStore()


class TestDecide:
    """Setting and overwriting decisions."""

    def test_sets_decision(self, store):
        """A decision can be read back."""
        store.decide(3, "split")

        assert store.get(3) == "split"
        assert 3 in store
        assert len(store) == 1

    def test_overwrites_decision(self, store):
        """Deciding twice keeps only the last tag."""
        store.decide(0, "personal")
        store.decide(0, "split50")

        assert store.snapshot() == {0: "split50"}

    def test_unknown_tag_raises_without_corrupting(self, store):
        """A bad tag leaves every other entry intact."""
        store.decide(0, "personal")
        store.decide(1, "split")

        with pytest.raises(InvalidDecisionError, match="bogus"):
            store.decide(1, "bogus")

        assert store.snapshot() == {0: "personal", 1: "split"}

    def test_undecided_is_none(self, store):
        """Absence means undecided."""
        assert store.get(42) is None
        assert 42 not in store


class TestUndoAndClear:
    """Removing decisions."""

    def test_undo_removes(self, store):
        """Undo forgets a decision."""
        store.decide(0, "split")
        store.undo(0)

        assert store.snapshot() == {}

    def test_undo_missing_is_noop(self, store):
        """Undoing an undecided id does nothing."""
        store.decide(1, "split")
        store.undo(0)

        assert store.snapshot() == {1: "split"}

    def test_clear(self, store):
        """Clear removes everything."""
        store.decide(0, "split")
        store.decide(1, "personal")
        store.clear()

        assert len(store) == 0


class TestRestore:
    """Seeding the store from a saved snapshot."""

    def test_restore_replaces_content(self, store):
        """Existing decisions are discarded."""
        store.decide(9, "personal")
        store.restore({0: "split", 5: "split50"})

        assert store.snapshot() == {0: "split", 5: "split50"}

    def test_restore_accepts_string_keys(self, store):
        """JSON round-trips turn keys into strings."""
        store.restore({"0": "split", "12": "personal"})

        assert store.snapshot() == {0: "split", 12: "personal"}

    def test_restore_keeps_unknown_ids(self, store):
        """Ids outside any working set are tolerated."""
        store.restore({"999": "split"})

        assert store.get(999) == "split"

    def test_restore_skips_malformed_entries(self, store):
        """Bad keys and unknown tags are dropped, the rest kept."""
        store.restore({"0": "split", "x": "personal", "2": "bogus", 1.5: "split", "3": "split50"})

        assert store.snapshot() == {0: "split", 3: "split50"}


class TestOnChange:
    """The persistence hook receives full snapshots."""

    def test_called_after_each_mutation(self):
        """decide, undo, restore and clear all notify."""
        callback = MagicMock()
        store = DecisionStore(on_change=callback)

        store.decide(0, "split")
        store.decide(1, "personal")
        store.undo(0)
        store.restore({"4": "split50"})
        store.clear()

        assert [c.args[0] for c in callback.call_args_list] == [
            {0: "split"},
            {0: "split", 1: "personal"},
            {1: "personal"},
            {4: "split50"},
            {},
        ]

    def test_not_called_on_noop_undo(self):
        """Nothing changed, nothing to save."""
        callback = MagicMock()
        store = DecisionStore(on_change=callback)

        store.undo(0)

        callback.assert_not_called()

    def test_not_called_on_invalid_tag(self):
        """A rejected decision does not notify."""
        callback = MagicMock()
        store = DecisionStore(on_change=callback)

        with pytest.raises(InvalidDecisionError):
            store.decide(0, "nope")

        callback.assert_not_called()

    def test_snapshot_is_a_copy(self):
        """Callers cannot mutate the store through a snapshot."""
        store = DecisionStore()
        store.decide(0, "split")

        snapshot = store.snapshot()
        snapshot[1] = "personal"

        assert store.snapshot() == {0: "split"}
