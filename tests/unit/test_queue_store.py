"""
Tests for the queue store.
"""

import pytest

from docgraph.errors import DuplicateSourceError
from docgraph.pipeline.state import QueueStore, Status
from docgraph.schema import MergedGraph


class TestQueueStore:
    """Tests for QueueStore."""

    def test_submit(self):
        """Submitted entries start Pending, in submission order."""
        store = QueueStore()
        first = store.submit("a.txt")
        second = store.submit("b.txt", instructions="Focus on ships")

        entries = store.snapshot()
        assert [e.id for e in entries] == [first, second]
        assert all(e.status == Status.PENDING for e in entries)
        assert entries[1].instructions == "Focus on ships"
        assert entries[0].instructions is None

    def test_ids_unique(self):
        """Ids are never reused, even after removal."""
        store = QueueStore()
        first = store.submit("a.txt")
        store.remove(first)
        second = store.submit("a.txt")

        assert first != second

    def test_duplicate_source(self):
        """Submitting a present source fails."""
        store = QueueStore()
        store.submit("a.txt")

        with pytest.raises(DuplicateSourceError):
            store.submit("a.txt")
        assert len(store) == 1

    def test_remove_idempotent(self):
        """Removing twice, or an unknown id, is harmless."""
        store = QueueStore()
        entry_id = store.submit("a.txt")

        store.remove(entry_id)
        store.remove(entry_id)
        store.remove("unknown")

        assert store.snapshot() == []

    def test_admit_respects_limit(self):
        """Admission fills free slots with the oldest Pending entries."""
        store = QueueStore()
        ids = [store.submit(f"doc-{i}") for i in range(5)]

        admitted = store.admit(3)

        assert [e.id for e in admitted] == ids[:3]
        assert all(e.status == Status.PROCESSING for e in admitted)
        assert store.count(Status.PROCESSING) == 3
        assert store.admit(3) == []

    def test_admit_after_completion(self):
        """A terminal entry frees exactly one slot."""
        store = QueueStore()
        ids = [store.submit(f"doc-{i}") for i in range(5)]
        store.admit(3)

        assert store.complete(ids[1], MergedGraph())
        admitted = store.admit(3)

        assert [e.id for e in admitted] == [ids[3]]

    def test_complete_stores_graph(self):
        """Completion records the graph; removal deletes it."""
        store = QueueStore()
        entry_id = store.submit("a.txt")
        store.admit(1)
        graph = MergedGraph()

        assert store.complete(entry_id, graph)
        assert store.get(entry_id).status == Status.COMPLETED
        assert store.graph_for(entry_id) is graph

        store.remove(entry_id)
        assert store.graph_for(entry_id) is None

    def test_fail_records_message(self):
        """Failure records a message."""
        store = QueueStore()
        entry_id = store.submit("a.txt")
        store.admit(1)

        assert store.fail(entry_id, "Failed to process a.txt: boom")
        assert store.get(entry_id).error == "Failed to process a.txt: boom"
        assert store.is_idle()

    def test_late_result_for_removed_entry(self):
        """Outcomes for removed entries are discarded."""
        store = QueueStore()
        entry_id = store.submit("a.txt")
        store.admit(1)
        store.remove(entry_id)

        assert not store.complete(entry_id, MergedGraph())
        assert not store.fail(entry_id, "late")
        assert store.snapshot() == []
        assert store.graph_for(entry_id) is None

    def test_terminal_states_are_final(self):
        """No transition leaves a terminal state."""
        store = QueueStore()
        entry_id = store.submit("a.txt")

        assert not store.complete(entry_id, MergedGraph())  # still Pending
        store.admit(1)
        assert store.fail(entry_id, "boom")
        assert not store.complete(entry_id, MergedGraph())
        assert store.get(entry_id).status == Status.FAILED

    def test_records_replaced_not_mutated(self):
        """Earlier snapshots keep their view of an entry."""
        store = QueueStore()
        store.submit("a.txt")
        before = store.snapshot()
        store.admit(1)

        assert before[0].status == Status.PENDING
        assert store.snapshot()[0].status == Status.PROCESSING

    def test_extend_skips_present_sources(self):
        """Bulk additions never duplicate a source."""
        store = QueueStore()
        store.submit("b")

        added = store.extend(["a", "b", "c", "a"])

        assert len(added) == 2
        assert [e.source for e in store.snapshot()] == ["b", "a", "c"]

    def test_clear(self):
        """Clearing removes entries and graphs."""
        store = QueueStore()
        entry_id = store.submit("a.txt")
        store.admit(1)
        store.complete(entry_id, MergedGraph())

        store.clear()

        assert len(store) == 0
        assert store.graph_for(entry_id) is None

    def test_notifications(self):
        """Every change notifies subscribers with a snapshot."""
        store = QueueStore()
        seen: list[list[Status]] = []

        def listener(entries):
            seen.append([e.status for e in entries])

        store.subscribe(listener)
        entry_id = store.submit("a.txt")
        store.admit(1)
        store.complete(entry_id, MergedGraph())
        store.remove("unknown")  # no change, no notification
        store.unsubscribe(listener)
        store.remove(entry_id)

        assert seen == [[Status.PENDING], [Status.PROCESSING], [Status.COMPLETED]]

    def test_listener_may_read_store(self):
        """Listeners run outside the lock and can query the store."""
        store = QueueStore()
        counts: list[int] = []
        store.subscribe(lambda entries: counts.append(store.count(Status.PENDING)))

        store.submit("a.txt")

        assert counts == [1]

    def test_failing_listener_does_not_block_others(self):
        """A raising listener is skipped; the change and later listeners proceed."""
        store = QueueStore()
        seen: list[Status] = []

        def broken(entries):
            raise RuntimeError("observer bug")

        store.subscribe(broken)
        store.subscribe(lambda entries: seen.extend(e.status for e in entries))
        entry_id = store.submit("a.txt")
        admitted = store.admit(1)

        assert [e.id for e in admitted] == [entry_id]
        assert store.get(entry_id).status == Status.PROCESSING
        assert seen == [Status.PENDING, Status.PROCESSING]

    def test_subscribe_twice_notifies_once(self):
        store = QueueStore()
        calls: list[int] = []

        def listener(entries):
            calls.append(len(entries))

        store.subscribe(listener)
        store.subscribe(listener)
        store.submit("a.txt")

        assert calls == [1]
