"""
Tests for the fan-out / fan-in orchestrator.
"""

import threading

import pytest

from docgraph.chunking import Chunk
from docgraph.errors import AllChunksFailed, ConfigurationError, MalformedResponse, TransportError
from docgraph.pipeline.orchestrator import Orchestrator
from docgraph.pipeline.state import QueueEntry, Status

from fakes import FakeClient, make_graph


def make_chunks(*texts: str) -> list[Chunk]:
    chunks = []
    offset = 0
    for i, text in enumerate(texts):
        chunks.append(Chunk(index=i, text=text, start=offset, end=offset + len(text)))
        offset += len(text)
    return chunks


ENTRY = QueueEntry(id="entry_1", source="moby.txt", status=Status.PROCESSING, instructions="Be brief")


class TestOrchestrator:
    """Tests for Orchestrator."""

    def test_merges_all_chunks(self):
        """Every chunk is extracted once, with the entry's instructions."""
        client = FakeClient(
            responses={
                "c0": make_graph("a", "b", links=(("a", "b", "r"),)),
                "c1": make_graph("b", "c"),
            }
        )

        graph = Orchestrator(client).run(ENTRY, make_chunks("c0", "c1"))

        assert [n.id for n in graph.nodes] == ["a", "b", "c"]
        assert len(graph.links) == 1
        assert sorted(client.calls) == [("c0", "Be brief"), ("c1", "Be brief")]
        assert graph.metadata.source == "moby.txt"
        assert (graph.metadata.chunks_total, graph.metadata.chunks_failed) == (2, 0)

    def test_partial_failure(self):
        """One failing chunk out of three still completes from the other two."""
        client = FakeClient(
            responses={
                "c0": make_graph("a"),
                "c1": MalformedResponse("missing relationships"),
                "c2": make_graph("c"),
            }
        )

        graph = Orchestrator(client).run(ENTRY, make_chunks("c0", "c1", "c2"))

        assert [n.id for n in graph.nodes] == ["a", "c"]
        assert graph.metadata.chunks_failed == 1

    def test_all_chunks_failed(self):
        """No successful chunk fails the entry."""
        client = FakeClient(
            responses={
                "c0": TransportError("down"),
                "c1": MalformedResponse("bad"),
                "c2": RuntimeError("unexpected"),
            }
        )

        with pytest.raises(AllChunksFailed) as exc_info:
            Orchestrator(client).run(ENTRY, make_chunks("c0", "c1", "c2"))
        assert exc_info.value.chunk_count == 3

    def test_failure_does_not_abort_siblings(self):
        """A fast failure does not cancel slower sibling calls."""
        client = FakeClient(
            responses={"c0": TransportError("down"), "c1": make_graph("late")},
            delays={"c1": 0.05},
        )

        graph = Orchestrator(client).run(ENTRY, make_chunks("c0", "c1"))

        assert [n.id for n in graph.nodes] == ["late"]

    def test_merge_order_independent_of_completion(self):
        """Results merge in chunk order even when later chunks finish first."""
        responses = {
            "c0": make_graph("shared", "a", label_prefix="first-"),
            "c1": make_graph("shared", "b", label_prefix="second-"),
            "c2": make_graph("shared", "c", label_prefix="third-"),
        }
        slow_first = FakeClient(responses=responses, delays={"c0": 0.1, "c1": 0.05})
        fast_first = FakeClient(responses=responses, delays={"c2": 0.1, "c1": 0.05})
        chunks = make_chunks("c0", "c1", "c2")

        one = Orchestrator(slow_first).run(ENTRY, chunks)
        two = Orchestrator(fast_first).run(ENTRY, chunks)

        assert [n.id for n in one.nodes] == ["shared", "a", "b", "c"]
        assert one.get_node("shared").label == "first-shared"
        assert one.model_dump_json() == two.model_dump_json()

    def test_calls_run_concurrently(self):
        """All chunk calls are in flight at the same time."""
        started = threading.Barrier(3, timeout=5)

        class BarrierClient(FakeClient):
            def extract(self, text, instructions=None):
                started.wait()
                return super().extract(text, instructions)

        graph = Orchestrator(BarrierClient()).run(ENTRY, make_chunks("c0", "c1", "c2"))

        assert len(graph.nodes) == 3

    def test_configuration_error_propagates(self):
        """A missing credential is not treated as a chunk failure."""
        client = FakeClient(responses={"c0": ConfigurationError("no key")})

        with pytest.raises(ConfigurationError):
            Orchestrator(client).run(ENTRY, make_chunks("c0"))

    def test_configuration_error_fails_entry_despite_successes(self):
        """A credential loss mid-run fails the entry even if siblings succeeded."""
        client = FakeClient(
            responses={
                "c0": make_graph("a"),
                "c1": ConfigurationError("no key"),
                "c2": make_graph("c"),
            }
        )

        with pytest.raises(ConfigurationError, match="no key"):
            Orchestrator(client).run(ENTRY, make_chunks("c0", "c1", "c2"))
        assert len(client.calls) == 3
