"""
Tests for extraction response validation.
"""

import json

import pytest

from docgraph.errors import MalformedResponse
from docgraph.extraction.response import parse_extraction_response


def make_response(**overrides) -> str:
    data = {
        "entities": [
            {
                "id": "captain_ahab",
                "label": "Captain Ahab",
                "type": "Person",
                "sourceText": "Captain Ahab stood upon his quarter-deck.",
                "summary": "The monomaniacal captain driving the hunt.",
            },
            {"id": "obsession", "label": "Obsession", "type": "Concept"},
        ],
        "relationships": [
            {"source": "captain_ahab", "target": "obsession", "label": "is consumed by"},
        ],
    }
    data.update(overrides)
    return json.dumps(data)


class TestParseExtractionResponse:
    """Tests for parse_extraction_response."""

    def test_parse_valid_response(self):
        """Wire fields map onto nodes and links."""
        graph = parse_extraction_response(make_response())

        ahab = graph.nodes[0]
        assert ahab.category == "Person"
        assert ahab.grounding_text.startswith("Captain Ahab")
        assert ahab.interpretation == "The monomaniacal captain driving the hunt."
        assert graph.nodes[1].grounding_text is None
        assert [link.key for link in graph.links] == [
            ("captain_ahab", "obsession", "is consumed by")
        ]

    def test_parse_tolerates_surrounding_text(self):
        """JSON wrapped in prose or fences is still parsed."""
        text = "```json\n" + make_response() + "\n```"
        assert len(parse_extraction_response(text).nodes) == 2

    @pytest.mark.parametrize("missing", ["entities", "relationships"])
    def test_missing_collection(self, missing):
        """A response lacking either collection is malformed."""
        data = json.loads(make_response())
        del data[missing]

        with pytest.raises(MalformedResponse, match="did not contain"):
            parse_extraction_response(json.dumps(data))

    @pytest.mark.parametrize(
        "entity",
        [
            {"id": "x", "type": "Concept"},
            {"id": "", "label": "x", "type": "Concept"},
        ],
    )
    def test_missing_required_field(self, entity):
        """Entities without a label or with an empty id fail validation."""
        text = make_response(entities=[entity], relationships=[])
        with pytest.raises(MalformedResponse, match="schema validation"):
            parse_extraction_response(text)

    @pytest.mark.parametrize("text", ["", "not json at all", "[1, 2, 3]", "{broken"])
    def test_unparseable(self, text):
        """Non-object or invalid JSON is malformed."""
        with pytest.raises(MalformedResponse):
            parse_extraction_response(text)

    def test_dangling_links_dropped(self):
        """Links to entities not in the same response are dropped."""
        text = make_response(
            relationships=[
                {"source": "captain_ahab", "target": "moby_dick", "label": "hunts"},
                {"source": "captain_ahab", "target": "obsession", "label": "embodies"},
            ]
        )

        graph = parse_extraction_response(text)

        assert [link.label for link in graph.links] == ["embodies"]

    def test_dangling_links_kept_on_request(self):
        """Dangling links survive when filtering is disabled."""
        text = make_response(
            relationships=[{"source": "captain_ahab", "target": "moby_dick", "label": "hunts"}]
        )
        graph = parse_extraction_response(text, drop_dangling_links=False)
        assert len(graph.links) == 1
