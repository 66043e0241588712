"""Schema validation of raw extraction responses.

Nothing reaches the merger without passing through
``parse_extraction_response``: the model's JSON is validated against the
wire schema and converted to a ``PartialGraph``, or rejected with
``MalformedResponse``.
"""

import json
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import MalformedResponse
from ..schema import Link, Node, PartialGraph


class _WireEntity(BaseModel):
    id: str = Field(min_length=1)
    label: str
    type: str
    sourceText: Optional[str] = None
    summary: Optional[str] = None


class _WireRelationship(BaseModel):
    source: str
    target: str
    label: str


class _WireResponse(BaseModel):
    entities: list[_WireEntity]
    relationships: list[_WireRelationship]


def _load_json(text: str) -> dict:
    """Decode the model output, tolerating text around the JSON object."""
    text = (text or "").strip()
    if not text:
        raise MalformedResponse("Empty response from the extraction model.")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}") + 1
        if start < 0 or end <= start:
            raise MalformedResponse("Failed to parse the response from the AI model.")
        try:
            data = json.loads(text[start:end])
        except json.JSONDecodeError as e:
            raise MalformedResponse("Failed to parse the response from the AI model.") from e
    if not isinstance(data, dict):
        raise MalformedResponse("AI response is not a JSON object.")
    return data


def parse_extraction_response(text: str, drop_dangling_links: bool = True) -> PartialGraph:
    """
    Validate raw model output and convert it to a partial graph.

    Args:
        text: Raw response text from the model.
        drop_dangling_links: Drop links whose endpoints are not among this
            response's entities.

    Returns:
        PartialGraph with nodes and links in response order.

    Raises:
        MalformedResponse: Invalid JSON, missing 'entities' or
            'relationships', or an item missing a required field.
    """
    data = _load_json(text)

    if "entities" not in data or "relationships" not in data:
        raise MalformedResponse(
            "AI response did not contain 'entities' or 'relationships' fields."
        )

    try:
        wire = _WireResponse.model_validate(data)
        nodes = [
            Node(
                id=e.id,
                label=e.label,
                category=e.type,
                grounding_text=e.sourceText,
                interpretation=e.summary,
            )
            for e in wire.entities
        ]
        links = [
            Link(source_id=r.source, target_id=r.target, label=r.label)
            for r in wire.relationships
        ]
    except ValidationError as e:
        raise MalformedResponse(f"AI response failed schema validation: {e.error_count()} error(s)") from e

    if drop_dangling_links:
        node_ids = {n.id for n in nodes}
        links = [
            link for link in links
            if link.source_id in node_ids and link.target_id in node_ids
        ]

    return PartialGraph(nodes=nodes, links=links)
