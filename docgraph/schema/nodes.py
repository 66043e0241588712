"""
Node schema for extracted knowledge graphs.

Categories are free-form strings chosen by the extraction model. The prompt
steers it towards Person, Location, Object for concrete things and Concept
for abstract themes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

CONCEPT_CATEGORY = "Concept"


class Node(BaseModel):
    """
    Knowledge graph node.

    Ids are scoped to one merged graph; two chunks emitting the same id
    refer to the same node.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    category: str
    grounding_text: Optional[str] = None  # verbatim snippet from the document
    interpretation: Optional[str] = None  # why the entity matters

    @property
    def shape(self) -> str:
        """Display shape: abstract concepts are drawn as diamonds."""
        return "diamond" if self.category == CONCEPT_CATEGORY else "circle"
