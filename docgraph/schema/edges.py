"""
Link schema for extracted knowledge graphs.
"""

from pydantic import BaseModel, ConfigDict


class Link(BaseModel):
    """
    Directed, labelled relationship between two nodes.

    Links carry no id of their own; (source_id, target_id, label) is the
    identity used for deduplication.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    target_id: str
    label: str

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source_id, self.target_id, self.label)
