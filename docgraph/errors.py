"""
Error taxonomy for the document-processing pipeline.

Chunk-level errors (MalformedResponse, TransportError) are isolated by the
orchestrator. Entry-level errors end up as the entry's Failed message.
"""


class DocGraphError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(DocGraphError):
    """No credential is available for the extraction service."""


class FetchError(DocGraphError):
    """A document could not be retrieved."""


class DecodeError(DocGraphError):
    """A local document could not be decoded to text."""


class TransportError(DocGraphError):
    """The extraction service call failed."""


class MalformedResponse(DocGraphError):
    """The extraction service returned data that fails schema validation."""


class AllChunksFailed(DocGraphError):
    """Every chunk of a document failed extraction."""

    def __init__(self, chunk_count: int) -> None:
        self.chunk_count = chunk_count
        super().__init__(
            f"All {chunk_count} chunk(s) failed to process. Could not generate graph. "
            "This often happens with URLs that don't point to raw text."
        )


class DuplicateSourceError(DocGraphError, ValueError):
    """A source is already present in the queue."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Source already queued: {source}")
