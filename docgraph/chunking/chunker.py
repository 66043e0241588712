"""Fixed-window document chunking with overlap.

No boundary detection: windows are cut at exact character offsets so the
same text, size and overlap always give the same chunks.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A document chunk with position info."""

    index: int
    text: str
    start: int
    end: int


# ── Configuration ──────────────────────────────────────────────────────────

DEFAULT_CHUNK_SIZE = 7000  # characters, safely under the model context limit
DEFAULT_CHUNK_OVERLAP = 500


def chunk_text(
    text: str,
    max_chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Chunk]:
    """Split text into overlapping windows of at most ``max_chunk_size``.

    Consecutive windows start ``max_chunk_size - overlap`` characters apart.
    The last window always ends at ``len(text)`` and is emitted once.

    Args:
        text: Full document text.
        max_chunk_size: Maximum characters per chunk.
        overlap: Characters shared by consecutive chunks.

    Returns:
        Chunks ordered by index, covering every character of ``text``.

    Raises:
        ValueError: If the size/overlap pair cannot make progress.
    """
    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
    if not 0 <= overlap < max_chunk_size:
        raise ValueError(
            f"overlap must be in [0, {max_chunk_size}), got {overlap}"
        )

    doc_len = len(text)
    if doc_len <= max_chunk_size:
        return [Chunk(index=0, text=text, start=0, end=doc_len)]

    stride = max_chunk_size - overlap
    chunks: list[Chunk] = []
    start = 0

    while True:
        end = min(start + max_chunk_size, doc_len)
        chunks.append(Chunk(index=len(chunks), text=text[start:end], start=start, end=end))
        if end == doc_len:
            break
        start += stride

    return chunks
