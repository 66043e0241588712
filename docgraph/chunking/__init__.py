"""
Document chunking module.

Splits oversized documents into overlapping fixed-size windows.
"""

from .chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, Chunk, chunk_text

__all__ = ["Chunk", "chunk_text", "DEFAULT_CHUNK_SIZE", "DEFAULT_CHUNK_OVERLAP"]
