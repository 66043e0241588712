"""
Fan-out / fan-in of one entry's chunks.

Every chunk gets its own extraction call and all calls run at once. A
failing call yields an absent result instead of aborting its siblings.
Results are merged in chunk order, never in completion order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional

from ..chunking import Chunk
from ..errors import AllChunksFailed, ConfigurationError
from ..extraction.client import ExtractionClient
from ..extraction.merger import merge_graphs
from ..schema import GraphMetadata, MergedGraph, PartialGraph
from .state import QueueEntry

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Drive concurrent extraction calls for the chunks of one entry.

    There is no cap on concurrent calls per entry: a document with N chunks
    issues N simultaneous requests.
    """

    def __init__(self, client: ExtractionClient) -> None:
        self.client = client

    def run(self, entry: QueueEntry, chunks: list[Chunk]) -> MergedGraph:
        """
        Extract every chunk and merge the successful results.

        Args:
            entry: The entry being processed (source and instructions)
            chunks: The entry's chunks, ordered by index

        Returns:
            Merged graph built from the successful chunks in index order

        Raises:
            AllChunksFailed: No chunk produced a result
            ConfigurationError: The credential disappeared mid-run. This
                fails the entry even when sibling chunks succeeded.
        """
        if not chunks:
            raise AllChunksFailed(0)

        results: list[tuple[int, Optional[PartialGraph]]] = []

        with ThreadPoolExecutor(
            max_workers=len(chunks), thread_name_prefix=f"extract-{entry.id}"
        ) as pool:
            futures = {
                pool.submit(self._extract_chunk, entry, chunk): chunk.index
                for chunk in chunks
            }
            for future in as_completed(futures):
                results.append((futures[future], future.result()))

        results.sort(key=lambda pair: pair[0])
        successes = [graph for _, graph in results if graph is not None]
        failed = len(chunks) - len(successes)

        if not successes:
            raise AllChunksFailed(len(chunks))

        if failed:
            logger.warning(
                "%s: %d/%d chunks failed, merging the rest", entry.source, failed, len(chunks)
            )

        merged = merge_graphs(successes)
        return merged.model_copy(
            update={
                "metadata": GraphMetadata(
                    source=entry.source,
                    chunks_total=len(chunks),
                    chunks_failed=failed,
                )
            }
        )

    def _extract_chunk(self, entry: QueueEntry, chunk: Chunk) -> Optional[PartialGraph]:
        try:
            return self.client.extract(chunk.text, entry.instructions)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning(
                "A chunk failed to process for %s (chunk %d): %s", entry.source, chunk.index, e
            )
            return None
