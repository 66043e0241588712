"""
Pipeline facade.

  submit → QueueStore → Scheduler → DocumentSource → Chunker →
    Orchestrator (N concurrent extraction calls) → Merger → QueueStore
"""

import logging
from typing import Optional

from ..extraction.client import ExtractionClient, LiteLLMExtractionClient
from ..parsing import DocumentSource
from ..schema import MergedGraph
from .config import PipelineConfig
from .scheduler import Scheduler
from .state import Listener, QueueEntry, QueueStore

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Document backlog to knowledge graph pipeline.

    Usage:
        with Pipeline(PipelineConfig(auto_refill=False)) as pipeline:
            entry_id = pipeline.submit("moby_dick.txt")
            pipeline.wait_until_idle()
            graph = pipeline.graph_for(entry_id)
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        client: Optional[ExtractionClient] = None,
        source: Optional[DocumentSource] = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            client: Extraction client (defaults to LiteLLM with config.model)
            source: Document source (defaults from config)
        """
        self.config = config or PipelineConfig()
        self.client = client or LiteLLMExtractionClient(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            api_key_env=self.config.api_key_env,
        )
        self.store = QueueStore()
        self.scheduler = Scheduler(self.store, self.client, source=source, config=self.config)

    # ── Lifecycle ───────────────────────────────────────────────────────

    def start(self) -> "Pipeline":
        self.scheduler.start()
        return self

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        self.scheduler.stop(wait=wait, timeout=timeout)

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        return self.scheduler.wait_until_idle(timeout)

    def __enter__(self) -> "Pipeline":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()

    # ── Caller operations ───────────────────────────────────────────────

    def submit(self, source: str, instructions: Optional[str] = None) -> str:
        return self.store.submit(source, instructions)

    def remove(self, entry_id: str) -> None:
        self.store.remove(entry_id)

    def clear(self) -> None:
        self.store.clear()

    def snapshot(self) -> list[QueueEntry]:
        return self.store.snapshot()

    def graph_for(self, entry_id: str) -> Optional[MergedGraph]:
        return self.store.graph_for(entry_id)

    def subscribe(self, listener: Listener) -> None:
        self.store.subscribe(listener)

    @property
    def configuration_error(self) -> Optional[str]:
        """Missing-credential message, or None once resolved."""
        return self.scheduler.configuration_error
