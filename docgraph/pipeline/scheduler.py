"""
Admission-controlled scheduling of queue entries.

A single loop thread re-evaluates admission whenever the QueueStore
changes. Store notifications only set a dirty flag and wake the loop, so
evaluation never runs re-entrantly and no change is missed.

Per entry:
  Pending → Processing → Completed | Failed

Each admitted entry runs on its own worker thread:
  credentials → DocumentSource → chunk_text → Orchestrator → complete/fail
"""

import logging
import threading
import time
from typing import Optional

from ..chunking import chunk_text
from ..errors import ConfigurationError, DocGraphError
from ..extraction.client import ExtractionClient
from ..parsing import DocumentSource
from .config import PipelineConfig, RefillBatch
from .orchestrator import Orchestrator
from .state import QueueEntry, QueueStore

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Admit Pending entries up to ``max_concurrent_jobs`` and drive them.

    Extraction calls have no timeout: a stalled call keeps its entry
    Processing and its slot occupied.
    """

    def __init__(
        self,
        store: QueueStore,
        client: ExtractionClient,
        source: Optional[DocumentSource] = None,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            store: Queue store to schedule from
            client: Extraction client shared by all entries
            source: Document source (defaults from config)
            config: Pipeline configuration
        """
        self.store = store
        self.client = client
        self.config = config or PipelineConfig()
        self.source = source or DocumentSource(
            min_chars=self.config.min_document_chars,
            timeout=self.config.fetch_timeout,
        )
        self.orchestrator = Orchestrator(client)

        self._cond = threading.Condition()
        self._dirty = True  # evaluate once on start
        self._evaluating = False
        self._active = 0  # worker threads still running
        self._stopped = False
        self._thread: Optional[threading.Thread] = None

        self._workers: set[threading.Thread] = set()
        self._workers_lock = threading.Lock()

        self._config_error_lock = threading.Lock()
        self.configuration_error: Optional[str] = None

        self.store.subscribe(self._on_store_change)

    # ── Loop ────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the admission loop thread. A stopped scheduler can be restarted."""
        self.store.subscribe(self._on_store_change)
        with self._cond:
            if self._thread is not None:
                return
            self._stopped = False
            self._dirty = True  # changes made while stopped went unobserved
            self._thread = threading.Thread(
                target=self._run, name="docgraph-scheduler", daemon=True
            )
        self._thread.start()

    def stop(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Stop the admission loop.

        In-flight entries are not cancelled. With ``wait`` the call also
        joins every worker thread started so far.
        """
        with self._cond:
            self._stopped = True
            self._cond.notify_all()
            thread, self._thread = self._thread, None
        if thread is not None and wait:
            thread.join(timeout)
        if wait:
            self.join_workers(timeout)
        self.store.unsubscribe(self._on_store_change)

    def join_workers(self, timeout: Optional[float] = None) -> None:
        """Wait for all worker threads started so far."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._workers_lock:
            workers = list(self._workers)
        for worker in workers:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            worker.join(remaining)

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no evaluation is due, no worker is running and nothing
        is Pending or Processing.

        Returns:
            False if ``timeout`` expired first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._dirty or self._evaluating or self._active or not self.store.is_idle():
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._cond.wait(remaining)
        return True

    def _on_store_change(self, entries: list[QueueEntry]) -> None:
        with self._cond:
            self._dirty = True
            self._cond.notify_all()

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._dirty and not self._stopped:
                    self._cond.wait()
                if self._stopped:
                    return
                self._dirty = False
                self._evaluating = True
            try:
                self.evaluate()
            except Exception:
                logger.exception("Admission evaluation failed")
            finally:
                with self._cond:
                    self._evaluating = False
                    self._cond.notify_all()

    # ── Admission ───────────────────────────────────────────────────────

    def evaluate(self) -> list[QueueEntry]:
        """
        Apply the refill policy, then admit and dispatch Pending entries.

        Safe to call directly; the loop thread calls it on every change.

        Returns:
            The entries admitted by this evaluation
        """
        if self.config.auto_refill:
            self._refill()

        admitted = self.store.admit(self.config.max_concurrent_jobs)
        for entry in admitted:
            logger.info("Processing %s (%s)", entry.source, entry.id)
            self._dispatch(entry)
        return admitted

    def _refill(self) -> list[str]:
        if not self.store.is_idle():
            return []
        present = self.store.sources()
        missing = [c for c in self.config.refill_candidates if c not in present]
        if not missing:
            return []
        if self.config.refill_batch == RefillBatch.ONE:
            missing = missing[:1]
        added = self.store.extend(missing)
        if added:
            logger.info("Backlog empty, refilled %d entries", len(added))
        return added

    def _dispatch(self, entry: QueueEntry) -> None:
        worker = threading.Thread(
            target=self._process, args=(entry,), name=f"docgraph-{entry.id}", daemon=True
        )
        with self._workers_lock:
            self._workers = {w for w in self._workers if w.is_alive()}
            self._workers.add(worker)
        with self._cond:
            self._active += 1
        worker.start()

    # ── Per-entry work ──────────────────────────────────────────────────

    def _process(self, entry: QueueEntry) -> None:
        try:
            self._run_entry(entry)
        finally:
            with self._cond:
                self._active -= 1
                self._cond.notify_all()

    def _run_entry(self, entry: QueueEntry) -> None:
        try:
            self.client.check_credentials()
            self._set_configuration_error(None)

            text = self.source.load(entry)
            chunks = chunk_text(text, self.config.chunk_size, self.config.chunk_overlap)
            logger.info("%s: %d chars in %d chunk(s)", entry.source, len(text), len(chunks))

            graph = self.orchestrator.run(entry, chunks)
        except ConfigurationError as e:
            self._set_configuration_error(str(e))
            self._record_failure(entry, str(e))
        except DocGraphError as e:
            self._record_failure(entry, str(e))
        except Exception as e:
            logger.exception("Unexpected error processing %s", entry.source)
            self._record_failure(entry, f"Unexpected error: {e}")
        else:
            if self.store.complete(entry.id, graph):
                logger.info("Completed %s: %s", entry.source, graph.summary())
            else:
                logger.debug("Discarding result for removed entry %s", entry.id)

    def _record_failure(self, entry: QueueEntry, reason: str) -> None:
        message = f"Failed to process {entry.source}: {reason}"
        if self.store.fail(entry.id, message):
            logger.error(message)
        else:
            logger.debug("Discarding failure for removed entry %s", entry.id)

    def _set_configuration_error(self, message: Optional[str]) -> None:
        with self._config_error_lock:
            previous, self.configuration_error = self.configuration_error, message
        if message and message != previous:
            logger.warning("Missing API key: %s", message)
        elif previous and not message:
            logger.info("API key configured, resuming")
