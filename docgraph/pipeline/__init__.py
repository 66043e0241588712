"""
Pipeline orchestration.

  QueueStore: entry registry, graph map, change notifications
  Scheduler: admission control and backlog refill
  Orchestrator: concurrent per-chunk extraction with failure isolation
  Pipeline: facade wiring config, store, client, source and scheduler
"""

from .config import PipelineConfig, RefillBatch
from .orchestrator import Orchestrator
from .pipeline import Pipeline
from .scheduler import Scheduler
from .state import QueueEntry, QueueStore, Status

__all__ = [
    "Pipeline",
    "PipelineConfig",
    "RefillBatch",
    "Orchestrator",
    "Scheduler",
    # State
    "QueueEntry",
    "QueueStore",
    "Status",
]
