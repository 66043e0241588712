"""
Pipeline configuration.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from ..chunking import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE
from ..extraction.client import DEFAULT_API_KEY_ENV, DEFAULT_MODEL
from ..parsing.source import DEFAULT_MIN_CHARS
from ..parsing.web_fetcher import DEFAULT_TIMEOUT_SECONDS
from .suggestions import DEFAULT_CANDIDATES


class RefillBatch(str, Enum):
    """How many missing candidates one refill cycle adds."""

    ONE = "one"
    ALL = "all"


@dataclass
class PipelineConfig:
    """Pipeline configuration."""

    # Admission control
    max_concurrent_jobs: int = 3

    # Chunking
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP

    # LLM (LiteLLM format)
    model: str = DEFAULT_MODEL
    max_tokens: int = 8192
    api_key_env: str = DEFAULT_API_KEY_ENV

    # Backlog refill
    auto_refill: bool = True
    refill_batch: RefillBatch = RefillBatch.ONE
    refill_candidates: list[str] = field(default_factory=lambda: list(DEFAULT_CANDIDATES))

    # Document retrieval
    min_document_chars: int = DEFAULT_MIN_CHARS
    fetch_timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        self.refill_batch = RefillBatch(self.refill_batch)
        if self.max_concurrent_jobs < 1:
            raise ValueError(f"max_concurrent_jobs must be >= 1, got {self.max_concurrent_jobs}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got {self.chunk_overlap}"
            )
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PipelineConfig":
        """Build a config from a mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "PipelineConfig":
        """Load config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)
