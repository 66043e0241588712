"""Structured extraction module: LLM client, response validation, merging."""

from .client import ExtractionClient, LiteLLMExtractionClient
from .merger import merge_graphs
from .response import parse_extraction_response

__all__ = [
    "ExtractionClient",
    "LiteLLMExtractionClient",
    "merge_graphs",
    "parse_extraction_response",
]
