"""
docgraph - turn a backlog of documents into knowledge graphs.

Core modules:
- chunking: Fixed-window document chunking with overlap
- schema: Node/Link/graph definitions
- extraction: LLM extraction client, response validation, merging
- parsing: Local file and URL document retrieval
- pipeline: Queue store, orchestration and admission-controlled scheduling
"""

__version__ = "0.1.0"
