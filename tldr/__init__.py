"""
Transcript summarization with token-aware chunking.

Contains:
- config: Environment-based settings and logging configuration
- errors: Exception hierarchy
- summarization: Token counting, chunking, completion backends, summarizer
- transcripts: Transcript sources
- storage: Local artifact storage
- pipeline: Staged fetch / map / reduce orchestration
"""

from tldr.errors import (
    BackendCallError,
    BackendInitializationError,
    ConfigurationError,
    EmptyResponseError,
    TldrError,
    TranscriptNotFoundError,
)
from tldr.pipeline import Pipeline

__version__ = "0.1.0"

__all__ = [
    "BackendCallError",
    "BackendInitializationError",
    "ConfigurationError",
    "EmptyResponseError",
    "TldrError",
    "TranscriptNotFoundError",
    "Pipeline",
]
