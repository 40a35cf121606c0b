"""
Fake implementations for testing.

Fakes are simplified working implementations of the core interfaces that
avoid network access:
- WordTokenCounter: counts whitespace-separated words instead of BPE tokens
- FakeEncoding: stand-in for a tiktoken encoding
- FakeCompletionClient: canned chat completions with optional latency
- FailingCompletionClient: raises BackendCallError for selected prompts
- InMemoryTranscriptSource: transcripts from a dict
"""

from fakes.providers import (
    FailingCompletionClient,
    FakeCompletionClient,
    make_completion,
)
from fakes.tokenizer import FakeEncoding, WordTokenCounter
from fakes.transcripts import InMemoryTranscriptSource

__all__ = [
    "FailingCompletionClient",
    "FakeCompletionClient",
    "make_completion",
    "FakeEncoding",
    "WordTokenCounter",
    "InMemoryTranscriptSource",
]
