"""
Token-aware chunking and map-reduce summarization.

Provides token counting, transcript chunking, prompt building, response
extraction and completion backend abstraction for summary generation.
"""

from .tokenizer import TokenCounter
from .chunker import Chunker, batchify
from .prompt_builder import (
    DEFAULT_INSTRUCTION,
    FINAL_INSTRUCTION,
    PromptBuilder,
    SummaryPrompt,
)
from .providers import (
    ChatChoice,
    ChatCompletion,
    ChatMessage,
    CompletionClient,
    HTTPCompletionClient,
    SamplingParams,
    Usage,
)
from .response_parser import CompletionResult, ResponseParser
from .service import Summarizer, create_summarizer

__all__ = [
    "TokenCounter",
    "Chunker",
    "batchify",
    "DEFAULT_INSTRUCTION",
    "FINAL_INSTRUCTION",
    "PromptBuilder",
    "SummaryPrompt",
    "ChatChoice",
    "ChatCompletion",
    "ChatMessage",
    "CompletionClient",
    "HTTPCompletionClient",
    "SamplingParams",
    "Usage",
    "CompletionResult",
    "ResponseParser",
    "Summarizer",
    "create_summarizer",
]
