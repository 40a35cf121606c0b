"""Transcript chunking for summary generation."""
from __future__ import annotations

import logging
from typing import Iterator, List, Sequence, TypeVar

from .tokenizer import TokenCounter

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEPARATOR = " "


def batchify(items: Sequence[T], size: int = 5) -> Iterator[List[T]]:
    """Yield consecutive, non-overlapping slices of ``items``.

    The last slice may be shorter than ``size``.
    """
    if size <= 0:
        raise ValueError("size must be positive")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


class Chunker:
    """Splits long text into chunks that fit a token budget.

    Words are packed greedily in fixed-size groups: a group joins the
    current chunk while the running token count stays under the budget,
    otherwise it starts a new chunk. A group that is over budget on its
    own is dropped with a warning.
    """

    def __init__(
        self,
        token_counter: TokenCounter,
        max_tokens: int = 2048,
        word_group_size: int = 50,
    ):
        """Initialize chunker.

        Args:
            token_counter: Counter used to measure each word group
            max_tokens: Default token budget per chunk
            word_group_size: Number of words measured at a time
        """
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        if word_group_size <= 0:
            raise ValueError("word_group_size must be positive")
        self.token_counter = token_counter
        self.max_tokens = max_tokens
        self.word_group_size = word_group_size

    async def split_text(self, text: str, max_tokens: int | None = None) -> List[str]:
        """Split text into an ordered list of chunks.

        Args:
            text: Text to split; words are separated by single spaces
            max_tokens: Token budget per chunk, defaults to ``self.max_tokens``

        Returns:
            Chunks in source order; empty if the text has no words
        """
        budget = self.max_tokens if max_tokens is None else max_tokens
        if budget <= 0:
            raise ValueError("max_tokens must be positive")

        word_groups = batchify(text.split(SEPARATOR), self.word_group_size)
        chunks: List[str] = []
        accumulated = 0
        growing_chunk = ""

        # Groups are processed in order; each depends on the state left by the last
        for words in word_groups:
            fragment = SEPARATOR.join(w for w in words if w and w.strip())
            tokens = await self.token_counter.count(fragment)

            if accumulated + tokens < budget:
                growing_chunk += f"{fragment}{SEPARATOR}"
                accumulated += tokens
            elif tokens >= budget:
                logger.warning(
                    f"Fragment of size {tokens} exceeds limit! Skipping...",
                    extra={
                        "fragment_tokens": tokens,
                        "max_tokens": budget,
                        "fragment_preview": fragment[:80],
                    },
                )
            else:
                if growing_chunk.strip():
                    chunks.append(growing_chunk.strip())
                growing_chunk = f"{fragment}{SEPARATOR}"
                accumulated = tokens

        if growing_chunk.strip():
            chunks.append(growing_chunk.strip())

        logger.debug(
            "Segmented text",
            extra={"chunk_count": len(chunks), "max_tokens": budget},
        )
        return chunks
