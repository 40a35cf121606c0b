"""Pipeline - staged fetch, map and reduce over a transcript."""
from __future__ import annotations

import logging
from typing import List, Optional

from tldr.storage import LocalArtifactStore
from tldr.summarization import FINAL_INSTRUCTION, Chunker, Summarizer, TokenCounter
from tldr.transcripts import TranscriptSource

logger = logging.getLogger(__name__)


class Pipeline:
    """Drives fetch -> chunk -> batch summarize -> final summarize.

    Each stage reads the artifact written by the previous one, so stages
    can be run separately. No stage retries an earlier stage.
    """

    def __init__(
        self,
        source: TranscriptSource,
        chunker: Chunker,
        summarizer: Summarizer,
        store: LocalArtifactStore,
        token_counter: Optional[TokenCounter] = None,
        final_instruction: str = FINAL_INSTRUCTION,
    ):
        """Initialize pipeline.

        Args:
            source: Where raw transcripts come from
            chunker: Splits transcripts into chunks
            summarizer: Runs map and reduce summarization
            store: Persists stage artifacts
            token_counter: Counter for chunk diagnostics; the chunker's if omitted
            final_instruction: Instruction for the reduce pass
        """
        self.source = source
        self.chunker = chunker
        self.summarizer = summarizer
        self.store = store
        self.token_counter = token_counter or chunker.token_counter
        self.final_instruction = final_instruction

    async def fetch(self, video_id: str) -> Optional[str]:
        """Stage 1: fetch and store the transcript.

        Returns:
            The transcript, or None if the source returned no text
        """
        text = await self.source.fetch(video_id)
        if not text or not text.strip():
            logger.error(
                "No transcript to write",
                extra={"video_id": video_id, "source": self.source.name},
            )
            return None
        self.store.write_transcript(video_id, text)
        return text

    async def summarize_chunks(self, video_id: str) -> List[str]:
        """Stage 2: chunk the stored transcript and summarize each chunk.

        Returns:
            Partial summaries in chunk order
        """
        text = self.store.read_transcript(video_id)
        chunks = await self.chunker.split_text(text)
        logger.info(
            "Prepared transcript text",
            extra={
                "video_id": video_id,
                "chunk_count": len(chunks),
                "max_tokens": self.chunker.max_tokens,
            },
        )
        for idx, chunk in enumerate(chunks):
            tokens = await self.token_counter.count(chunk)
            logger.info(f"count: {tokens}", extra={"video_id": video_id, "chunk": idx + 1})

        summaries = await self.summarizer.summarize_batch(chunks)
        self.store.write_summary_batch(video_id, summaries)
        return summaries

    async def summarize_final(self, video_id: str) -> str:
        """Stage 3: reduce the stored partial summaries to one summary."""
        summaries = self.store.read_summary_batch(video_id)
        summary = await self.summarizer.summarize(
            "\n".join(summaries), prompt=self.final_instruction, label="Final"
        )
        self.store.write_summary(video_id, summary)
        logger.info(
            "Completed summarization run",
            extra={"video_id": video_id, "summary_length": len(summary)},
        )
        return summary

    async def run(self, video_id: str) -> Optional[str]:
        """Run all three stages.

        Returns:
            Final summary, or None if there was no transcript
        """
        logger.info("Starting summarization run", extra={"video_id": video_id})
        if await self.fetch(video_id) is None:
            return None
        await self.summarize_chunks(video_id)
        return await self.summarize_final(video_id)
