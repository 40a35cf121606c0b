"""Summarizer - single and batch summarization over a completion backend."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .prompt_builder import PromptBuilder
from .providers import CompletionClient, HTTPCompletionClient
from .response_parser import CompletionResult, ResponseParser

if TYPE_CHECKING:
    from tldr.config import Settings

logger = logging.getLogger(__name__)


class Summarizer:
    """Orchestrates prompt building, completion and response extraction.

    All specialized logic is delegated to injected dependencies.
    """

    def __init__(
        self,
        client: CompletionClient,
        prompt_builder: Optional[PromptBuilder] = None,
        response_parser: Optional[ResponseParser] = None,
        model: Optional[str] = None,
        max_concurrency: Optional[int] = None,
    ):
        """Initialize summarizer.

        Args:
            client: Completion backend
            prompt_builder: Builds prompts for generation
            response_parser: Extracts text from completions
            model: Default model name; the client's default if omitted
            max_concurrency: Bound on in-flight batch calls; unbounded if None
        """
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.response_parser = response_parser or ResponseParser()
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be positive")
        self.model = model
        self.max_concurrency = max_concurrency

    async def summarize(
        self,
        text: str,
        model: Optional[str] = None,
        prompt: Optional[str] = None,
        *,
        label: str = "Summary",
    ) -> str:
        """Summarize a single text.

        Args:
            text: Text to summarize
            model: Model name override
            prompt: Instruction; defaults to ``"tldr;"``
            label: Description for logging

        Returns:
            Completion text
        """
        result = await self.summarize_with_metadata(text, model, prompt, label=label)
        return result.text

    async def summarize_with_metadata(
        self,
        text: str,
        model: Optional[str] = None,
        prompt: Optional[str] = None,
        *,
        label: str = "Summary",
    ) -> CompletionResult:
        """Summarize a single text, keeping usage and finish reason."""
        built = self.prompt_builder.build(text, prompt)
        completion = await self.client.complete(
            system_prompt=built.system,
            user_prompt=built.user,
            assistant_prompt=built.assistant,
            model=model or self.model,
        )
        return self.response_parser.parse(completion, label=label)

    async def summarize_batch(
        self, texts: Sequence[str], model: Optional[str] = None
    ) -> List[str]:
        """Summarize every text concurrently.

        Results are in input order. The first failure fails the batch.

        Args:
            texts: Texts to summarize
            model: Model name override

        Returns:
            One summary per input text
        """
        if not texts:
            return []

        logger.info("Starting batch summarization", extra={"batch_size": len(texts)})

        if self.max_concurrency:
            sem = asyncio.Semaphore(self.max_concurrency)

            async def summarize_one(idx: int, text: str) -> str:
                async with sem:
                    return await self.summarize(text, model, label=f"Chunk {idx + 1}")

        else:

            async def summarize_one(idx: int, text: str) -> str:
                return await self.summarize(text, model, label=f"Chunk {idx + 1}")

        tasks = [
            asyncio.create_task(summarize_one(idx, text))
            for idx, text in enumerate(texts)
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # Stop sibling calls still in flight once the batch has failed
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return list(results)


def create_summarizer(settings: Settings) -> Summarizer:
    """Factory function to create a Summarizer from settings.

    Args:
        settings: Loaded settings

    Returns:
        Summarizer backed by an HTTPCompletionClient
    """
    client = HTTPCompletionClient(
        api_key=settings.openai_api_key.get_secret_value(),
        base_url=settings.openai_api_base,
        model=settings.model,
        sampling=settings.sampling_params(),
        timeout=settings.request_timeout,
    )
    return Summarizer(
        client=client,
        prompt_builder=PromptBuilder(),
        response_parser=ResponseParser(),
        model=settings.model,
        max_concurrency=settings.max_concurrency,
    )
