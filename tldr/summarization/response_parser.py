"""Response extraction for summary generation."""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, Field

from tldr.errors import EmptyResponseError

from .providers import ChatCompletion, Usage

logger = logging.getLogger(__name__)


class CompletionResult(BaseModel):
    """Text and metadata extracted from a completion."""

    text: str
    usage: Usage = Field(default_factory=Usage)
    finish_reason: Optional[str] = None
    completion_id: Optional[str] = None


class ResponseParser:
    """Extracts the first choice's message from a completion."""

    def parse(self, completion: ChatCompletion, *, label: str = "Completion") -> CompletionResult:
        """Extract the completion text.

        Args:
            completion: Raw completion response
            label: Description for logging (e.g., "Chunk 1", "Final")

        Returns:
            Extracted text with usage and finish reason

        Raises:
            EmptyResponseError: If the first choice carries no message
        """
        choice = completion.choices[0] if completion.choices else None
        message = choice.message if choice is not None else None
        if message is None or message.content is None:
            logger.error(
                "Completion returned no message",
                extra={"label": label, "completion_id": completion.id},
            )
            raise EmptyResponseError(completion.id)

        usage = completion.usage
        logger.info(
            f"total_tokens: {usage.total_tokens}, prompt_tokens: {usage.prompt_tokens}, "
            f"completion_tokens: {usage.completion_tokens}",
            extra={"label": label, "completion_id": completion.id},
        )
        logger.info(
            f"finish_reason: {choice.finish_reason}",
            extra={"label": label, "output": message.content},
        )
        return CompletionResult(
            text=message.content,
            usage=usage,
            finish_reason=choice.finish_reason,
            completion_id=completion.id,
        )
