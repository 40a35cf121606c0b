"""Prompt building for summary generation."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

DEFAULT_INSTRUCTION = "tldr;"
FINAL_INSTRUCTION = "detailed tldr;"

FENCE = "```"

_BACKTICKS = re.compile(r"`")
_BLANK_LINES = re.compile(r"\n{2,}")
_WHITESPACE_RUNS = re.compile(r"\s{2,}")


@dataclass(frozen=True)
class SummaryPrompt:
    """Prompt triple sent to the completion backend."""

    system: str
    user: str
    assistant: str = ""


class PromptBuilder:
    """Builds completion prompts from raw text.

    The text to summarize goes into the system message inside a fenced
    block; the instruction goes into the user message.
    """

    def __init__(self, default_instruction: str = DEFAULT_INSTRUCTION):
        self.default_instruction = default_instruction

    @staticmethod
    def clean(text: str) -> str:
        """Normalize text before it is embedded in a prompt.

        Backticks are removed so the text cannot close the fence.
        """
        cleaned = _BACKTICKS.sub("", text)
        cleaned = _BLANK_LINES.sub("\n", cleaned)
        cleaned = _WHITESPACE_RUNS.sub(" ", cleaned)
        return cleaned.strip()

    def build(self, text: str, instruction: Optional[str] = None) -> SummaryPrompt:
        """Build the prompt triple for summarizing ``text``.

        Args:
            text: Text to summarize
            instruction: User instruction; an empty or missing value falls
                back to the default instruction

        Returns:
            Prompt with an empty assistant message
        """
        system = f"{FENCE}\n{self.clean(text)}\n{FENCE}"
        return SummaryPrompt(system=system, user=instruction or self.default_instruction)
