"""Token counting for chunk budgeting."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

import tiktoken

from tldr.errors import BackendInitializationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-3.5-turbo"
FALLBACK_ENCODING = "cl100k_base"


class TokenCounter:
    """Counts tokens with a tiktoken encoding resolved from a model name.

    Encodings are built lazily, once per model, off the event loop. The
    first call for a model may download the encoding's rank file.
    """

    def __init__(self, default_model: str = DEFAULT_MODEL):
        """Initialize token counter.

        Args:
            default_model: Model whose encoding is used when none is given
        """
        self.default_model = default_model
        self._encodings: Dict[str, tiktoken.Encoding] = {}
        self._lock = asyncio.Lock()

    async def count(self, text: str, model: Optional[str] = None) -> int:
        """Count tokens in text.

        Args:
            text: Text to count, used as-is
            model: Model name; defaults to ``default_model``

        Returns:
            Number of tokens the encoding produces for ``text``
        """
        return len(await self.encode(text, model))

    async def encode(self, text: str, model: Optional[str] = None) -> List[int]:
        """Encode text into token ids.

        Special-token markers inside ``text`` are encoded as ordinary text.
        """
        encoding = await self._get_encoding(model or self.default_model)
        return encoding.encode(text, disallowed_special=())

    async def _get_encoding(self, model: str) -> tiktoken.Encoding:
        """Return the cached encoding for ``model``, building it on first use."""
        encoding = self._encodings.get(model)
        if encoding is not None:
            return encoding

        async with self._lock:
            encoding = self._encodings.get(model)
            if encoding is None:
                encoding = await asyncio.to_thread(_build_encoding, model)
                self._encodings[model] = encoding
                logger.debug(
                    "Built tokenizer encoding",
                    extra={"model": model, "encoding": encoding.name},
                )
        return encoding


def _build_encoding(model: str) -> tiktoken.Encoding:
    try:
        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            # Unknown model names get the chat-model encoding
            return tiktoken.get_encoding(FALLBACK_ENCODING)
    except Exception as e:
        logger.error(
            "Failed to initialize tokenizer", extra={"model": model}, exc_info=True
        )
        raise BackendInitializationError(
            f"Could not build tokenizer for model {model!r}: {e}"
        ) from e
