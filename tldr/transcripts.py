"""Transcript sources for the summarization pipeline."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from tldr.errors import TranscriptNotFoundError

logger = logging.getLogger(__name__)


class TranscriptSource(ABC):
    """Abstract base class for transcript retrieval."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name for identification."""
        pass

    @abstractmethod
    async def fetch(self, video_id: str) -> str:
        """Fetch the raw transcript text for an identifier.

        Args:
            video_id: Video identifier

        Returns:
            Transcript text, possibly empty

        Raises:
            TranscriptNotFoundError: If the source has no transcript for the id
        """
        pass


class FileTranscriptSource(TranscriptSource):
    """Reads transcripts from ``<root_dir>/<video_id><suffix>``."""

    def __init__(self, root_dir: Path, suffix: str = ".txt"):
        self.root_dir = Path(root_dir)
        self.suffix = suffix

    @property
    def name(self) -> str:
        return "file"

    def path_for(self, video_id: str) -> Path:
        return self.root_dir / f"{video_id}{self.suffix}"

    async def fetch(self, video_id: str) -> str:
        path = self.path_for(video_id)
        if not path.is_file():
            raise TranscriptNotFoundError(f"No transcript file for {video_id!r} at {path}")
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        logger.debug(
            "Read transcript file",
            extra={"video_id": video_id, "path": str(path), "chars": len(text)},
        )
        return text
