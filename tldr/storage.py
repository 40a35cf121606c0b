"""
Local Artifact Storage

Stores pipeline artifacts on the local filesystem, one directory per
transcript identifier:

    <root>/<id>/transcript.txt
    <root>/<id>/summary_batch.json
    <root>/<id>/summary.txt
"""

import json
import logging
import re
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

TRANSCRIPT_FILE = "transcript.txt"
SUMMARY_BATCH_FILE = "summary_batch.json"
SUMMARY_FILE = "summary.txt"


def sanitize_filename(name: str) -> str:
    """Return a safe filename by keeping [A-Za-z0-9._-] and trimming length.

    Also prevents hidden filenames by stripping leading dots and ensures
    a non-empty fallback value.
    """
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    # remove leading dots to prevent hidden files
    safe = safe.lstrip(".")
    if not safe:
        safe = "item"
    return safe[:200]


class LocalArtifactStore:
    """
    Local filesystem storage for transcripts and summaries.

    Identifiers keep leading dashes and underscores, which are valid in
    video ids.
    """

    def __init__(self, root_dir: Path):
        """
        Initialize local artifact storage.

        Args:
            root_dir: Root directory for artifacts
        """
        self.root_dir = Path(root_dir).resolve()

    def item_dir(self, item_id: str) -> Path:
        """Return the directory for an identifier, creating it if needed."""
        path = self.root_dir / sanitize_filename(item_id)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _path(self, item_id: str, filename: str) -> Path:
        return self.root_dir / sanitize_filename(item_id) / filename

    def exists(self, item_id: str, filename: str) -> bool:
        """Check if an artifact exists."""
        return self._path(item_id, filename).exists()

    def write_transcript(self, item_id: str, text: str) -> Path:
        """Write transcript text."""
        path = self.item_dir(item_id) / TRANSCRIPT_FILE
        path.write_text(text, encoding="utf-8")
        logger.info("Wrote transcript", extra={"item_id": item_id, "path": str(path)})
        return path

    def read_transcript(self, item_id: str) -> str:
        """Read transcript text.

        Raises:
            FileNotFoundError: If no transcript was stored for the identifier
        """
        return self._path(item_id, TRANSCRIPT_FILE).read_text(encoding="utf-8")

    def write_summary_batch(self, item_id: str, summaries: List[str]) -> Path:
        """Write partial summaries as an indented JSON array."""
        path = self.item_dir(item_id) / SUMMARY_BATCH_FILE
        path.write_text(json.dumps(summaries, indent=2), encoding="utf-8")
        logger.info(
            "Wrote summary batch",
            extra={"item_id": item_id, "path": str(path), "batch_size": len(summaries)},
        )
        return path

    def read_summary_batch(self, item_id: str) -> List[str]:
        """Read partial summaries.

        Raises:
            FileNotFoundError: If no batch was stored for the identifier
            ValueError: If the file is not a JSON array of strings
        """
        raw = json.loads(self._path(item_id, SUMMARY_BATCH_FILE).read_text(encoding="utf-8"))
        if not isinstance(raw, list) or not all(isinstance(s, str) for s in raw):
            raise ValueError(f"{SUMMARY_BATCH_FILE} for {item_id!r} is not a list of strings")
        return raw

    def write_summary(self, item_id: str, summary: str) -> Path:
        """Write the final summary."""
        path = self.item_dir(item_id) / SUMMARY_FILE
        path.write_text(summary, encoding="utf-8")
        logger.info("Wrote final summary", extra={"item_id": item_id, "path": str(path)})
        return path

    def read_summary(self, item_id: str) -> str:
        """Read the final summary."""
        return self._path(item_id, SUMMARY_FILE).read_text(encoding="utf-8")
