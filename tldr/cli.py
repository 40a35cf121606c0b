"""
Command-line entry point.

Usage:
    tldr run VIDEO_ID --transcripts-dir transcripts/
    tldr fetch VIDEO_ID --transcripts-dir transcripts/
    tldr batch VIDEO_ID
    tldr final VIDEO_ID

Settings are loaded before any stage runs, so a missing OPENAI_API_KEY
stops the process before anything is fetched or summarized.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from tldr.config import Settings, configure_logging, load_settings
from tldr.errors import ConfigurationError, TldrError
from tldr.pipeline import Pipeline
from tldr.storage import LocalArtifactStore
from tldr.summarization import Chunker, TokenCounter, create_summarizer
from tldr.transcripts import FileTranscriptSource

logger = logging.getLogger(__name__)

STAGES = ("fetch", "batch", "final", "run")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tldr", description="Summarize long transcripts with map-reduce"
    )
    parser.add_argument("stage", choices=STAGES, help="Pipeline stage to run")
    parser.add_argument("video_id", help="Transcript identifier")
    parser.add_argument(
        "--transcripts-dir",
        type=Path,
        default=Path("."),
        help="Directory holding <video_id>.txt transcripts (default: current directory)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Artifact directory (defaults to settings.data_dir)",
    )
    return parser


def build_pipeline(settings: Settings, transcripts_dir: Path) -> Pipeline:
    """Wire the pipeline's services from settings."""
    token_counter = TokenCounter(default_model=settings.tokenizer_model)
    chunker = Chunker(
        token_counter,
        max_tokens=settings.max_tokens,
        word_group_size=settings.word_group_size,
    )
    return Pipeline(
        source=FileTranscriptSource(transcripts_dir),
        chunker=chunker,
        summarizer=create_summarizer(settings),
        store=LocalArtifactStore(settings.data_dir),
        token_counter=token_counter,
    )


async def run_stage(pipeline: Pipeline, stage: str, video_id: str) -> Optional[str]:
    try:
        if stage == "fetch":
            text = await pipeline.fetch(video_id)
            return None if text is None else f"Fetched {len(text)} characters"
        if stage == "batch":
            summaries = await pipeline.summarize_chunks(video_id)
            return f"Summarized {len(summaries)} chunks"
        if stage == "final":
            return await pipeline.summarize_final(video_id)
        return await pipeline.run(video_id)
    finally:
        await pipeline.summarizer.client.aclose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.data_dir is not None:
        settings = settings.model_copy(update={"data_dir": args.data_dir})
    configure_logging(settings)

    pipeline = build_pipeline(settings, args.transcripts_dir)
    try:
        out = asyncio.run(run_stage(pipeline, args.stage, args.video_id))
    except (TldrError, FileNotFoundError, ValueError) as e:
        logger.error(f"{args.stage} failed: {e}", extra={"video_id": args.video_id})
        return 1

    if out is None:
        return 1
    if args.stage in ("final", "run"):
        print(f"\n\nFinal Summary:\n{out}")
    else:
        print(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
