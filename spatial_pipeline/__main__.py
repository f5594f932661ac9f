"""
Run one narration from files.

Usage:
    python -m spatial_pipeline frame.jpg --voice command.webm
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import PipelineConfig
from .errors import InvalidRequestError, ProviderError
from .logging_setup import Component, get_logger, setup_logging
from .pipeline import SceneNarrator, SceneRequest
from .playback import PlaybackStatus, SpatialPlayer
from .prompts import DEFAULT_QUERY_TYPE, SCENE_PROMPTS
from .providers import SceneProviders

logger = get_logger(Component.CLI)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spatial-pipeline",
        description="Describe a camera frame and speak it, panned toward the objects it mentions.",
    )
    parser.add_argument("image", type=Path, help="JPEG camera frame")
    parser.add_argument("--voice", type=Path, default=None, help="recorded voice command (webm)")
    parser.add_argument(
        "--query-type",
        default=DEFAULT_QUERY_TYPE,
        choices=sorted(SCENE_PROMPTS),
        help="vision prompt to use",
    )
    parser.add_argument("--env", type=Path, default=None, help="path to a .env file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = PipelineConfig.from_env(args.env)
    setup_logging(level=config.log_level, use_json=config.log_json)
    if config.mock_mode:
        logger.warning("OPENAI_API_KEY not set; running with mock providers")

    try:
        image = args.image.read_bytes()
        audio = args.voice.read_bytes() if args.voice else None
    except OSError as exc:
        print(f"[ERROR] Could not read input: {exc}", file=sys.stderr)
        return 2

    narrator = SceneNarrator(
        SceneProviders(config),
        SpatialPlayer(device=config.output_device, block_size=config.block_size),
    )

    try:
        result = narrator.run(SceneRequest(image=image, audio=audio, query_type=args.query_type))
    except (InvalidRequestError, ProviderError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if result.transcript is not None:
        print("You said:", result.transcript.text)
    print("Description:", result.description or "(none)")
    print(f"Pan: {result.pan:+.1f}")

    playback = result.playback
    if playback.status is PlaybackStatus.FAILED:
        print(f"[ERROR] Playback failed: {playback.error}", file=sys.stderr)
        return 1
    if playback.status is PlaybackStatus.SKIPPED:
        print("[INFO] No speech audio; playback skipped.")
        return 0

    # the worker thread is a daemon; returning early would cut the clip off
    playback.handle.wait()
    if playback.handle.error is not None:
        print(f"[ERROR] Playback stopped: {playback.handle.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
