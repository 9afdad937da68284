"""storyflow: dev launcher. Plays the demo story in the terminal."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from storyflow.config import RendererConfig
from storyflow.demo import build_demo_story

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

LOG_LEVEL = os.getenv("STORYFLOW_LOG_LEVEL", "WARNING")
COLOR = os.getenv("STORYFLOW_COLOR", "1") not in ("0", "false", "no")


def main():
    parser = argparse.ArgumentParser(description="storyflow demo launcher")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable ANSI styling")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        help=f"Logging level (default: {LOG_LEVEL})")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = RendererConfig(color=COLOR and not args.no_color and sys.stdout.isatty())
    story = build_demo_story(
        renderer=config,
        on_finish=lambda: print("\n*** The End ***"),
    )
    try:
        story.run()
    except (KeyboardInterrupt, EOFError):
        print("\nShutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main()
