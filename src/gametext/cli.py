"""
Command-line interface for loading text and subtitle projects.
"""

import argparse
import logging
import sys

from .config import load_env_file
from .errors import LocalizationError
from .project import load_subtitle_project, load_text_project
from .serialization import save_json, subtitle_db_to_dict, text_db_to_dict
from .versions import GameVersion

logger = logging.getLogger("gametext")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(description="Load game text or subtitle projects")

    ap.add_argument(
        "--kind",
        choices=["text", "subtitle"],
        default="subtitle",
        help="Which project to load",
    )
    ap.add_argument(
        "--game",
        choices=[v.value for v in GameVersion],
        default=GameVersion.JAK1.value,
        help="Game whose project is loaded from $GAMETEXT_ASSETS_DIR",
    )
    ap.add_argument("--project", default=None, help="Explicit project manifest (overrides --game)")
    ap.add_argument(
        "--groups", default=None, help="Subtitle group file (default: per-game asset file)"
    )
    ap.add_argument("--dump", default=None, help="Write the loaded database as JSON to this path")
    ap.add_argument("--no-progress", action="store_true", help="Hide the per-file progress bar")
    ap.add_argument("--env-file", default=None, help="Load settings from this .env file")

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    load_env_file(args.env_file)
    setup_logging(args.verbose)

    game = GameVersion(args.game)
    try:
        if args.kind == "text":
            text_db = load_text_project(game, args.project, progress=not args.no_progress)
            for group, banks in sorted(text_db.groups.items()):
                for lang, bank in banks.items():
                    logger.info(f"[text] group={group} lang={lang}: {len(bank.lines)} lines")
            dump = text_db_to_dict(text_db) if args.dump else None
        else:
            sub_db = load_subtitle_project(
                game, args.project, args.groups, progress=not args.no_progress
            )
            for lang, bank in sub_db.banks.items():
                logger.info(f"[subtitle] lang={lang}: {len(bank.scenes)} scenes")
            dump = subtitle_db_to_dict(sub_db) if args.dump else None
    except LocalizationError as e:
        logger.error(f"Failed to load {args.kind} project: {e}")
        return 1

    if args.dump:
        save_json(dump, args.dump)
        logger.info(f"Saved {args.kind} database -> {args.dump}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
