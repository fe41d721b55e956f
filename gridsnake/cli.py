"""
cli.py — Command line entry point.

    gridsnake [--difficulty easy|normal|hard] [--obstacles on|off]
              [--mute] [--data-dir DIR] [--loglevel LEVEL]
"""

import argparse
import logging
import os

from .config import DIFFICULTIES
from .controller import GameController
from .storage import JsonFileStorage, load_settings, save_settings

DEFAULT_DATA_DIR = os.path.join(os.path.expanduser("~"), ".gridsnake")

logger = logging.getLogger("gridsnake")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Single-player grid snake.")
    parser.add_argument("--difficulty", choices=list(DIFFICULTIES),
                        help="override the saved difficulty")
    parser.add_argument("--obstacles", choices=["on", "off"],
                        help="override the saved obstacle mode")
    parser.add_argument("--mute", action="store_true", help="start with sound off")
    parser.add_argument("--data-dir", default=os.environ.get("GRIDSNAKE_DATA", DEFAULT_DATA_DIR),
                        help="where settings.json and leaderboard.json live")
    parser.add_argument("-l", "--loglevel", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="set logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.loglevel),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    storage = JsonFileStorage(args.data_dir)
    if args.difficulty or args.obstacles:
        settings = load_settings(storage)
        if args.difficulty:
            settings.difficulty = args.difficulty
        if args.obstacles:
            settings.obstacle_mode = args.obstacles == "on"
        save_settings(storage, settings)
    logger.info("data directory: %s", args.data_dir)

    GameController(storage, muted=args.mute).run()
