#!/usr/bin/env python3
"""
sliderUI catalog tool
Inspect, reorder and prune the launcher's games list from the terminal.
"""

import argparse
import logging
import logging.handlers
import os
import sys
from typing import List, Optional

from colorama import init, Fore, Style

from sliderui.repositories import CatalogRepository, ConfigRepository
from sliderui.services import CatalogService, SettingsService, SortMode

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

DEFAULT_GAMES_PATH = 'gameList.csv'
DEFAULT_CONFIG_PATH = 'sliderUI_cfg.json'
LOG_FILE_NAME = 'sliderui.log'
LOG_MAX_BYTES = 256 * 1024

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING', log_dir: Optional[str] = None,
                  max_files: int = 10) -> logging.Logger:
    """Configure the root sliderUI logger.

    Args:
        level:     Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to WARNING so normal use is quiet.
        log_dir:   When given, also log to ``<log_dir>/sliderui.log`` with
                   size-based rotation.
        max_files: Total number of log files kept by the rotation.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logger = logging.getLogger('sliderui')
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    if log_dir and not any(isinstance(h, logging.handlers.RotatingFileHandler)
                           for h in logger.handlers):
        try:
            os.makedirs(log_dir, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, LOG_FILE_NAME),
                maxBytes=LOG_MAX_BYTES,
                backupCount=max(int(max_files) - 1, 0),
                encoding='utf-8',
            )
            fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
            logger.addHandler(fh)
        except OSError as e:
            logger.warning("Could not create log file handler in %s: %s", log_dir, e)
    logger.setLevel(numeric)
    return logger


# Module-level logger used throughout slider.py
logger = logging.getLogger('sliderui.cli')


class SliderApp:
    """Wires the repositories and services for one games list and config.

    Args:
        games_path:  Delimited games list (``gamePath;order;gameName;release``).
        config_path: JSON configuration file; missing means defaults.
    """

    def __init__(self, games_path: str = DEFAULT_GAMES_PATH,
                 config_path: str = DEFAULT_CONFIG_PATH) -> None:
        self.games_path = games_path
        self.config_path = config_path

        self.config_repo = ConfigRepository()
        if not self.config_repo.load(config_path):
            logger.warning("Config %s could not be used; running with defaults", config_path)
        self.settings_service = SettingsService(self.config_repo)

        self.catalog_repo = CatalogRepository()
        self.catalog_service = CatalogService(self.catalog_repo, self.settings_service)

    def configure_logging(self, level: Optional[str] = None) -> logging.Logger:
        """Apply the ``logging`` section of the config (env var wins for the level)."""
        level = level or os.getenv('SLIDERUI_LOG_LEVEL', 'WARNING')
        log_dir = None
        if self.settings_service.get('logging.enabled', True):
            log_dir = self.settings_service.get_string('logging.dir', '') or None
        max_files = self.settings_service.get('logging.max_files', 10)
        if not isinstance(max_files, int):
            max_files = 10
        return setup_logging(level, log_dir=log_dir, max_files=max_files)

    def load_games(self) -> bool:
        return self.catalog_service.load(self.games_path)


def format_game(game: dict) -> str:
    """One listing line: canonical index, name, release and platform."""
    release = game['release'] or '-'
    platform = game['platform_label'] or '-'
    return (f"{Fore.CYAN}{game['index']:>4}  {Fore.WHITE}{Style.BRIGHT}{game['display_name']}"
            f"{Style.RESET_ALL}  {Fore.YELLOW}{release}  {Fore.GREEN}{platform}")


def print_games(app: SliderApp, mode: SortMode) -> None:
    games = app.catalog_service.to_dicts(app.catalog_service.sorted_view(mode))
    print(f"{Fore.GREEN}{'=' * 60}")
    print(f"{Fore.CYAN}{Style.BRIGHT}{len(games)} games ({mode.value} order)")
    print(f"{Fore.GREEN}{'=' * 60}")
    for game in games:
        print(format_game(game))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='sliderUI catalog - inspect, reorder and prune the games list'
    )
    parser.add_argument(
        '--games',
        type=str,
        default=os.getenv('SLIDERUI_GAMES', DEFAULT_GAMES_PATH),
        metavar='FILE',
        help=f'Games list to operate on (default: {DEFAULT_GAMES_PATH})'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=os.getenv('SLIDERUI_CONFIG', DEFAULT_CONFIG_PATH),
        metavar='FILE',
        help=f'JSON configuration file (default: {DEFAULT_CONFIG_PATH})'
    )
    parser.add_argument(
        '--sort',
        choices=[m.value for m in SortMode],
        help='Listing order (default: behavior.sort_mode from the config)'
    )
    parser.add_argument(
        '--assign-orders',
        action='store_true',
        help='Assign missing custom orders and renumber the list'
    )
    parser.add_argument(
        '--move-up',
        type=int,
        metavar='INDEX',
        help='Move the game at INDEX one place up in the custom order'
    )
    parser.add_argument(
        '--move-down',
        type=int,
        metavar='INDEX',
        help='Move the game at INDEX one place down in the custom order'
    )
    parser.add_argument(
        '--remove',
        type=int,
        metavar='INDEX',
        help='Remove the game at INDEX from the list'
    )
    parser.add_argument(
        '--find',
        type=str,
        metavar='PATH',
        help='Print the index of the game with this exact path and exit'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        metavar='LEVEL',
        help='Log level (DEBUG, INFO, WARNING, ERROR)'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.  Returns the process exit status."""
    args = build_parser().parse_args(argv)

    app = SliderApp(games_path=args.games, config_path=args.config)
    app.configure_logging(args.log_level)

    if not app.load_games():
        print(f"{Fore.RED}Error: could not read games list '{args.games}'")
        return 1

    service = app.catalog_service

    if args.find is not None:
        index = service.find(args.find)
        if index is None:
            print(f"{Fore.YELLOW}Not found: {args.find}")
            return 1
        print(f"{Fore.GREEN}{index}")
        return 0

    mutated = False
    if args.assign_orders:
        service.assign_orders()
        mutated = True
    if args.move_up is not None:
        service.move_up(args.move_up)
        mutated = True
    if args.move_down is not None:
        service.move_down(args.move_down)
        mutated = True
    if args.remove is not None:
        if not service.remove_and_commit(args.remove):
            print(f"{Fore.RED}Error: could not remove game at index {args.remove}")
            return 1
        print(f"{Fore.GREEN}Removed game at index {args.remove}")

    if mutated:
        if not service.commit():
            print(f"{Fore.RED}Error: could not save games list '{args.games}'")
            return 1
        print(f"{Fore.GREEN}Saved {len(service.games())} games to {args.games}")

    mode = SortMode(args.sort) if args.sort else app.settings_service.sort_mode()
    print_games(app, mode)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print(f"\n\n{Fore.YELLOW}Interrupted by user. Goodbye!")
        sys.exit(130)
