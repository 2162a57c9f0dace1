#!/usr/bin/env python3
"""Main entry point for the tunebox console player."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from tunebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from tunebox.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning("Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH)
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="tunebox",
        description="Browse and play the tunebox music catalog from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list --query queen         # Show matching tracks
  %(prog)s play --shuffle             # Play the catalog in random order
  %(prog)s upload song.mp3 --artist X # Add a track
  %(prog)s --backend local import data/uploads
        """,
    )
    parser.add_argument(
        "--backend",
        "-b",
        choices=("http", "local"),
        default=None,
        help="catalog backend (default: CATALOG_BACKEND or http)",
    )

    subparsers = parser.add_subparsers(dest="action", required=True)

    list_parser = subparsers.add_parser("list", help="print the catalog")
    list_parser.add_argument("--query", "-q", default="", help="filter by title or artist")

    import_parser = subparsers.add_parser("import", help="register audio files from a directory")
    import_parser.add_argument(
        "directory", nargs="?", default=None, help="directory to scan (default: uploads dir)"
    )

    upload_parser = subparsers.add_parser("upload", help="add an audio file to the catalog")
    upload_parser.add_argument("file", type=Path, help="audio file to upload")
    upload_parser.add_argument("--title", "-t", default=None, help="track title")
    upload_parser.add_argument("--artist", "-a", default=None, help="track artist")

    play_parser = subparsers.add_parser("play", help="start the interactive player")
    play_parser.add_argument("--shuffle", action="store_true", help="start with shuffle on")
    play_parser.add_argument(
        "--repeat", choices=("off", "all", "one"), default=None, help="initial repeat mode"
    )
    play_parser.add_argument("--query", "-q", default="", help="initial search filter")
    play_parser.add_argument(
        "--index", "-i", type=int, default=None, help="row of the list to start playing (1-based)"
    )

    return parser


async def _run_list(container: Container, query: str) -> int:
    from tunebox.infrastructure.console.formatters import format_view

    result = await container.catalog_service.load()
    controller = container.playback_controller
    view = controller.set_query(query)
    print(format_view(view, -1))
    return 0 if result.success else 1


async def _run_import(container: Container, directory: str | None) -> int:
    result = await container.library_importer.import_directory(directory)
    for title in result.added_titles:
        print(f"Added: {title}")
    print(f"Import completed: {result.added} added, {result.skipped} skipped")
    return 0


async def _run_upload(
    container: Container, file: Path, title: str | None, artist: str | None
) -> int:
    await container.catalog_service.load()
    result = await container.catalog_service.upload(file, title=title, artist=artist)
    print(result.message)
    return 0 if result.success else 1


async def _run_play(container: Container, args: argparse.Namespace) -> int:
    from tunebox.domain.playback.value_objects import RepeatMode
    from tunebox.infrastructure.console.player_console import PlayerConsole

    await container.catalog_service.load()
    controller = container.playback_controller
    if args.shuffle:
        controller.set_shuffle(True)
    if args.repeat is not None:
        while controller.repeat_mode != RepeatMode(args.repeat):
            controller.cycle_repeat()
    if args.query:
        controller.set_query(args.query)

    console = PlayerConsole(controller, container.event_bus)
    if args.index is not None:
        await console.handle(f"select {args.index}")
    await console.run()
    return 0


async def run(args: argparse.Namespace, container: Container) -> int:
    await container.initialize()
    try:
        if args.action == "list":
            return await _run_list(container, args.query)
        if args.action == "import":
            return await _run_import(container, args.directory)
        if args.action == "upload":
            return await _run_upload(container, args.file, args.title, args.artist)
        return await _run_play(container, args)
    finally:
        await container.shutdown()


def main(argv: list[str] | None = None) -> int:
    from tunebox.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.backend is not None:
        settings = settings.model_copy(update={"catalog_backend": args.backend})
    elif args.action == "import":
        settings = settings.model_copy(update={"catalog_backend": "local"})

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    from tunebox.config.container import create_container

    container = create_container(settings)

    try:
        exit_code = asyncio.run(run(args, container))
        logger.info(LogTemplates.APP_STOPPED)
        return exit_code
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.APP_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
