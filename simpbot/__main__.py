"""
SimpBot CLI entry point.

Provides command-line interface for running the bot and managing the
per-guild prefix and mute configuration it reads.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from simpbot import __version__
from simpbot.config.logging import get_logger, setup_logging
from simpbot.config.settings import Settings, load_settings
from simpbot.errors import StorageError
from simpbot.storage.config_store import ConfigStore


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="simpbot",
        description="Discord bot with per-guild command prefixes and moderation mutes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"SimpBot {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("run", help="Run the Discord bot")
    subparsers.add_parser("config", help="Show current configuration")

    set_prefix_parser = subparsers.add_parser(
        "set-prefix",
        help="Set the command prefix for a guild",
    )
    set_prefix_parser.add_argument("guild_id", type=int, help="Discord guild id")
    set_prefix_parser.add_argument("symbol", help="Single prefix character, e.g. '?'")

    clear_prefix_parser = subparsers.add_parser(
        "clear-prefix",
        help="Remove a guild's prefix so the default applies again",
    )
    clear_prefix_parser.add_argument("guild_id", type=int, help="Discord guild id")

    mute_parser = subparsers.add_parser(
        "mute",
        help="Mute a user: their messages are deleted and never run as commands",
    )
    mute_parser.add_argument("user_id", type=int, help="Discord user id")

    unmute_parser = subparsers.add_parser("unmute", help="Unmute a user")
    unmute_parser.add_argument("user_id", type=int, help="Discord user id")

    return parser


def cmd_config(settings: Settings) -> int:
    """Display current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== SimpBot Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nBot Name: {settings.bot.name}")
    logger.info(f"Bot Token: {'Set' if settings.bot.token else 'Not set'}")
    logger.info(f"Default Prefix: {settings.bot.default_prefix}")
    logger.info(f"Command Timeout: {settings.bot.command_timeout or 'None (unbounded)'}")
    logger.info(f"\nDatabase: {settings.storage.database_path}")
    logger.info(f"\nWikipedia API: {settings.wikipedia.api_url}")
    logger.info(f"Wikipedia Timeout: {settings.wikipedia.timeout}s")

    return 0


def cmd_run(settings: Settings) -> int:
    """Start the Discord bot."""
    logger = get_logger(__name__)

    if not settings.bot.token:
        logger.error(
            "Discord bot token not set. Add BOT__TOKEN=<your-token> to your .env file."
        )
        return 1

    from simpbot.bot import SimpBot

    bot = SimpBot(settings)
    logger.info(f"Starting {settings.bot.name}...")
    # log_handler=None: disable discord.py's default logging setup and use ours
    bot.run(settings.bot.token, log_handler=None)
    return 0


async def cmd_admin(args, settings: Settings) -> int:
    """Apply one prefix or mute change to the config store."""
    logger = get_logger(__name__)

    try:
        async with ConfigStore(settings.storage.database_path) as store:
            if args.command == "set-prefix":
                await store.set_prefix(args.guild_id, args.symbol)
            elif args.command == "clear-prefix":
                if not await store.clear_prefix(args.guild_id):
                    logger.warning(f"Guild {args.guild_id} had no stored prefix")
            elif args.command == "mute":
                await store.set_muted(args.user_id, True)
            elif args.command == "unmute":
                await store.set_muted(args.user_id, False)
    except ValidationError as e:
        logger.error(f"Invalid value: {e.errors()[0]['msg']}")
        return 1
    except StorageError as e:
        logger.error(f"Config store error: {e}")
        return 1

    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "run":
        return cmd_run(settings)
    elif args.command in ("set-prefix", "clear-prefix", "mute", "unmute"):
        return asyncio.run(cmd_admin(args, settings))
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
