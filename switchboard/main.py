"""
Switchboard - Application Entry Point
=====================================

Bootstrap
---------
- Config validation
- Logging setup
- Storage (SQLAlchemy, when DATABASE_URL is set)
- Bot with a CommandModule carrying the built-in commands
- Graceful shutdown on SIGTERM / SIGINT
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Optional

from switchboard.bot.bot import Bot, PreInitializeEvent
from switchboard.core.config import Config
from switchboard.core.logging.logger import get_logger, setup_logging, shutdown_logging
from switchboard.modules.commands import CommandModule, ping_command
from switchboard.storage.sqlalchemy_storage import SQLAlchemyStorage

logger = get_logger(__name__)


# ============================================================================
# Application Bootstrap
# ============================================================================


def _load_modules(event: PreInitializeEvent) -> None:
    commands = CommandModule(
        event.bot,
        default_guild_ids=Config.DEFAULT_GUILD_IDS,
        sync_commands=Config.SYNC_COMMANDS,
    )
    commands.add_command(ping_command())
    event.set_modules({"commands": commands})


def build_bot() -> Bot:
    """Assemble the Bot from configuration; nothing is connected yet."""
    storage: Optional[SQLAlchemyStorage] = None
    if Config.DATABASE_URL:
        storage = SQLAlchemyStorage(Config.DATABASE_URL)

    bot = Bot(token=Config.DISCORD_TOKEN, storage=storage, environment=Config.ENVIRONMENT)
    bot.pre_initialize.connect(_load_modules)
    return bot


# ============================================================================
# Application Shutdown
# ============================================================================


async def _shutdown(bot: Optional[Bot]) -> None:
    logger.info("========== SWITCHBOARD SHUTDOWN START ==========")

    if bot is not None and not bot.is_stopping:
        if bot.is_ready():
            try:
                await bot.stop()
            except Exception as exc:
                logger.error(f"Error while stopping bot: {exc}", exc_info=True)
        else:
            # Not ready (signal before READY, or the gateway died): stop() refuses, release directly.
            await _release_resources(bot)

    logger.info("========== SHUTDOWN COMPLETE ==========")


async def _release_resources(bot: Bot) -> None:
    try:
        await bot.client.close()
        await bot.wait_until_closed()
        logger.info("✓ Gateway connection closed")
    except Exception as exc:
        logger.error(f"Error while closing gateway connection: {exc}", exc_info=True)

    if bot.storage is not None and bot.storage.is_connected:
        try:
            await bot.storage.attempt_disconnect()
        except Exception as exc:
            logger.error(f"Error while disconnecting storage: {exc}", exc_info=True)


# ============================================================================
# Application Entrypoint
# ============================================================================


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, stop_event: asyncio.Event) -> None:
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, stop_event.set)
            logger.debug(f"{sig.name} handler installed")
        except NotImplementedError:
            logger.debug(f"{sig.name} not supported on this platform (likely Windows)")


async def main() -> None:
    """
    Lifecycle:
        1. Validate configuration and set up logging
        2. Build and start the bot
        3. Wait for the gateway to close or a shutdown signal
        4. Stop gracefully
    """
    Config.validate()
    setup_logging()
    logger.info("Configuration loaded", extra=Config.get_config_summary())

    stop_event = asyncio.Event()
    _install_signal_handlers(asyncio.get_running_loop(), stop_event)

    bot: Optional[Bot] = None
    try:
        bot = build_bot()
        await bot.start()

        closed = asyncio.create_task(bot.wait_until_closed())
        stopped = asyncio.create_task(stop_event.wait())
        done, pending = await asyncio.wait({closed, stopped}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()

        if stopped in done:
            logger.info("Shutdown signal received")
    finally:
        await _shutdown(bot)
        shutdown_logging()


def run() -> None:
    """Console-script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot manually stopped via keyboard interrupt.")
    except Exception as exc:
        logger.critical(f"Startup failure: {exc}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
