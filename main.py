from __future__ import annotations

import asyncio

import uvloop
from aiogram.types import BotCommand, BotCommandScopeDefault
from loguru import logger

from santa.bot import bot, dp
from santa.core.config import get_settings
from santa.core.logging import setup_logging


USERS_COMMANDS: dict[str, str] = {
    "start": "how to use the bot",
    "help": "how to use the bot",
    "status": "show loaded participants",
    "generate": "draw Secret Santa assignments",
    "reset": "clear uploaded files",
}


async def set_default_commands() -> None:
    await bot.set_my_commands(
        [
            BotCommand(command=command, description=description)
            for command, description in USERS_COMMANDS.items()
        ],
        scope=BotCommandScopeDefault(),
    )


async def on_startup() -> None:
    logger.info("bot starting...")

    await set_default_commands()

    bot_info = await bot.get_me()

    logger.info("Name     - {name}", name=bot_info.full_name)
    logger.info("Username - @{username}", username=bot_info.username)
    logger.info("ID       - {id}", id=bot_info.id)

    logger.info("bot started")


async def on_shutdown() -> None:
    logger.info("bot stopping...")

    await dp.storage.close()
    await bot.session.close()

    logger.info("bot stopped")


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_path)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())


def run() -> None:
    if not getattr(asyncio, "debug", False):
        uvloop.install()

    asyncio.run(main())


if __name__ == "__main__":
    run()
