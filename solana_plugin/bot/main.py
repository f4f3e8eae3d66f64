"""Bot process entrypoint."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from solana_plugin.app import create_app
from solana_plugin.bot.router import router
from solana_plugin.config.logging import configure_logging
from solana_plugin.config.settings import load_settings

logger = logging.getLogger(__name__)


async def main() -> None:
    """Run the Telegram bot polling loop."""

    settings = load_settings()
    configure_logging(settings)

    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is required to run the bot")

    app = create_app(settings)

    bot = Bot(token=settings.telegram_bot_token, default=DefaultBotProperties(parse_mode=None))
    dp = Dispatcher()
    dp.include_router(router)

    try:
        await dp.start_polling(bot, app=app)
    finally:
        logger.info("shutting down")
        await bot.session.close()


def run() -> None:
    """Console-script entrypoint."""

    asyncio.run(main())


if __name__ == "__main__":
    run()
