"""Logging configuration for the plugin host."""

from __future__ import annotations

import logging

from solana_plugin.config.settings import RuntimeSettings

# Loggers that are chatty at INFO and carry nothing an operator of this bot needs.
QUIET_LOGGERS: tuple[str, ...] = ("aiogram.event", "aiogram.dispatcher")


def configure_logging(settings: RuntimeSettings) -> None:
    """Configure process logging from `LOG_LEVEL`.

    Logs are for operators only. Error details sent back to chat go through action callbacks, and
    secrets from `settings` are never logged.
    """

    level = settings.log_level
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logging.getLogger().setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLevelName(level)))

    logging.getLogger(__name__).debug(
        "logging configured level=%s wallet=%s", level, settings.wallet_address or "<unset>"
    )
