"""Bot router: every message goes to the Solana action dispatcher."""

from __future__ import annotations

from aiogram import Router

from solana_plugin.bot.handlers import handle_message

router = Router(name="solana")
router.message.register(handle_message)
