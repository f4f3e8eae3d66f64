"""aiogram message handlers.

Every Telegram message is converted into a `Memory` and dispatched to the Solana actions. Each
action callback becomes one chat reply. Messages that match no action get a short help reply.
"""

from __future__ import annotations

import logging
from time import monotonic

from aiogram.types import Message

from solana_plugin.app import App
from solana_plugin.runtime.types import ActionResponse, Content, Memory

logger = logging.getLogger(__name__)

HELP_TEXT = "I can deploy an NFT collection or mint a tweet token. Try: create nft collection ..."
ERROR_TEXT = "Something went wrong, please try again later."


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


def memory_from_message(message: Message) -> Memory:
    """Build the host-neutral message record from a Telegram message."""

    user = getattr(message, "from_user", None)
    chat = getattr(message, "chat", None)
    return Memory(
        user_id=str(user.id) if user is not None else "unknown",
        room_id=str(chat.id) if chat is not None else "unknown",
        content=Content(text=message.text or message.caption, source="telegram"),
    )


async def handle_message(message: Message, app: App) -> None:
    """Handle any incoming Telegram message."""

    started = monotonic()
    raw_text = message.text or message.caption or ""
    if not raw_text.strip() or _is_command_text(raw_text):
        await message.answer(HELP_TEXT)
        return

    replied = False

    async def _callback(response: ActionResponse) -> None:
        nonlocal replied
        replied = True
        await message.answer(response.text)

    # noinspection PyBroadException
    try:
        memory = memory_from_message(message)
        ok = await app.runtime.process_message(memory, _callback)
        latency_ms = int((monotonic() - started) * 1000)
        logger.info("handled ok=%s room_id=%s latency_ms=%d", ok, memory.room_id, latency_ms)
    except Exception:
        # Handler boundary: the chat always gets a reply, details stay in the logs.
        logger.exception("handler failed")
        if not replied:
            await message.answer(ERROR_TEXT)
        return

    if not replied:
        await message.answer(HELP_TEXT)
