"""POST_TWEET_TOKEN: mint a token after each tweet."""

from __future__ import annotations

import logging
import time

from solana_plugin.kit.solana_kit import TokenDetails
from solana_plugin.runtime.runtime import AgentRuntime
from solana_plugin.runtime.types import Action, ActionResponse, HandlerCallback, Memory

logger = logging.getLogger(__name__)

TWEET_TOKEN_SYMBOL = "TWEET"
TWEET_TOKEN_DECIMALS = 9


def tweet_token_details(runtime: AgentRuntime, *, now_ms: int | None = None) -> TokenDetails:
    """Token parameters for a tweet, named after the current Unix time in milliseconds."""

    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return TokenDetails(
        name=f"Tweet Token {timestamp}",
        symbol=TWEET_TOKEN_SYMBOL,
        uri=runtime.settings.default_nft_metadata_uri,
        decimals=TWEET_TOKEN_DECIMALS,
    )


async def handle_post_tweet_token(
        runtime: AgentRuntime,
        message: Memory,
        callback: HandlerCallback | None = None,
) -> bool:
    """Deploy a token for the tweet in `message`.

    Replies are text-only; `skipMedia` tells Twitter-style clients not to wait for an image.
    """

    logger.info("starting POST_TWEET_TOKEN room_id=%s", message.room_id)

    details = tweet_token_details(runtime)
    # noinspection PyBroadException
    try:
        kit = runtime.create_kit()
        deployed_address = await kit.deploy_token(details)
    except Exception as exc:
        logger.exception("error minting post-tweet token")
        if callback is not None:
            await callback(
                ActionResponse(
                    text=f"Failed to mint token: {exc}",
                    content={"error": str(exc), "skipMedia": True},
                )
            )
        return False

    logger.info("tweet token minted address=%s name=%s", deployed_address, details.name)
    if callback is not None:
        await callback(
            ActionResponse(
                text=f"Minted token for tweet: {deployed_address}",
                content={
                    "success": True,
                    "deployedAddress": deployed_address,
                    "tokenDetails": details.model_dump(),
                    "skipMedia": True,
                },
            )
        )
    return True


post_tweet_token = Action(
    name="POST_TWEET_TOKEN",
    description="Mint a token after each tweet",
    handler=handle_post_tweet_token,
    similes=("mint tweet token", "post tweet token", "tweet token"),
)
