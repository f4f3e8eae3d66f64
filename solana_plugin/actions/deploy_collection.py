"""DEPLOY_COLLECTION: deploy a new NFT collection from a chat request."""

from __future__ import annotations

import logging

from solana_plugin.collection.validator import validate_collection_request
from solana_plugin.runtime.runtime import AgentRuntime
from solana_plugin.runtime.types import Action, ActionResponse, HandlerCallback, Memory

logger = logging.getLogger(__name__)


async def _reply(callback: HandlerCallback | None, text: str, content: dict) -> None:
    if callback is not None:
        await callback(ActionResponse(text=text, content=content))


async def handle_deploy_collection(
        runtime: AgentRuntime,
        message: Memory,
        callback: HandlerCallback | None = None,
) -> bool:
    """Validate the request, deploy the collection and report the outcome through `callback`."""

    logger.info("starting DEPLOY_COLLECTION room_id=%s", message.room_id)

    # noinspection PyBroadException
    try:
        result = await validate_collection_request(
            message,
            settings=runtime.settings,
            extractor=runtime.get_extractor(),
            metadata_checker=runtime.metadata_checker,
            wallet_address=runtime.settings.wallet_address,
        )
        if not result.success or result.request is None:
            await _reply(callback, result.text, result.error or {"error": result.text})
            return False

        request = result.request
        kit = runtime.create_kit()
        deployed = await kit.deploy_collection(request)
    except Exception as exc:
        # Handler boundary: SDK, chain and configuration errors are reported, never raised.
        logger.exception("error deploying collection")
        await _reply(callback, f"Failed to deploy collection: {exc}", {"error": str(exc)})
        return False

    logger.info(
        "collection deployed name=%s address=%s signature=%s",
        request.name,
        deployed.collection_address,
        deployed.signature,
    )
    await _reply(
        callback,
        f'Successfully deployed NFT collection "{request.name}"! '
        f"Collection address: {deployed.collection_address}",
        {
            "success": True,
            "collectionAddress": deployed.collection_address,
            "name": request.name,
            "signature": deployed.signature,
        },
    )
    return True


deploy_collection = Action(
    name="DEPLOY_COLLECTION",
    description="Deploy a new NFT collection on Solana blockchain",
    handler=handle_deploy_collection,
    similes=(
        "create collection",
        "launch collection",
        "deploy nft collection",
        "create nft collection",
        "mint collection",
    ),
)
