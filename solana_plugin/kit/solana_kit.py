"""Solana SDK seam.

Actions talk to the chain only through `SolanaKit`. The default implementation wraps
`agentipy.SolanaAgentKit`; tests pass a fake kit instead.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from pydantic import BaseModel, ConfigDict

from solana_plugin.collection.schema import CollectionRequest
from solana_plugin.config.settings import RuntimeSettings

logger = logging.getLogger(__name__)


class KitConfigurationError(RuntimeError):
    """Raised when the SDK cannot be created from the current settings."""


class DeployedCollection(BaseModel):
    """Normalised result of a collection deploy."""

    model_config = ConfigDict(frozen=True)

    collection_address: str
    signature: str | None = None


class TokenDetails(BaseModel):
    """Token parameters passed to a token deploy."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    uri: str
    decimals: int = 9


class SolanaKit(Protocol):
    """The SDK operations the actions rely on."""

    @property
    def wallet_address(self) -> str: ...

    async def deploy_collection(self, request: CollectionRequest) -> DeployedCollection: ...

    async def deploy_token(self, details: TokenDetails) -> str: ...


KitFactory = Callable[[RuntimeSettings], SolanaKit]


def _pick(result: Any, *keys: str) -> Any:
    for key in keys:
        if isinstance(result, dict) and result.get(key) is not None:
            return result[key]
        value = getattr(result, key, None)
        if value is not None:
            return value
    return None


def deployed_collection_from_result(result: Any) -> DeployedCollection:
    """Normalise an SDK collection result (dict or object, Pubkey or str values)."""

    address = _pick(result, "collection_address", "collectionAddress", "collection", "address", "mint")
    if address is None:
        raise ValueError(f"SDK returned no collection address: {result!r}")
    signature = _pick(result, "signature", "tx_signature", "txSignature")
    return DeployedCollection(
        collection_address=str(address),
        signature=None if signature is None else str(signature),
    )


def token_address_from_result(result: Any) -> str:
    """Normalise an SDK token deploy result to the mint address string."""

    if isinstance(result, str):
        return result
    address = _pick(result, "mint", "mint_address", "address", "token_address")
    if address is None:
        # agentipy may hand back a bare Pubkey
        return str(result)
    return str(address)


class AgentipyKit:
    """`SolanaKit` backed by `agentipy.SolanaAgentKit`."""

    def __init__(self, kit: Any) -> None:
        self._kit = kit

    @property
    def wallet_address(self) -> str:
        return str(self._kit.wallet_address)

    async def deploy_collection(self, request: CollectionRequest) -> DeployedCollection:
        # The SDK takes a single creator; the first listed creator is used.
        creator = request.creators[0]
        result = await self._kit.deploy_collection(
            name=request.name,
            uri=request.uri,
            royalty_basis_points=request.royalty_basis_points,
            creator_address=creator.address,
        )
        return deployed_collection_from_result(result)

    async def deploy_token(self, details: TokenDetails) -> str:
        result = await self._kit.deploy_token(decimals=details.decimals)
        return token_address_from_result(result)


def create_kit(settings: RuntimeSettings) -> SolanaKit:
    """Create the default SDK kit from `SOLANA_PRIVATE_KEY`, `SOLANA_RPC_URL`, `OPENAI_API_KEY`."""

    if not settings.solana_private_key:
        raise KitConfigurationError("SOLANA_PRIVATE_KEY is required")
    if not settings.solana_rpc_url:
        raise KitConfigurationError("SOLANA_RPC_URL is required")

    from agentipy import SolanaAgentKit  # heavy import, only needed for live deploys

    kit = SolanaAgentKit(
        private_key=settings.solana_private_key,
        rpc_url=settings.solana_rpc_url,
        openai_api_key=settings.openai_api_key,
    )
    logger.info("solana kit initialized wallet=%s", kit.wallet_address)
    return AgentipyKit(kit)
