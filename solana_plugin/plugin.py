"""Plugin registration for the Solana agent-kit actions."""

from __future__ import annotations

from solana_plugin.actions.deploy_collection import deploy_collection
from solana_plugin.actions.post_tweet_token import post_tweet_token
from solana_plugin.runtime.types import Plugin

solana_agentkit_plugin = Plugin(
    name="solana",
    description="Solana Plugin with solana agent kit",
    actions=(deploy_collection, post_tweet_token),
)
