"""Application composition root.

This module wires settings and the Solana plugin into an `AgentRuntime` for the bot host.
"""

from __future__ import annotations

from dataclasses import dataclass

from solana_plugin.config.settings import RuntimeSettings
from solana_plugin.plugin import solana_agentkit_plugin
from solana_plugin.runtime.runtime import AgentRuntime


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: RuntimeSettings
    runtime: AgentRuntime


def create_app(settings: RuntimeSettings) -> App:
    """Create the application container with the Solana plugin registered."""

    runtime = AgentRuntime(settings=settings, plugins=[solana_agentkit_plugin])
    return App(settings=settings, runtime=runtime)
