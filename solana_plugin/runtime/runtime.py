"""Agent runtime: settings access and action dispatch for registered plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property

from solana_plugin.collection.llm_extractor import (
    CandidateExtractor,
    OpenAIExtractor,
    llm_config_from_settings,
)
from solana_plugin.collection.metadata import MetadataChecker, make_metadata_checker
from solana_plugin.config.settings import RuntimeSettings
from solana_plugin.kit.solana_kit import KitFactory, SolanaKit, create_kit
from solana_plugin.runtime.normalize import contains_phrase, normalize_text
from solana_plugin.runtime.types import Action, HandlerCallback, Memory, Plugin

logger = logging.getLogger(__name__)


@dataclass
class AgentRuntime:
    """Per-process container handed to every action.

    `extractor` and `metadata_checker` default to the live LLM and HTTP implementations; tests
    inject canned ones. The kit is created per deploy through `kit_factory`.
    """

    settings: RuntimeSettings
    plugins: list[Plugin] = field(default_factory=list)
    kit_factory: KitFactory = create_kit
    extractor: CandidateExtractor | None = None
    metadata_checker: MetadataChecker | None = None

    def __post_init__(self) -> None:
        if self.metadata_checker is None:
            self.metadata_checker = make_metadata_checker(timeout_s=self.settings.metadata_timeout_s)

    def get_setting(self, key: str) -> str | None:
        return self.settings.get_setting(key)

    def get_extractor(self) -> CandidateExtractor:
        """The configured extractor, or an OpenAI-backed one built from settings on first use."""

        if self.extractor is None:
            self.extractor = OpenAIExtractor(llm_config_from_settings(self.settings))
        return self.extractor

    def create_kit(self) -> SolanaKit:
        return self.kit_factory(self.settings)

    @cached_property
    def actions(self) -> tuple[Action, ...]:
        return tuple(action for plugin in self.plugins for action in plugin.actions)

    def select_action(self, text: str | None) -> Action | None:
        """Pick the action whose name or simile appears in the text (longest phrase wins)."""

        normalized = normalize_text(text)
        if not normalized:
            return None

        best: tuple[int, Action] | None = None
        for action in self.actions:
            for phrase in (action.name, *action.similes):
                if contains_phrase(normalized, phrase):
                    score = len(normalize_text(phrase))
                    if best is None or score > best[0]:
                        best = (score, action)
        return best[1] if best else None

    async def process_message(self, message: Memory, callback: HandlerCallback | None = None) -> bool:
        """Dispatch a message to the matching action and return the handler's result."""

        action = self.select_action(message.content.text)
        if action is None:
            logger.info("no action matched room_id=%s", message.room_id)
            return False

        if not await action.validate(self, message):
            logger.info("action rejected message action=%s room_id=%s", action.name, message.room_id)
            return False

        logger.info("dispatching action=%s room_id=%s", action.name, message.room_id)
        return await action.handler(self, message, callback)
