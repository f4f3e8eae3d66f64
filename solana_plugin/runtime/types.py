"""Host-facing types: chat messages, action responses, actions and plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from solana_plugin.runtime.runtime import AgentRuntime


class Content(BaseModel):
    """Message body. Extra keys from the host are kept as-is."""

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    source: str | None = None


class Memory(BaseModel):
    """A single chat message as delivered by the agent host."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    room_id: str = Field(alias="roomId")
    content: Content = Field(default_factory=Content)


@dataclass(frozen=True)
class ActionResponse:
    """What an action reports back: a chat reply plus a structured payload."""

    text: str
    content: dict[str, Any] = field(default_factory=dict)


HandlerCallback = Callable[[ActionResponse], Awaitable[None]]


class ActionHandler(Protocol):
    async def __call__(
            self,
            runtime: AgentRuntime,
            message: Memory,
            callback: HandlerCallback | None = None,
    ) -> bool: ...


async def always_valid(_runtime: AgentRuntime, _message: Memory) -> bool:
    return True


@dataclass(frozen=True)
class Action:
    """A named chat action the runtime can dispatch to."""

    name: str
    description: str
    handler: ActionHandler
    similes: tuple[str, ...] = ()
    validate: Callable[[AgentRuntime, Memory], Awaitable[bool]] = always_valid


@dataclass(frozen=True)
class Plugin:
    """A bundle of actions registered with the runtime."""

    name: str
    description: str
    actions: tuple[Action, ...] = ()
    evaluators: tuple[Any, ...] = ()
    providers: tuple[Any, ...] = ()
