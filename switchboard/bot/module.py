"""
Module contract: an independently owned feature unit of a Bot.

A module is constructed with the Bot, then driven through two startup phases
and one teardown by the Bot alone:

1. ``initialize()``: awaited sequentially in module-mapping order during the
   ready sequence; a failure aborts startup.
2. ``on_ready()``: scheduled concurrently for every module once the Bot is
   ready; a failure is logged and affects no other module.
3. ``destroy()``: awaited during ``Bot.stop()`` in reverse init order.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from switchboard.bot.lifecycle import ModuleState
from switchboard.core.exceptions import BotNotReadyError

if TYPE_CHECKING:
    from switchboard.bot.bot import Bot


class Module(abc.ABC):
    def __init__(self, bot: "Bot") -> None:
        self._bot = bot
        self.state = ModuleState.CONSTRUCTED

    @property
    def bot(self) -> "Bot":
        """The owning Bot; only reachable once its gateway connection is ready."""
        if not self._bot.is_ready():
            raise BotNotReadyError(f"{self.__class__.__name__}.bot")
        return self._bot

    @abc.abstractmethod
    async def initialize(self) -> None:
        ...

    async def on_ready(self) -> None:
        """Post-ready hook; no-op by default."""

    @abc.abstractmethod
    async def destroy(self) -> None:
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self.state.name})"


__all__ = ["Module"]
