"""
Command module: a CommandRegistry and CommandDispatcher packaged as one Module.

During ``initialize`` the registry is synchronized with Discord (unless
disabled) and only then is the dispatcher attached to the Bot's listener
chain, so no interaction is routed against a half-registered command set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from switchboard.bot.module import Module
from switchboard.core.logging.logger import get_logger
from switchboard.interaction.nodes import InteractionNode
from switchboard.modules.commands.dispatcher import CommandDispatcher
from switchboard.modules.commands.registry import CommandRegistry

if TYPE_CHECKING:
    from switchboard.bot.bot import Bot

logger = get_logger(__name__)


class CommandModule(Module):
    """
    Usage:
        >>> module = CommandModule(bot, default_guild_ids=[1234])
        >>> module.add_commands([ping_command(), settings_command()])
        >>> bot.set_modules({"commands": module})
    """

    def __init__(
        self,
        bot: "Bot",
        *,
        default_contexts: Optional[Sequence[int]] = None,
        default_integration_types: Optional[Sequence[int]] = None,
        default_guild_ids: Optional[Sequence[int]] = None,
        sync_commands: bool = True,
    ) -> None:
        super().__init__(bot)
        self.registry = CommandRegistry(
            default_guild_ids=default_guild_ids,
            default_contexts=default_contexts,
            default_integration_types=default_integration_types,
        )
        self.dispatcher = CommandDispatcher(self.registry, bot.reply_policy)
        self.sync_commands = sync_commands
        self._attached = False

    def add_command(self, node: InteractionNode) -> None:
        self.registry.add(node)

    def add_commands(self, nodes: Iterable[InteractionNode]) -> None:
        self.registry.add_all(nodes)

    async def register_commands(self) -> int:
        return await self.registry.synchronize(self.bot.client)

    async def initialize(self) -> None:
        if self.sync_commands:
            await self.register_commands()
        else:
            logger.info(
                "Command synchronization disabled; using the commands already registered remotely",
                extra={"command_count": len(self.registry)},
            )

        self.bot.register_interaction_listener(self.dispatcher.dispatch)
        self._attached = True

    async def destroy(self) -> None:
        if self._attached:
            self._bot.unregister_interaction_listener(self.dispatcher.dispatch)
            self._attached = False


__all__ = ["CommandModule"]
