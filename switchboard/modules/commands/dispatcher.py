"""
Command dispatcher: routes application-command and autocomplete interactions
to registry nodes.

Registered as a Bot interaction listener. Command failures are caught here,
exactly once, and handed to the Bot's ReplyPolicy; autocomplete failures are
only logged since an autocomplete interaction cannot carry a reply.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from switchboard.core.logging.logger import get_logger
from switchboard.interaction.invocation import CommandInvocation

if TYPE_CHECKING:
    from switchboard.interaction.hook import InteractionHook
    from switchboard.interaction.reply_policy import ReplyPolicy
    from switchboard.modules.commands.registry import CommandRegistry

logger = get_logger(__name__)


class CommandDispatcher:
    def __init__(self, registry: "CommandRegistry", reply_policy: "ReplyPolicy") -> None:
        self.registry = registry
        self.reply_policy = reply_policy

    async def dispatch(self, hook: "InteractionHook") -> bool:
        """
        Handle ``hook`` if it is a command or autocomplete interaction.

        Returns:
            True when the interaction was a command/autocomplete event (handled
            or dropped), False for every other interaction type.
        """
        interaction_type = hook.interaction.type

        if interaction_type is discord.InteractionType.application_command:
            await self._dispatch_command(hook)
            return True
        if interaction_type is discord.InteractionType.autocomplete:
            await self._dispatch_autocomplete(hook)
            return True
        return False

    async def _dispatch_command(self, hook: "InteractionHook") -> None:
        invocation = CommandInvocation.from_hook(hook)
        node = self.registry.get(invocation.command_name)
        if node is None:
            logger.warning(
                f"Command '{invocation.command_name}' not found",
                extra={"command_name": invocation.command_name, "command_type": invocation.command_type},
            )
            return

        try:
            await node.execute(invocation)
        except Exception as exc:
            await self.reply_policy.handle(hook, exc)
            return

        logger.debug(
            f"Command '{invocation.qualified_name}' executed",
            extra={"command_name": invocation.qualified_name},
        )

    async def _dispatch_autocomplete(self, hook: "InteractionHook") -> None:
        invocation = CommandInvocation.from_hook(hook)
        node = self.registry.get(invocation.command_name)
        if node is None:
            logger.warning(
                f"Command '{invocation.command_name}' not found for autocomplete",
                extra={"command_name": invocation.command_name},
            )
            return
        if not node.supports_autocomplete:
            logger.warning(
                f"Command '{invocation.command_name}' does not support autocomplete",
                extra={"command_name": invocation.command_name, "command_type": invocation.command_type},
            )
            return

        try:
            choices = await node.autocomplete(invocation)
            await hook.interaction.response.autocomplete(choices)
        except Exception:
            logger.error(
                f"Failed to autocomplete command '{invocation.qualified_name}'",
                exc_info=True,
                extra={
                    "command_name": invocation.qualified_name,
                    "focused_option": invocation.focused.name if invocation.focused else None,
                },
            )


__all__ = ["CommandDispatcher"]
