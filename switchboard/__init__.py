"""
Switchboard: lifecycle and interaction-dispatch scaffold for discord.py bots.
"""

from switchboard.bot import Bot, BotState, GatewayClient, Module, ModuleState
from switchboard.core.exceptions import UserError
from switchboard.interaction import (
    BotStyle,
    InteractionHook,
    InteractionNode,
    NodeKind,
    message_command,
    parent_command,
    slash_command,
    subcommand,
    subcommand_group,
    user_command,
)
from switchboard.modules.commands import CommandModule
from switchboard.storage import SQLAlchemyStorage, StorageManager

__version__ = "0.1.0"

__all__ = [
    "Bot",
    "BotState",
    "BotStyle",
    "CommandModule",
    "GatewayClient",
    "InteractionHook",
    "InteractionNode",
    "Module",
    "ModuleState",
    "NodeKind",
    "SQLAlchemyStorage",
    "StorageManager",
    "UserError",
    "message_command",
    "parent_command",
    "slash_command",
    "subcommand",
    "subcommand_group",
    "user_command",
]
