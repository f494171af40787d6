from switchboard.interaction.hook import InteractionHook
from switchboard.interaction.invocation import CommandInvocation, FocusedOption
from switchboard.interaction.nodes import (
    InteractionNode,
    NodeKind,
    message_command,
    parent_command,
    slash_command,
    subcommand,
    subcommand_group,
    user_command,
)
from switchboard.interaction.reply_policy import BotStyle, ReplyPolicy

__all__ = [
    "BotStyle",
    "CommandInvocation",
    "FocusedOption",
    "InteractionHook",
    "InteractionNode",
    "NodeKind",
    "ReplyPolicy",
    "message_command",
    "parent_command",
    "slash_command",
    "subcommand",
    "subcommand_group",
    "user_command",
]
