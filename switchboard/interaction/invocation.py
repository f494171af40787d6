"""
Parsed view of an application-command or autocomplete interaction.

Discord nests subcommand routing inside the option list of the raw payload:

    {"name": "settings", "type": 1, "options": [
        {"name": "role", "type": 2, "options": [            # subcommand group
            {"name": "add", "type": 1, "options": [         # subcommand
                {"name": "target", "type": 8, "value": "123", "focused": true}
            ]}
        ]}
    ]}

``CommandInvocation.from_hook`` walks that structure once so node matching is
a plain field comparison.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

import discord

if TYPE_CHECKING:
    from switchboard.bot.bot import Bot
    from switchboard.interaction.hook import InteractionHook

_SUBCOMMAND = discord.AppCommandOptionType.subcommand.value
_SUBCOMMAND_GROUP = discord.AppCommandOptionType.subcommand_group.value


@dataclass(frozen=True)
class FocusedOption:
    """The option the user is currently typing into (autocomplete only)."""

    name: str
    value: Any
    type: int


def parse_options(
    data: Optional[Mapping[str, Any]],
) -> Tuple[Optional[str], Optional[str], List[Mapping[str, Any]]]:
    """
    Split raw interaction data into ``(group, subcommand, leaf_options)``.

    ``leaf_options`` is the option list of the innermost level reached.
    """
    group: Optional[str] = None
    subcommand: Optional[str] = None
    options: List[Mapping[str, Any]] = list((data or {}).get("options") or [])

    if options and options[0].get("type") == _SUBCOMMAND_GROUP:
        group = options[0]["name"]
        options = list(options[0].get("options") or [])

    if options and options[0].get("type") == _SUBCOMMAND:
        subcommand = options[0]["name"]
        options = list(options[0].get("options") or [])

    return group, subcommand, options


@dataclass(frozen=True)
class CommandInvocation:
    """
    Immutable routing view of one inbound command/autocomplete event.

    Attributes:
        hook: The per-event context the handler will receive
        command_name: Top-level command name
        command_type: ``discord.AppCommandType`` value of the invoked command
        group: Subcommand group name, if the event carries one
        subcommand: Subcommand name, if the event carries one
        options: Innermost option values by name
        focused: Focused option for autocomplete events
    """

    hook: "InteractionHook"
    command_name: str
    command_type: int = discord.AppCommandType.chat_input.value
    group: Optional[str] = None
    subcommand: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    focused: Optional[FocusedOption] = None

    @property
    def bot(self) -> "Bot":
        return self.hook.bot

    @property
    def qualified_name(self) -> str:
        """``"settings role add"`` style path, used in logs."""
        return " ".join(part for part in (self.command_name, self.group, self.subcommand) if part)

    @classmethod
    def from_hook(cls, hook: "InteractionHook") -> "CommandInvocation":
        data: Mapping[str, Any] = hook.interaction.data or {}
        group, subcommand, leaf_options = parse_options(data)

        focused: Optional[FocusedOption] = None
        values: Dict[str, Any] = {}
        for option in leaf_options:
            name = option.get("name")
            if name is None:
                continue
            values[name] = option.get("value")
            if option.get("focused"):
                focused = FocusedOption(
                    name=name,
                    value=option.get("value"),
                    type=int(option.get("type", 0)),
                )

        return cls(
            hook=hook,
            command_name=str(data.get("name", "")),
            command_type=int(data.get("type", discord.AppCommandType.chat_input.value)),
            group=group,
            subcommand=subcommand,
            options=values,
            focused=focused,
        )


__all__ = ["CommandInvocation", "FocusedOption", "parse_options"]
