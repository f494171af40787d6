"""
Interaction node tree: declarative application commands plus their handlers.

Purpose
-------
Represent every routable command shape with one flat, tagged dataclass and
centralize resolution, execution and autocomplete in it.

Variants (``NodeKind``)
-----------------------
- COMMAND:           top-level leaf (chat-input, user or message command)
- PARENT_COMMAND:    top-level chat-input command that only routes to children
- SUBCOMMAND:        leaf beneath a parent or a group
- SUBCOMMAND_GROUP:  routing level holding subcommands

Design Notes
------------
- Nodes are built through the construction helpers at the bottom of this
  module; each helper validates its variant and raises ``ValueError`` early,
  so an invalid tree never reaches the registry.
- Resolution is first structural match in registration order. When the event
  carries a subcommand group, a parent skips its plain subcommands.
- ``to_payload()`` renders the Discord API JSON; children nest as options.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Union,
)

import discord
from discord import app_commands

from switchboard.core.exceptions import ResolutionError

if TYPE_CHECKING:
    from switchboard.interaction.hook import InteractionHook
    from switchboard.interaction.invocation import CommandInvocation, FocusedOption

Handler = Callable[["InteractionHook"], Awaitable[None]]
AutocompleteHandler = Callable[
    ["InteractionHook", Optional["FocusedOption"]],
    Union[Awaitable[Optional[List[app_commands.Choice]]], Optional[List[app_commands.Choice]]],
]

MAX_NAME_LENGTH = 32
MAX_DESCRIPTION_LENGTH = 100
MAX_CHILDREN = 25

_NESTING_OPTION_TYPES = frozenset(
    {
        discord.AppCommandOptionType.subcommand.value,
        discord.AppCommandOptionType.subcommand_group.value,
    }
)


class NodeKind(Enum):
    COMMAND = "command"
    PARENT_COMMAND = "parent_command"
    SUBCOMMAND = "subcommand"
    SUBCOMMAND_GROUP = "subcommand_group"


@dataclass
class InteractionNode:
    """
    One node of a command tree.

    Only the fields relevant to ``kind`` are meaningful: ``handler`` for
    leaves, ``children`` for composites, deployment fields (``guild_ids``,
    ``contexts``, ``integration_types``, ``nsfw``,
    ``default_member_permissions``) for top-level nodes.
    """

    kind: NodeKind
    name: str
    description: str = ""
    handler: Optional[Handler] = None
    autocomplete_handler: Optional[AutocompleteHandler] = None
    options: List[Dict[str, Any]] = field(default_factory=list)
    children: List["InteractionNode"] = field(default_factory=list)
    command_type: discord.AppCommandType = discord.AppCommandType.chat_input
    guild_ids: Optional[List[int]] = None
    name_localizations: Optional[Dict[str, str]] = None
    description_localizations: Optional[Dict[str, str]] = None
    default_member_permissions: Optional[int] = None
    nsfw: bool = False
    contexts: Optional[List[int]] = None
    integration_types: Optional[List[int]] = None

    # ------------------------------------------------------------------ #
    # Classification
    # ------------------------------------------------------------------ #

    @property
    def is_top_level(self) -> bool:
        return self.kind in (NodeKind.COMMAND, NodeKind.PARENT_COMMAND)

    @property
    def is_composite(self) -> bool:
        return self.kind in (NodeKind.PARENT_COMMAND, NodeKind.SUBCOMMAND_GROUP)

    @property
    def supports_autocomplete(self) -> bool:
        """Only chat-input commands (and their subtrees) can autocomplete."""
        return self.command_type is discord.AppCommandType.chat_input

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #

    def matches(self, invocation: "CommandInvocation") -> bool:
        if self.kind is NodeKind.SUBCOMMAND:
            return invocation.subcommand == self.name
        if self.kind is NodeKind.SUBCOMMAND_GROUP:
            return invocation.group == self.name
        return invocation.command_name == self.name

    def _resolve_child(self, invocation: "CommandInvocation", operation: str) -> "InteractionNode":
        skip_plain = self.kind is NodeKind.PARENT_COMMAND and invocation.group is not None
        for child in self.children:
            if skip_plain and child.kind is not NodeKind.SUBCOMMAND_GROUP:
                continue
            if child.matches(invocation):
                return child
        raise ResolutionError(self.name, operation)

    async def execute(self, invocation: "CommandInvocation") -> None:
        """Run the handler of this node, or of the single child the event resolves to."""
        if self.is_composite:
            child = self._resolve_child(invocation, "execute")
            await child.execute(invocation)
            return

        if self.handler is None:
            raise ResolutionError(self.name, "execute")
        await self.handler(invocation.hook)

    async def autocomplete(self, invocation: "CommandInvocation") -> List[app_commands.Choice]:
        """Resolve like ``execute`` and return the choices from the author's callback."""
        if self.is_composite:
            child = self._resolve_child(invocation, "autocomplete")
            return await child.autocomplete(invocation)

        if not self.supports_autocomplete or self.autocomplete_handler is None:
            return []

        result = self.autocomplete_handler(invocation.hook, invocation.focused)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])

    # ------------------------------------------------------------------ #
    # Discord API payload
    # ------------------------------------------------------------------ #

    def to_payload(self) -> Dict[str, Any]:
        if self.kind is NodeKind.SUBCOMMAND:
            payload: Dict[str, Any] = {
                "type": discord.AppCommandOptionType.subcommand.value,
                "name": self.name,
                "description": self.description,
                "options": [dict(option) for option in self.options],
            }
        elif self.kind is NodeKind.SUBCOMMAND_GROUP:
            payload = {
                "type": discord.AppCommandOptionType.subcommand_group.value,
                "name": self.name,
                "description": self.description,
                "options": [child.to_payload() for child in self.children],
            }
        else:
            chat_input = self.command_type is discord.AppCommandType.chat_input
            payload = {
                "type": self.command_type.value,
                "name": self.name,
                "description": self.description if chat_input else "",
                "nsfw": self.nsfw,
            }
            if chat_input:
                if self.kind is NodeKind.PARENT_COMMAND:
                    payload["options"] = [child.to_payload() for child in self.children]
                else:
                    payload["options"] = [dict(option) for option in self.options]
            if self.default_member_permissions is not None:
                payload["default_member_permissions"] = str(self.default_member_permissions)
            if self.contexts is not None:
                payload["contexts"] = list(self.contexts)
            if self.integration_types is not None:
                payload["integration_types"] = list(self.integration_types)

        if self.name_localizations:
            payload["name_localizations"] = dict(self.name_localizations)
        if self.description_localizations:
            payload["description_localizations"] = dict(self.description_localizations)
        return payload

    def __repr__(self) -> str:
        return f"InteractionNode(kind={self.kind.name}, name={self.name!r}, children={len(self.children)})"


# ============================================================================
# Construction helpers
# ============================================================================


def _check_name(name: str) -> None:
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Command name must be 1-{MAX_NAME_LENGTH} characters, got {name!r}")


def _check_chat_input_name(name: str) -> None:
    _check_name(name)
    if name != name.lower() or " " in name:
        raise ValueError(f"Chat-input names must be lowercase without spaces, got {name!r}")


def _check_description(name: str, description: str) -> None:
    if not description or len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(
            f"Description of {name!r} must be 1-{MAX_DESCRIPTION_LENGTH} characters"
        )


def _check_handler(name: str, handler: Any) -> None:
    if not callable(handler):
        raise ValueError(f"Handler of {name!r} must be callable")


def _check_options(name: str, options: Optional[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    checked = [dict(option) for option in options or []]
    for option in checked:
        if option.get("type") in _NESTING_OPTION_TYPES:
            raise ValueError(
                f"{name!r}: declare nesting with parent_command/subcommand_group, not raw options"
            )
        if "name" not in option:
            raise ValueError(f"{name!r}: every option needs a name")
    return checked


def _check_children(
    name: str,
    children: Sequence[InteractionNode],
    allowed: Sequence[NodeKind],
) -> List[InteractionNode]:
    if not children:
        raise ValueError(f"{name!r} needs at least one child")
    if len(children) > MAX_CHILDREN:
        raise ValueError(f"{name!r} has more than {MAX_CHILDREN} children")

    seen = set()
    for child in children:
        if child.kind not in allowed:
            allowed_names = ", ".join(kind.name for kind in allowed)
            raise ValueError(
                f"{name!r} cannot contain a {child.kind.name} ({child.name!r}); allowed: {allowed_names}"
            )
        if child.name in seen:
            raise ValueError(f"{name!r} has two children named {child.name!r}")
        seen.add(child.name)
    return list(children)


def slash_command(
    name: str,
    description: str,
    handler: Handler,
    *,
    options: Optional[Sequence[Dict[str, Any]]] = None,
    autocomplete: Optional[AutocompleteHandler] = None,
    guild_ids: Optional[Sequence[int]] = None,
    name_localizations: Optional[Dict[str, str]] = None,
    description_localizations: Optional[Dict[str, str]] = None,
    default_member_permissions: Optional[int] = None,
    nsfw: bool = False,
    contexts: Optional[Sequence[int]] = None,
    integration_types: Optional[Sequence[int]] = None,
) -> InteractionNode:
    """
    Build a top-level chat-input command.

    Example:
        >>> async def ping(hook):
        ...     await hook.interaction.response.send_message("Pong!")
        >>> node = slash_command("ping", "Check latency", ping)
    """
    _check_chat_input_name(name)
    _check_description(name, description)
    _check_handler(name, handler)
    if autocomplete is not None:
        _check_handler(name, autocomplete)

    return InteractionNode(
        kind=NodeKind.COMMAND,
        name=name,
        description=description,
        handler=handler,
        autocomplete_handler=autocomplete,
        options=_check_options(name, options),
        command_type=discord.AppCommandType.chat_input,
        guild_ids=list(guild_ids) if guild_ids is not None else None,
        name_localizations=name_localizations,
        description_localizations=description_localizations,
        default_member_permissions=default_member_permissions,
        nsfw=nsfw,
        contexts=list(contexts) if contexts is not None else None,
        integration_types=list(integration_types) if integration_types is not None else None,
    )


def parent_command(
    name: str,
    description: str,
    children: Sequence[InteractionNode],
    *,
    guild_ids: Optional[Sequence[int]] = None,
    name_localizations: Optional[Dict[str, str]] = None,
    description_localizations: Optional[Dict[str, str]] = None,
    default_member_permissions: Optional[int] = None,
    nsfw: bool = False,
    contexts: Optional[Sequence[int]] = None,
    integration_types: Optional[Sequence[int]] = None,
) -> InteractionNode:
    """Build a top-level chat-input command that routes to subcommands / groups."""
    _check_chat_input_name(name)
    _check_description(name, description)

    return InteractionNode(
        kind=NodeKind.PARENT_COMMAND,
        name=name,
        description=description,
        children=_check_children(
            name, children, (NodeKind.SUBCOMMAND, NodeKind.SUBCOMMAND_GROUP)
        ),
        command_type=discord.AppCommandType.chat_input,
        guild_ids=list(guild_ids) if guild_ids is not None else None,
        name_localizations=name_localizations,
        description_localizations=description_localizations,
        default_member_permissions=default_member_permissions,
        nsfw=nsfw,
        contexts=list(contexts) if contexts is not None else None,
        integration_types=list(integration_types) if integration_types is not None else None,
    )


def subcommand(
    name: str,
    description: str,
    handler: Handler,
    *,
    options: Optional[Sequence[Dict[str, Any]]] = None,
    autocomplete: Optional[AutocompleteHandler] = None,
    name_localizations: Optional[Dict[str, str]] = None,
    description_localizations: Optional[Dict[str, str]] = None,
) -> InteractionNode:
    _check_chat_input_name(name)
    _check_description(name, description)
    _check_handler(name, handler)
    if autocomplete is not None:
        _check_handler(name, autocomplete)

    return InteractionNode(
        kind=NodeKind.SUBCOMMAND,
        name=name,
        description=description,
        handler=handler,
        autocomplete_handler=autocomplete,
        options=_check_options(name, options),
        name_localizations=name_localizations,
        description_localizations=description_localizations,
    )


def subcommand_group(
    name: str,
    description: str,
    children: Sequence[InteractionNode],
    *,
    name_localizations: Optional[Dict[str, str]] = None,
    description_localizations: Optional[Dict[str, str]] = None,
) -> InteractionNode:
    _check_chat_input_name(name)
    _check_description(name, description)

    return InteractionNode(
        kind=NodeKind.SUBCOMMAND_GROUP,
        name=name,
        description=description,
        children=_check_children(name, children, (NodeKind.SUBCOMMAND,)),
        name_localizations=name_localizations,
        description_localizations=description_localizations,
    )


def _context_menu(
    command_type: discord.AppCommandType,
    name: str,
    handler: Handler,
    guild_ids: Optional[Sequence[int]],
    name_localizations: Optional[Dict[str, str]],
    default_member_permissions: Optional[int],
    nsfw: bool,
    contexts: Optional[Sequence[int]],
    integration_types: Optional[Sequence[int]],
) -> InteractionNode:
    _check_name(name)
    _check_handler(name, handler)

    return InteractionNode(
        kind=NodeKind.COMMAND,
        name=name,
        handler=handler,
        command_type=command_type,
        guild_ids=list(guild_ids) if guild_ids is not None else None,
        name_localizations=name_localizations,
        default_member_permissions=default_member_permissions,
        nsfw=nsfw,
        contexts=list(contexts) if contexts is not None else None,
        integration_types=list(integration_types) if integration_types is not None else None,
    )


def user_command(
    name: str,
    handler: Handler,
    *,
    guild_ids: Optional[Sequence[int]] = None,
    name_localizations: Optional[Dict[str, str]] = None,
    default_member_permissions: Optional[int] = None,
    nsfw: bool = False,
    contexts: Optional[Sequence[int]] = None,
    integration_types: Optional[Sequence[int]] = None,
) -> InteractionNode:
    """Build a user context-menu command (right click on a member)."""
    return _context_menu(
        discord.AppCommandType.user,
        name,
        handler,
        guild_ids,
        name_localizations,
        default_member_permissions,
        nsfw,
        contexts,
        integration_types,
    )


def message_command(
    name: str,
    handler: Handler,
    *,
    guild_ids: Optional[Sequence[int]] = None,
    name_localizations: Optional[Dict[str, str]] = None,
    default_member_permissions: Optional[int] = None,
    nsfw: bool = False,
    contexts: Optional[Sequence[int]] = None,
    integration_types: Optional[Sequence[int]] = None,
) -> InteractionNode:
    """Build a message context-menu command."""
    return _context_menu(
        discord.AppCommandType.message,
        name,
        handler,
        guild_ids,
        name_localizations,
        default_member_permissions,
        nsfw,
        contexts,
        integration_types,
    )


__all__ = [
    "AutocompleteHandler",
    "Handler",
    "InteractionNode",
    "NodeKind",
    "message_command",
    "parent_command",
    "slash_command",
    "subcommand",
    "subcommand_group",
    "user_command",
]
