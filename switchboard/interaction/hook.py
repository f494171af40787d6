"""
Per-event interaction context.

An ``InteractionHook`` wraps one ``discord.Interaction`` together with the
owning Bot. It is created for every inbound event by the Bot's hook factory
and handed to listeners and command handlers; it holds nothing beyond that
wrapping, so subclasses returned by a custom ``hook_factory`` can add
project-specific accessors (a database session, a player lookup, ...).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import discord

from switchboard.interaction.invocation import parse_options
from switchboard.ui.embeds import to_embed

if TYPE_CHECKING:
    from switchboard.bot.bot import Bot

_REPLIABLE_TYPES = frozenset(
    {
        discord.InteractionType.application_command,
        discord.InteractionType.component,
        discord.InteractionType.modal_submit,
    }
)


class InteractionHook:
    """Read-only context handed to interaction handlers."""

    def __init__(self, bot: "Bot", interaction: discord.Interaction) -> None:
        self._bot = bot
        self._interaction = interaction

    @property
    def bot(self) -> "Bot":
        return self._bot

    @property
    def interaction(self) -> discord.Interaction:
        return self._interaction

    @property
    def user(self) -> Union[discord.User, discord.Member]:
        return self._interaction.user

    @property
    def member(self) -> Optional[discord.Member]:
        user = self._interaction.user
        return user if isinstance(user, discord.Member) else None

    @property
    def guild(self) -> Optional[discord.Guild]:
        return self._interaction.guild

    @property
    def guild_id(self) -> Optional[int]:
        return self._interaction.guild_id

    @property
    def channel(self) -> Any:
        return self._interaction.channel

    @property
    def channel_id(self) -> Optional[int]:
        return self._interaction.channel_id

    @property
    def options(self) -> Dict[str, Any]:
        """Innermost option values by name (empty for non-command events)."""
        _, _, leaf_options = parse_options(self._interaction.data)
        return {option["name"]: option.get("value") for option in leaf_options if "name" in option}

    @property
    def is_repliable(self) -> bool:
        return self._interaction.type in _REPLIABLE_TYPES

    @property
    def is_responded(self) -> bool:
        """True once the interaction has been replied to or deferred."""
        return self._interaction.response.is_done()

    def embed(self) -> discord.Embed:
        """Fresh embed seeded by ``BotStyle.create_default_embed``, or an empty one."""
        factory = self._bot.style.create_default_embed
        if factory is None:
            return discord.Embed()
        seeded = factory(self)
        return to_embed(seeded) if seeded is not None else discord.Embed()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"interaction_id={self._interaction.id!r}, "
            f"type={self._interaction.type!r}"
            ")"
        )


__all__ = ["InteractionHook"]
