"""
Embed factory for framework-generated Discord embeds.

Keeps the few embeds Switchboard itself produces (error replies, the built-in
``/ping`` response) consistently colored and within Discord's limits.

Usage:
    >>> from switchboard.ui.embeds import EmbedFactory
    >>> embed = EmbedFactory.error(description="You must be in a guild to use this.")
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import discord


class EmbedColor:
    """Discord-compatible integers (0xRRGGBB)."""

    DEFAULT = 0x5865F2
    SUCCESS = 0x57F287
    ERROR = 0xE61B05
    INFO = 0x5865F2


class EmbedLimits:
    TITLE = 256
    DESCRIPTION = 4096
    FOOTER = 2048

    @staticmethod
    def truncate(text: str, limit: int) -> str:
        if len(text) <= limit:
            return text
        return text[: limit - 3] + "..."


class EmbedFactory:
    """Standardized embeds for framework messages."""

    @staticmethod
    def _base_embed(
        title: Optional[str],
        description: Optional[str],
        color: int,
        footer: Optional[str] = None,
        timestamp: bool = False,
    ) -> discord.Embed:
        embed = discord.Embed(
            title=EmbedLimits.truncate(title, EmbedLimits.TITLE) if title else None,
            description=(
                EmbedLimits.truncate(description, EmbedLimits.DESCRIPTION) if description else None
            ),
            color=color,
            timestamp=datetime.now(timezone.utc) if timestamp else None,
        )

        if footer:
            embed.set_footer(text=EmbedLimits.truncate(footer, EmbedLimits.FOOTER))

        return embed

    @staticmethod
    def error(description: str, title: Optional[str] = None) -> discord.Embed:
        """Error replies. Description only by default, shown verbatim."""
        return EmbedFactory._base_embed(title, description, EmbedColor.ERROR)

    @staticmethod
    def success(title: str, description: str, footer: Optional[str] = None) -> discord.Embed:
        return EmbedFactory._base_embed(title, description, EmbedColor.SUCCESS, footer, timestamp=True)

    @staticmethod
    def info(title: str, description: str, footer: Optional[str] = None) -> discord.Embed:
        return EmbedFactory._base_embed(title, description, EmbedColor.INFO, footer, timestamp=True)


EmbedLike = Union[discord.Embed, Mapping[str, Any]]


def to_embed(value: EmbedLike) -> discord.Embed:
    """
    Normalize an embed-like value into a fresh ``discord.Embed``.

    Embeds are copied so callers can keep mutating their templates; mappings
    are parsed with ``discord.Embed.from_dict``.
    """
    if isinstance(value, discord.Embed):
        return value.copy()
    if isinstance(value, Mapping):
        return discord.Embed.from_dict(dict(value))
    raise TypeError(f"Expected discord.Embed or mapping, got {type(value).__name__}")


__all__ = ["EmbedColor", "EmbedFactory", "EmbedLike", "EmbedLimits", "to_embed"]
