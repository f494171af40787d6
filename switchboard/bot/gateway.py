"""
Gateway client: a thin ``discord.Client`` subclass owned by the Bot.

It forwards the three gateway events the framework cares about
(``ready``, ``interaction``, ``error``) to the Bot and exposes one RPC,
``set_commands``, which bulk-overwrites the application's command set for
the global scope or a single guild.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import discord

from switchboard.core.logging.logger import get_logger

if TYPE_CHECKING:
    from switchboard.bot.bot import Bot

logger = get_logger(__name__)


class GatewayClient(discord.Client):
    def __init__(self, bot: "Bot", *, intents: Optional[discord.Intents] = None, **options: Any) -> None:
        if intents is None:
            intents = discord.Intents.default()
            intents.members = True
            intents.message_content = True
        options.setdefault(
            "allowed_mentions", discord.AllowedMentions(replied_user=False)
        )
        super().__init__(intents=intents, **options)
        self._switchboard_bot = bot

    async def on_ready(self) -> None:
        await self._switchboard_bot.on_gateway_ready()

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self._switchboard_bot.handle_interaction(interaction)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        logger.error(
            f"Unhandled error in gateway event '{event_method}'",
            exc_info=True,
            extra={"event": event_method},
        )

    async def set_commands(
        self,
        payload: Sequence[Dict[str, Any]],
        guild_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Replace the registered command set for one scope.

        Returns the command objects Discord stored, which may differ from
        ``payload`` (IDs, versions, normalized fields).
        """
        application_id = self.application_id
        if application_id is None:
            raise RuntimeError("Application ID is unknown; log in before registering commands")

        if guild_id is None:
            result = await self.http.bulk_upsert_global_commands(application_id, list(payload))
        else:
            result = await self.http.bulk_upsert_guild_commands(application_id, guild_id, list(payload))
        return list(result)


__all__ = ["GatewayClient"]
