"""Commands shipped with Switchboard."""

from __future__ import annotations

import math

from switchboard.interaction.hook import InteractionHook
from switchboard.interaction.nodes import InteractionNode, slash_command
from switchboard.ui.embeds import EmbedFactory


async def _ping(hook: InteractionHook) -> None:
    latency = hook.bot.client.latency
    # NaN until the first heartbeat is acknowledged
    if math.isnan(latency) or math.isinf(latency):
        description = "Gateway latency: unknown"
    else:
        description = f"Gateway latency: **{latency * 1000:.0f}ms**"

    await hook.interaction.response.send_message(
        embed=EmbedFactory.info("Pong!", description), ephemeral=True
    )


def ping_command() -> InteractionNode:
    return slash_command("ping", "Check that the bot is responsive", _ping)


__all__ = ["ping_command"]
