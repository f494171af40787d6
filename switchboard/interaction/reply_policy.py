"""
Error-to-reply translation for interaction handlers.

Purpose
-------
Turn any exception that escaped a command handler or interaction listener
into a single, bounded user-visible reply.

Responsibilities
----------------
- ``UserError``: show the author's message verbatim (or the style's custom
  embed); never logged as an error
- Unexpected errors: show a generic message, never the original text, and
  log the full cause chain
- Pick the transport from the interaction state: ephemeral reply, edit of the
  existing reply, or follow-up
- Swallow and log failures of the reply itself

Non-Responsibilities
--------------------
- Catching errors (the Dispatcher and the Bot listener chain do that)
- Retrying replies
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

import discord

from switchboard.core.exceptions import UserError
from switchboard.core.logging.logger import get_logger
from switchboard.ui.embeds import EmbedFactory, EmbedLike, to_embed

if TYPE_CHECKING:
    from switchboard.interaction.hook import InteractionHook

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class BotStyle:
    """
    Appearance hooks supplied by the bot author.

    Attributes:
        create_default_embed: Seeds ``InteractionHook.embed()``
        unknown_error_embed: Reply shown for unexpected errors
        create_user_error_embed: Builds the reply shown for a ``UserError``
    """

    create_default_embed: Optional[Callable[["InteractionHook"], Optional[EmbedLike]]] = None
    unknown_error_embed: Optional[EmbedLike] = None
    create_user_error_embed: Optional[Callable[[UserError], Optional[EmbedLike]]] = None


class ReplyPolicy:
    """Decides what a user sees when handling their interaction failed."""

    def __init__(self, style: Optional[BotStyle] = None) -> None:
        self.style = style or BotStyle()

    def build_embed(self, error: BaseException) -> discord.Embed:
        if isinstance(error, UserError):
            custom = (
                self.style.create_user_error_embed(error)
                if self.style.create_user_error_embed is not None
                else None
            )
            return to_embed(custom) if custom is not None else EmbedFactory.error(error.message)

        if self.style.unknown_error_embed is not None:
            return to_embed(self.style.unknown_error_embed)
        return EmbedFactory.error(UNKNOWN_ERROR_MESSAGE)

    async def handle(self, hook: "InteractionHook", error: BaseException) -> None:
        """Reply to the user about ``error``; never raises."""
        is_user_error = isinstance(error, UserError)
        interaction = hook.interaction

        if not is_user_error:
            logger.error(
                f"Unhandled error while handling interaction: {error}",
                exc_info=(type(error), error, error.__traceback__),
                extra={
                    "error_type": type(error).__name__,
                    "interaction_type": getattr(interaction.type, "name", str(interaction.type)),
                },
            )

        if not hook.is_repliable:
            return

        try:
            embed = self.build_embed(error)

            if not hook.is_responded:
                await interaction.response.send_message(embed=embed, ephemeral=True)
            elif is_user_error:
                await interaction.edit_original_response(
                    content=None, embed=embed, attachments=[], view=None
                )
            else:
                await interaction.followup.send(embed=embed)
        except Exception as reply_error:
            logger.error(
                f"Failed to send error response: {reply_error}",
                exc_info=True,
                extra={"original_error": type(error).__name__},
            )


__all__ = ["BotStyle", "ReplyPolicy", "UNKNOWN_ERROR_MESSAGE"]
