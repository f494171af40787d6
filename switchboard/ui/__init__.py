from switchboard.ui.embeds import EmbedColor, EmbedFactory, EmbedLike, to_embed

__all__ = ["EmbedColor", "EmbedFactory", "EmbedLike", "to_embed"]
