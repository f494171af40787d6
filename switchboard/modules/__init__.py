from switchboard.modules.commands import CommandModule

__all__ = ["CommandModule"]
