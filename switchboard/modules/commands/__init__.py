from switchboard.modules.commands.builtin import ping_command
from switchboard.modules.commands.dispatcher import CommandDispatcher
from switchboard.modules.commands.module import CommandModule
from switchboard.modules.commands.registry import CommandRegistry

__all__ = ["CommandDispatcher", "CommandModule", "CommandRegistry", "ping_command"]
