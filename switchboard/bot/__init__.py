from switchboard.bot.bot import (
    Bot,
    InitializeEvent,
    InteractionListener,
    PreInitializeEvent,
    ReadyEvent,
)
from switchboard.bot.gateway import GatewayClient
from switchboard.bot.lifecycle import BotState, ModuleState, StartupMetrics
from switchboard.bot.module import Module

__all__ = [
    "Bot",
    "BotState",
    "GatewayClient",
    "InitializeEvent",
    "InteractionListener",
    "Module",
    "ModuleState",
    "PreInitializeEvent",
    "ReadyEvent",
    "StartupMetrics",
]
