from switchboard.core.config import Config, Environment
from switchboard.core.exceptions import (
    BotNotReadyError,
    BotStateError,
    CommandRegistrationError,
    ConfigurationError,
    LifecycleSignalError,
    ModuleInitializationError,
    ResolutionError,
    SwitchboardError,
    UserError,
)

__all__ = [
    "BotNotReadyError",
    "BotStateError",
    "CommandRegistrationError",
    "Config",
    "ConfigurationError",
    "Environment",
    "LifecycleSignalError",
    "ModuleInitializationError",
    "ResolutionError",
    "SwitchboardError",
    "UserError",
]
