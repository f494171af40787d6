"""
Lifecycle state modeling for the Bot and its modules.

``BotState`` and ``ModuleState`` are driven exclusively by ``Bot``; modules
never advance their own state. ``StartupMetrics`` collects the timings logged
during startup so the final summary is a single structured record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class BotState(Enum):
    NOT_STARTED = "not_started"
    STARTING = "starting"
    READY = "ready"
    STOPPING = "stopping"
    STOPPED = "stopped"


class ModuleState(Enum):
    CONSTRUCTED = "constructed"
    INITIALIZED = "initialized"
    READY_HOOK_RUNNING = "ready_hook_running"
    READY_HOOK_COMPLETE = "ready_hook_complete"
    DESTROYED = "destroyed"


@dataclass
class StartupMetrics:
    """Timings collected during ``Bot.start()`` and the ready sequence."""

    storage_time_ms: Optional[float] = None
    login_time_ms: Optional[float] = None
    module_times_ms: Dict[str, float] = field(default_factory=dict)
    ready_sequence_ms: Optional[float] = None

    @property
    def modules_time_ms(self) -> float:
        return sum(self.module_times_ms.values())

    def summary(self) -> Dict[str, Any]:
        return {
            "storage_time_ms": _round(self.storage_time_ms),
            "login_time_ms": _round(self.login_time_ms),
            "modules_time_ms": round(self.modules_time_ms, 2),
            "ready_sequence_ms": _round(self.ready_sequence_ms),
            "modules": {name: round(ms, 2) for name, ms in self.module_times_ms.items()},
        }


def _round(value: Optional[float]) -> Optional[float]:
    return round(value, 2) if value is not None else None


__all__ = ["BotState", "ModuleState", "StartupMetrics"]
