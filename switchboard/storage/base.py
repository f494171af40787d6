"""
Storage connection contract for the Bot.

The Bot owns at most one ``StorageManager``. It calls ``attempt_connect()``
inside ``Bot.start()`` before logging in, and ``attempt_disconnect()`` at the
end of ``Bot.stop()``. Subclasses implement ``connect``/``disconnect`` and may
override ``initialize`` (schema creation, warm-up queries, ...), which runs
right after a successful connect.
"""

from __future__ import annotations

import abc
import logging
from typing import Optional

from switchboard.core.logging.logger import get_logger
from switchboard.core.timing import measure_time


class StorageManager(abc.ABC):
    """Base class for storage backends with timed connect/disconnect."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger("switchboard.storage")
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def attempt_connect(self) -> None:
        """
        Connect, log the duration, then run the ``initialize`` hook.

        A failing ``initialize`` disconnects again before the error propagates.
        """
        self.logger.info("Connecting to storage...")
        _, took_ms = await measure_time(self.connect)
        self._connected = True
        self.logger.info(
            f"Connected to storage [took {took_ms:.2f}ms]",
            extra={"backend": self.__class__.__name__, "duration_ms": round(took_ms, 2)},
        )

        try:
            await self.initialize()
        except Exception:
            self.logger.error(
                "Storage initialization failed; disconnecting",
                exc_info=True,
                extra={"backend": self.__class__.__name__},
            )
            try:
                await self.attempt_disconnect()
            except Exception:
                self.logger.error("Failed to disconnect storage after failed initialization", exc_info=True)
            raise

    async def attempt_disconnect(self) -> None:
        await self.disconnect()
        self._connected = False
        self.logger.info("Disconnected from storage", extra={"backend": self.__class__.__name__})

    @abc.abstractmethod
    async def connect(self) -> None:
        ...

    async def initialize(self) -> None:
        """Post-connect hook; no-op by default."""

    @abc.abstractmethod
    async def disconnect(self) -> None:
        ...


__all__ = ["StorageManager"]
