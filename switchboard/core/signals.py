"""
Typed lifecycle broadcasts.

A ``LifecycleSignal`` is an ordered list of async (or sync) listeners for one
kind of payload. Unlike a fire-and-forget pub/sub bus, ``publish`` awaits every
listener in registration order and stops at the first failure, raising
``LifecycleSignalError`` chained to the cause. Startup relies on that: a
failing ``pre_initialize`` listener must abort the ready sequence.

Usage:
    bot.pre_initialize.connect(load_modules)
    await bot.pre_initialize.publish(PreInitializeEvent(bot, bot.set_modules))
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, TypeVar, Union

from switchboard.core.exceptions import LifecycleSignalError
from switchboard.core.logging.logger import get_logger

logger = get_logger(__name__)

E = TypeVar("E")

Listener = Callable[[E], Union[Awaitable[Any], Any]]


@dataclass
class _Subscription(Generic[E]):
    callback: Listener
    identifier: str


class LifecycleSignal(Generic[E]):
    """Ordered, awaited broadcast for a single lifecycle phase."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: List[_Subscription[E]] = []

    def connect(self, callback: Listener) -> Listener:
        """
        Register ``callback``; returns it unchanged so it can be used as a decorator.

        Registering the same callable twice is a no-op.
        """
        if any(sub.callback is callback for sub in self._subscriptions):
            return callback

        identifier = f"{getattr(callback, '__module__', '?')}.{getattr(callback, '__qualname__', repr(callback))}"
        self._subscriptions.append(_Subscription(callback=callback, identifier=identifier))
        logger.debug(f"Connected {identifier} to {self.name} signal")
        return callback

    def disconnect(self, callback: Listener) -> bool:
        before = len(self._subscriptions)
        self._subscriptions = [sub for sub in self._subscriptions if sub.callback is not callback]
        return len(self._subscriptions) != before

    def __len__(self) -> int:
        return len(self._subscriptions)

    async def publish(self, event: E) -> None:
        """
        Deliver ``event`` to every listener in order, awaiting each one.

        Raises:
            LifecycleSignalError: if a listener raises; later listeners do not run.
        """
        for sub in list(self._subscriptions):
            try:
                result = sub.callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                raise LifecycleSignalError(self.name, sub.identifier) from exc

        logger.debug(
            f"Published {self.name} signal",
            extra={"signal": self.name, "listeners": len(self._subscriptions)},
        )


__all__ = ["LifecycleSignal"]
