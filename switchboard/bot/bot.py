"""
Switchboard Bot - lifecycle orchestrator.

Purpose
-------
Bring a gateway connection to a ready state, initialize a set of pluggable
modules in a deterministic order, and route inbound interactions through an
ordered listener chain with centralized error-to-reply translation.

Responsibilities
----------------
- Own the ``GatewayClient``, the optional ``StorageManager`` and the
  name-keyed module mapping
- Drive ``BotState`` (NOT_STARTED -> STARTING -> READY -> STOPPING -> STOPPED)
  and every module's ``ModuleState``
- Publish the lifecycle signals (pre_initialize, post_initialize, ready)
- Wrap each inbound interaction in an ``InteractionHook`` and a ``LogContext``
- Hand listener failures to the ``ReplyPolicy``

Non-Responsibilities
--------------------
- Command resolution (handled by the CommandModule's Dispatcher)
- Reply formatting (handled by ReplyPolicy / BotStyle)
- Storage details (handled by the StorageManager implementation)

Ready Sequence
--------------
1. gateway ``ready`` (the first one only; reconnects are ignored)
2. ``pre_initialize`` broadcast, which may call ``set_modules``
3. each module's ``initialize()`` awaited in mapping order
4. ``post_initialize`` then ``ready`` broadcasts
5. state -> READY
6. every module's ``on_ready()`` scheduled concurrently, failures isolated

A failure in steps 2-4 is logged and followed by a best-effort ``stop()``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Set,
    Union,
)

import discord

from switchboard.bot.gateway import GatewayClient
from switchboard.bot.lifecycle import BotState, ModuleState, StartupMetrics
from switchboard.bot.module import Module
from switchboard.core.config import Config, Environment
from switchboard.core.exceptions import BotStateError, ModuleInitializationError
from switchboard.core.logging.logger import LogContext, get_logger
from switchboard.core.signals import LifecycleSignal
from switchboard.core.timing import elapsed_ms, measure_time
from switchboard.interaction.hook import InteractionHook
from switchboard.interaction.reply_policy import BotStyle, ReplyPolicy
from switchboard.storage.base import StorageManager

HookFactory = Callable[["Bot", discord.Interaction], Union[InteractionHook, Awaitable[InteractionHook]]]
InteractionListener = Callable[[InteractionHook], Union[Optional[bool], Awaitable[Optional[bool]]]]
ClientFactory = Callable[["Bot"], GatewayClient]

_COMMAND_INTERACTION_TYPES = frozenset(
    {discord.InteractionType.application_command, discord.InteractionType.autocomplete}
)


# ============================================================================
# Lifecycle events
# ============================================================================


@dataclass(frozen=True)
class PreInitializeEvent:
    """Published before any module initializes; the last chance to supply modules."""

    bot: "Bot"
    set_modules: Callable[[Mapping[str, Module]], None]


@dataclass(frozen=True)
class InitializeEvent:
    """Published after every module initialized successfully."""

    bot: "Bot"


@dataclass(frozen=True)
class ReadyEvent:
    """Published right before the Bot reports READY."""

    bot: "Bot"


# ============================================================================
# Bot
# ============================================================================


class Bot:
    """
    Lifecycle owner for a Discord bot.

    Usage:
        >>> bot = Bot(token=Config.DISCORD_TOKEN, storage=SQLAlchemyStorage(url))
        >>> bot.pre_initialize.connect(
        ...     lambda event: event.set_modules({"commands": CommandModule(event.bot)})
        ... )
        >>> await bot.start()
        >>> await bot.wait_until_closed()
    """

    def __init__(
        self,
        token: str,
        *,
        modules: Optional[Mapping[str, Module]] = None,
        storage: Optional[StorageManager] = None,
        style: Optional[BotStyle] = None,
        hook_factory: Optional[HookFactory] = None,
        client_factory: Optional[ClientFactory] = None,
        intents: Optional[discord.Intents] = None,
        environment: Optional[Environment] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._token = token
        self.environment = environment or Config.ENVIRONMENT
        self.logger = logger or get_logger(__name__)
        self.storage = storage
        self.reply_policy = ReplyPolicy(style)
        self.hook_factory: HookFactory = hook_factory or InteractionHook

        self._client: GatewayClient = (
            client_factory(self) if client_factory is not None else GatewayClient(self, intents=intents)
        )

        self.state = BotState.NOT_STARTED
        self.startup_metrics = StartupMetrics()

        self.pre_initialize: LifecycleSignal[PreInitializeEvent] = LifecycleSignal("pre_initialize")
        self.post_initialize: LifecycleSignal[InitializeEvent] = LifecycleSignal("post_initialize")
        self.ready: LifecycleSignal[ReadyEvent] = LifecycleSignal("ready")

        self._modules: Optional[Dict[str, Module]] = dict(modules) if modules is not None else None
        self._initialized: List[str] = []
        self._listeners: List[InteractionListener] = []
        self._ready_tasks: Set["asyncio.Task[None]"] = set()
        self._connection_task: Optional["asyncio.Task[None]"] = None
        self._ready_sequence_started = False
        self._stopping = False

    # --------------------------------------------------------------- #
    # Accessors
    # --------------------------------------------------------------- #

    @property
    def client(self) -> GatewayClient:
        return self._client

    @property
    def style(self) -> BotStyle:
        return self.reply_policy.style

    @property
    def modules(self) -> Dict[str, Module]:
        if self._modules is None:
            raise BotStateError("Modules are not set yet", self.state.value)
        return self._modules

    @property
    def is_stopping(self) -> bool:
        return self._stopping

    def is_ready(self) -> bool:
        return self._client.is_ready()

    def set_modules(self, modules: Mapping[str, Module]) -> None:
        """Replace the module mapping; insertion order is initialization order."""
        if self._initialized:
            raise BotStateError("Modules cannot be replaced after initialization", self.state.value)
        self._modules = dict(modules)

    # --------------------------------------------------------------- #
    # Start / Stop
    # --------------------------------------------------------------- #

    async def start(self) -> None:
        """
        Connect storage, log in, and open the gateway connection in the background.

        Returns once login succeeded; the ready sequence runs when the gateway
        reports ready.

        Raises:
            BotStateError: if already logged in, stopping, or already starting
        """
        if self._client.is_ready():
            raise BotStateError("Client is already logged in", self.state.value)
        if self._stopping:
            raise BotStateError("Invalid state: bot is stopping", self.state.value)
        if self.state is not BotState.NOT_STARTED:
            raise BotStateError("Bot is already starting", self.state.value)

        self.state = BotState.STARTING
        self.logger.info("=" * 60)
        self.logger.info("SWITCHBOARD STARTUP")
        self.logger.info("=" * 60)

        try:
            if self.storage is not None:
                _, self.startup_metrics.storage_time_ms = await measure_time(
                    self.storage.attempt_connect
                )

            self.logger.info("Logging in...")
            _, self.startup_metrics.login_time_ms = await measure_time(
                lambda: self._client.login(self._token)
            )
            self.logger.info(
                f"Logged in as {self._client.user} [took {self.startup_metrics.login_time_ms:.2f}ms]",
                extra={"environment": self.environment.value},
            )
        except Exception:
            self.state = BotState.NOT_STARTED
            if self.storage is not None and self.storage.is_connected:
                try:
                    await self.storage.attempt_disconnect()
                except Exception:
                    self.logger.error("Failed to disconnect storage after failed start", exc_info=True)
            raise

        self._connection_task = asyncio.create_task(
            self._client.connect(reconnect=True), name="switchboard-gateway"
        )
        self._connection_task.add_done_callback(self._on_connection_done)

    def _on_connection_done(self, task: "asyncio.Task[None]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.error(
                "Gateway connection terminated with an error",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def wait_until_closed(self) -> None:
        """Block until the gateway connection ends (``stop()`` or a fatal error)."""
        if self._connection_task is None:
            return
        try:
            await asyncio.shield(self._connection_task)
        except asyncio.CancelledError:
            if not self._connection_task.done():
                raise
        except Exception:
            # Already logged by the done callback.
            pass

    async def stop(self) -> None:
        """
        Destroy modules, close the gateway and disconnect storage.

        Raises:
            BotStateError: if already stopping, or the client never logged in
        """
        if self._stopping:
            raise BotStateError("Bot is already stopping", self.state.value)
        if not self._client.is_ready():
            raise BotStateError("Client is not logged in", self.state.value)

        self._stopping = True
        self.state = BotState.STOPPING
        self.logger.info("Stopping bot...")

        try:
            await self._destroy_modules()

            await self._client.close()
            self.logger.info("Logged out")
            await self.wait_until_closed()

            if self.storage is not None:
                await self.storage.attempt_disconnect()
        finally:
            self.state = BotState.STOPPED

        self.logger.info("Successfully stopped")

    async def _destroy_modules(self) -> None:
        if self._modules is None:
            return

        for name in reversed(self._initialized):
            module = self._modules.get(name)
            if module is None or module.state is ModuleState.DESTROYED:
                continue
            await self._destroy_module(name, module)

    async def _destroy_module(self, name: str, module: Module) -> None:
        try:
            await module.destroy()
            module.state = ModuleState.DESTROYED
            self.logger.debug(f'Module "{name}" destroyed', extra={"module_name": name})
        except Exception:
            self.logger.error(
                f'Error while destroying module "{name}"',
                exc_info=True,
                extra={"module_name": name},
            )

    # --------------------------------------------------------------- #
    # Ready sequence
    # --------------------------------------------------------------- #

    async def on_gateway_ready(self) -> None:
        """Entry point for the gateway ``ready`` event."""
        if self._ready_sequence_started:
            self.logger.debug("Ignoring repeated gateway ready event")
            return
        self._ready_sequence_started = True

        try:
            await self._run_ready_sequence()
        except Exception:
            self.logger.error("Error while processing ready event", exc_info=True)
            try:
                await self.stop()
            except Exception:
                self.logger.error("Error while stopping bot", exc_info=True)

    async def _run_ready_sequence(self) -> None:
        if not self._client.is_ready():
            raise BotStateError("Invalid ready state for on_ready", self.state.value)

        sequence_start = time.perf_counter()
        self.logger.info("Initializing...")

        await self.pre_initialize.publish(PreInitializeEvent(bot=self, set_modules=self.set_modules))
        modules = self.modules

        for name, module in modules.items():
            try:
                _, took_ms = await measure_time(module.initialize)
            except Exception as exc:
                raise ModuleInitializationError(name) from exc

            module.state = ModuleState.INITIALIZED
            self._initialized.append(name)
            self.startup_metrics.module_times_ms[name] = took_ms
            self.logger.info(
                f'Module "{name}" initialized [took {took_ms:.2f}ms]',
                extra={"module_name": name, "duration_ms": round(took_ms, 2)},
            )

            if self._stopping:
                # stop() already tore down the modules it knew about; this one finished too late.
                await self._destroy_module(name, module)
                self.logger.info(
                    "Stop requested during initialization; remaining modules skipped",
                    extra={"module_name": name},
                )
                return

        await self.post_initialize.publish(InitializeEvent(bot=self))
        await self.ready.publish(ReadyEvent(bot=self))

        if self._stopping:
            return

        self.state = BotState.READY
        self.startup_metrics.ready_sequence_ms = elapsed_ms(sequence_start)

        self.logger.info("=" * 60)
        self.logger.info("Bot is ready")
        self.logger.info("=" * 60)
        self.logger.info("Startup summary", extra=self.startup_metrics.summary())

        for name, module in modules.items():
            self._schedule_ready_hook(name, module)

    def _schedule_ready_hook(self, name: str, module: Module) -> None:
        module.state = ModuleState.READY_HOOK_RUNNING

        async def run() -> None:
            try:
                await module.on_ready()
            except Exception:
                self.logger.error(
                    f'Error while executing on_ready for module "{name}"',
                    exc_info=True,
                    extra={"module_name": name},
                )
            finally:
                if module.state is ModuleState.READY_HOOK_RUNNING:
                    module.state = ModuleState.READY_HOOK_COMPLETE

        task = asyncio.create_task(run(), name=f"switchboard-ready-{name}")
        self._ready_tasks.add(task)
        task.add_done_callback(self._ready_tasks.discard)

    async def wait_for_ready_hooks(self) -> None:
        """Await every ``on_ready`` hook still running."""
        if self._ready_tasks:
            await asyncio.gather(*list(self._ready_tasks))

    # --------------------------------------------------------------- #
    # Interactions
    # --------------------------------------------------------------- #

    def register_interaction_listener(self, listener: InteractionListener) -> None:
        """Append a listener; listeners run in order until one returns True."""
        self._listeners.append(listener)

    def unregister_interaction_listener(self, listener: InteractionListener) -> bool:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    async def create_hook(self, interaction: discord.Interaction) -> InteractionHook:
        hook = self.hook_factory(self, interaction)
        if inspect.isawaitable(hook):
            hook = await hook
        return hook

    async def handle_interaction(self, interaction: discord.Interaction) -> None:
        """Run one inbound interaction through the listener chain."""
        async with LogContext(
            user_id=getattr(interaction.user, "id", None),
            guild_id=interaction.guild_id,
            command=_command_name(interaction),
            interaction_id=interaction.id,
        ):
            try:
                hook = await self.create_hook(interaction)
            except Exception:
                self.logger.error("Error while handling interaction", exc_info=True)
                return

            for listener in list(self._listeners):
                try:
                    result = listener(hook)
                    if inspect.isawaitable(result):
                        result = await result
                except Exception as exc:
                    await self.reply_policy.handle(hook, exc)
                    return
                if result is True:
                    return

    def __repr__(self) -> str:
        return f"Bot(state={self.state.name}, modules={list(self._modules or {})})"


def _command_name(interaction: discord.Interaction) -> Optional[str]:
    if interaction.type not in _COMMAND_INTERACTION_TYPES:
        return None
    data: Any = interaction.data or {}
    return data.get("name")


__all__ = [
    "Bot",
    "ClientFactory",
    "HookFactory",
    "InitializeEvent",
    "InteractionListener",
    "PreInitializeEvent",
    "ReadyEvent",
]
