"""
Pytest Configuration and Fixtures for the Switchboard Test Suite
================================================================

Purpose
-------
Centralized fixtures for unit-testing the lifecycle and dispatch layers
without a Discord connection.

Responsibilities
----------------
- ``FakeGatewayClient``: in-memory stand-in for ``GatewayClient``
  (login / connect / close / set_commands)
- Fake ``discord.Interaction`` objects built from ``mocker`` mocks
- Raw command payload builders for commands, subcommands and groups
- Bot fixtures in the not-started and logged-in states
- ``CommandInvocation`` factory for node-level tests

Architecture Notes
------------------
- Unit tests use mocks (fast, isolated, no network)
- Storage tests use an in-memory SQLite database through aiosqlite
"""

from __future__ import annotations

import asyncio
import os
from typing import Any, Dict, List, Optional, Sequence, Set

import discord
import pytest
import pytest_asyncio

from switchboard.bot.bot import Bot
from switchboard.interaction.hook import InteractionHook
from switchboard.interaction.invocation import CommandInvocation

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ.setdefault("ENVIRONMENT", "testing")
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


# ============================================================================
# GATEWAY FAKE
# ============================================================================


class FakeGatewayClient:
    """
    In-memory gateway client.

    ``connect()`` blocks until ``close()``; ``mark_ready()`` flips
    ``is_ready()`` the way the first gateway READY event would.
    """

    def __init__(self, bot: Bot) -> None:
        self.bot = bot
        self.user = "TestBot#0001"
        self.application_id = 999
        self.latency = 0.042
        self.logged_in_with: Optional[str] = None
        self.closed = False
        self.set_command_calls: List[Dict[str, Any]] = []
        self.fail_scopes: Set[Optional[int]] = set()
        self._ready = False
        self._closed_event = asyncio.Event()

    async def login(self, token: str) -> None:
        self.logged_in_with = token

    async def connect(self, *, reconnect: bool = True) -> None:
        await self._closed_event.wait()

    async def close(self) -> None:
        self.closed = True
        self._ready = False
        self._closed_event.set()

    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        self._ready = True

    async def set_commands(
        self,
        payload: Sequence[Dict[str, Any]],
        guild_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        self.set_command_calls.append({"guild_id": guild_id, "payload": list(payload)})
        if guild_id in self.fail_scopes:
            raise discord.DiscordException(f"set failed for {guild_id}")
        return [dict(entry, id=str(index)) for index, entry in enumerate(payload)]


# ============================================================================
# PAYLOAD BUILDERS
# ============================================================================


def build_command_data(
    name: str,
    *,
    group: Optional[str] = None,
    subcommand: Optional[str] = None,
    options: Optional[List[Dict[str, Any]]] = None,
    command_type: int = 1,
) -> Dict[str, Any]:
    """Raw ``interaction.data`` for a (possibly nested) command invocation."""
    leaf: List[Dict[str, Any]] = list(options or [])
    if subcommand is not None:
        leaf = [{"name": subcommand, "type": 1, "options": leaf}]
    if group is not None:
        leaf = [{"name": group, "type": 2, "options": leaf}]
    return {"id": "1", "name": name, "type": command_type, "options": leaf}


@pytest.fixture
def command_data():
    return build_command_data


# ============================================================================
# INTERACTION FAKES
# ============================================================================


@pytest.fixture
def interaction_factory(mocker):
    """
    Build a fake ``discord.Interaction``.

    Usage:
        interaction = interaction_factory(data=command_data("ping"))
        interaction = interaction_factory(responded=True)
    """

    def _factory(
        *,
        type: discord.InteractionType = discord.InteractionType.application_command,
        data: Optional[Dict[str, Any]] = None,
        responded: bool = False,
        user_id: int = 987654321,
        guild_id: Optional[int] = 111222333,
        interaction_id: int = 555,
    ):
        interaction = mocker.MagicMock()
        interaction.type = type
        interaction.data = data if data is not None else build_command_data("ping")
        interaction.id = interaction_id
        interaction.guild_id = guild_id
        interaction.channel_id = 444555666
        interaction.user = mocker.MagicMock()
        interaction.user.id = user_id

        interaction.response = mocker.MagicMock()
        interaction.response.is_done = mocker.MagicMock(return_value=responded)
        interaction.response.send_message = mocker.AsyncMock()
        interaction.response.autocomplete = mocker.AsyncMock()
        interaction.edit_original_response = mocker.AsyncMock()
        interaction.followup = mocker.MagicMock()
        interaction.followup.send = mocker.AsyncMock()
        return interaction

    return _factory


# ============================================================================
# BOT FIXTURES
# ============================================================================


async def shutdown_gateway(bot: Bot) -> None:
    """Close the fake gateway and wait for the background connection task."""
    if not bot.client.closed:
        await bot.client.close()
    await bot.wait_until_closed()


@pytest.fixture
def close_gateway():
    """For tests that call ``bot.start()`` themselves."""
    return shutdown_gateway


@pytest.fixture
def bot():
    """
    Not-started Bot wired to a FakeGatewayClient.

    Scope: function
    """
    return Bot(token="test-token", client_factory=FakeGatewayClient)


@pytest.fixture
def bot_factory():
    """Build extra Bots (custom style, hook factory, storage) on the fake gateway."""

    def _factory(**kwargs) -> Bot:
        kwargs.setdefault("token", "test-token")
        return Bot(client_factory=FakeGatewayClient, **kwargs)

    return _factory


@pytest_asyncio.fixture
async def ready_bot(bot):
    """
    Bot that has logged in and whose gateway reports ready (no ready sequence run).

    Teardown closes the fake gateway so no connection task outlives the test.
    """
    await bot.start()
    bot.client.mark_ready()
    yield bot

    await shutdown_gateway(bot)


@pytest.fixture
def hook_factory(bot, interaction_factory):
    def _factory(**kwargs) -> InteractionHook:
        return InteractionHook(bot, interaction_factory(**kwargs))

    return _factory


@pytest.fixture
def invocation_factory(hook_factory):
    """
    Build a ``CommandInvocation`` from raw command arguments.

    Usage:
        invocation = invocation_factory("settings", group="role", subcommand="add")
    """

    def _factory(
        name: str,
        *,
        group: Optional[str] = None,
        subcommand: Optional[str] = None,
        options: Optional[List[Dict[str, Any]]] = None,
        type: discord.InteractionType = discord.InteractionType.application_command,
        responded: bool = False,
    ) -> CommandInvocation:
        hook = hook_factory(
            type=type,
            data=build_command_data(name, group=group, subcommand=subcommand, options=options),
            responded=responded,
        )
        return CommandInvocation.from_hook(hook)

    return _factory
