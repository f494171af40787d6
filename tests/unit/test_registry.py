"""
Unit tests for CommandRegistry: collection semantics, scoping and
synchronization with the remote command-set call.
"""

import logging

import pytest

from switchboard.core.exceptions import CommandRegistrationError
from switchboard.interaction.nodes import parent_command, slash_command, subcommand
from switchboard.modules.commands.registry import CommandRegistry


async def _noop(hook):
    return None


def _command(name, **kwargs):
    return slash_command(name, f"{name} command", _noop, **kwargs)


class TestCollection:
    def test_add_and_get(self):
        registry = CommandRegistry()
        node = _command("ping")

        registry.add(node)

        assert registry.get("ping") is node
        assert "ping" in registry
        assert len(registry) == 1
        assert list(registry) == [node]

    def test_duplicate_name_overwrites_and_warns(self, caplog):
        registry = CommandRegistry()
        first, second = _command("ping"), _command("ping")

        with caplog.at_level(logging.WARNING, logger="switchboard.modules.commands.registry"):
            registry.add(first)
            registry.add(second)

        assert registry.get("ping") is second
        assert len(registry) == 1
        assert "registered twice" in caplog.text

    def test_rejects_nested_nodes(self):
        registry = CommandRegistry()

        with pytest.raises(ValueError):
            registry.add(subcommand("show", "Show", _noop))

    def test_add_all_keeps_order(self):
        registry = CommandRegistry()
        nodes = [_command("a"), _command("b"), _command("c")]

        registry.add_all(nodes)

        assert [node.name for node in registry] == ["a", "b", "c"]

    def test_remove(self):
        registry = CommandRegistry()
        registry.add(_command("ping"))

        assert registry.remove("ping") is not None
        assert "ping" not in registry
        assert registry.remove("ping") is None


class TestPartition:
    def test_no_scopes_is_global(self):
        registry = CommandRegistry()
        registry.add(_command("ping"))

        global_nodes, by_guild = registry.partition()

        assert [node.name for node in global_nodes] == ["ping"]
        assert by_guild == {}

    def test_explicit_scopes(self):
        registry = CommandRegistry()
        registry.add(_command("admin", guild_ids=[1, 2]))
        registry.add(_command("ping"))

        global_nodes, by_guild = registry.partition()

        assert [node.name for node in global_nodes] == ["ping"]
        assert {guild: [n.name for n in nodes] for guild, nodes in by_guild.items()} == {
            1: ["admin"],
            2: ["admin"],
        }

    def test_registry_default_scopes(self):
        registry = CommandRegistry(default_guild_ids=[7])
        registry.add(_command("ping"))
        registry.add(_command("admin", guild_ids=[1]))

        global_nodes, by_guild = registry.partition()

        assert global_nodes == []
        assert sorted(by_guild) == [1, 7]
        assert [n.name for n in by_guild[7]] == ["ping"]


class TestPayloadDefaults:
    def test_defaults_fill_missing_fields(self):
        registry = CommandRegistry(default_contexts=[0, 1], default_integration_types=[0])

        payload = registry.build_payload(_command("ping"))

        assert payload["contexts"] == [0, 1]
        assert payload["integration_types"] == [0]

    def test_node_values_win_over_defaults(self):
        registry = CommandRegistry(default_contexts=[0, 1], default_integration_types=[0])

        payload = registry.build_payload(_command("ping", contexts=[2], integration_types=[1]))

        assert payload["contexts"] == [2]
        assert payload["integration_types"] == [1]

    def test_parent_payload_gets_defaults(self):
        registry = CommandRegistry(default_contexts=[0])
        node = parent_command("settings", "Settings", [subcommand("show", "Show", _noop)])

        assert registry.build_payload(node)["contexts"] == [0]


@pytest.mark.asyncio
class TestSynchronize:
    async def test_one_call_per_scope(self, bot):
        registry = CommandRegistry()
        registry.add_all([_command("ping"), _command("admin", guild_ids=[1, 2])])

        total = await registry.synchronize(bot.client)

        calls = bot.client.set_command_calls
        assert [call["guild_id"] for call in calls] == [None, 1, 2]
        assert [entry["name"] for entry in calls[0]["payload"]] == ["ping"]
        assert total == 3

    async def test_global_set_called_even_when_empty(self, bot):
        registry = CommandRegistry()
        registry.add(_command("admin", guild_ids=[1]))

        await registry.synchronize(bot.client)

        assert bot.client.set_command_calls[0] == {"guild_id": None, "payload": []}

    async def test_twice_means_two_remote_sets(self, bot):
        registry = CommandRegistry()
        registry.add(_command("ping"))

        first = await registry.synchronize(bot.client)
        second = await registry.synchronize(bot.client)

        assert len(bot.client.set_command_calls) == 2
        assert first == second == 1

    async def test_remote_failure_raises_registration_error(self, bot):
        registry = CommandRegistry()
        registry.add(_command("admin", guild_ids=[42]))
        bot.client.fail_scopes.add(42)

        with pytest.raises(CommandRegistrationError) as exc_info:
            await registry.synchronize(bot.client)

        assert exc_info.value.scope == 42
        assert exc_info.value.command_count == 1
        assert exc_info.value.__cause__ is not None
