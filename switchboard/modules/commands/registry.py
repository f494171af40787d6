"""
Command registry: the set of top-level command nodes a bot exposes.

Owns name-keyed top-level nodes, decides each node's deployment scopes and
pushes the resulting command sets to Discord. Synchronization is a full
overwrite per scope (one remote call for the global scope, one per guild);
nothing is diffed, so calling it twice performs the remote calls twice.
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from switchboard.core.exceptions import CommandRegistrationError
from switchboard.core.logging.logger import get_logger
from switchboard.core.timing import measure_time
from switchboard.interaction.nodes import InteractionNode

logger = get_logger(__name__)


class CommandSink(Protocol):
    async def set_commands(
        self,
        payload: Sequence[Dict[str, Any]],
        guild_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...


class CommandRegistry:
    """
    Name-keyed collection of top-level commands with deployment defaults.

    Args:
        default_guild_ids: Scopes for nodes that declare none (empty/None => global)
        default_contexts: ``contexts`` applied to nodes that declare none
        default_integration_types: ``integration_types`` applied to nodes that declare none
    """

    def __init__(
        self,
        *,
        default_guild_ids: Optional[Sequence[int]] = None,
        default_contexts: Optional[Sequence[int]] = None,
        default_integration_types: Optional[Sequence[int]] = None,
    ) -> None:
        self.default_guild_ids = list(default_guild_ids) if default_guild_ids else None
        self.default_contexts = list(default_contexts) if default_contexts is not None else None
        self.default_integration_types = (
            list(default_integration_types) if default_integration_types is not None else None
        )
        self._commands: Dict[str, InteractionNode] = {}

    # --------------------------------------------------------------- #
    # Collection API
    # --------------------------------------------------------------- #

    def add(self, node: InteractionNode) -> None:
        if not node.is_top_level:
            raise ValueError(
                f"Only top-level commands can be registered, got {node.kind.name} {node.name!r}"
            )
        if node.name in self._commands:
            logger.warning(
                f"Command '{node.name}' registered twice; replacing the previous definition",
                extra={"command_name": node.name},
            )
        self._commands[node.name] = node

    def add_all(self, nodes: Iterable[InteractionNode]) -> None:
        for node in nodes:
            self.add(node)

    def get(self, name: str) -> Optional[InteractionNode]:
        return self._commands.get(name)

    def remove(self, name: str) -> Optional[InteractionNode]:
        return self._commands.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[InteractionNode]:
        return iter(list(self._commands.values()))

    # --------------------------------------------------------------- #
    # Scoping
    # --------------------------------------------------------------- #

    def scopes_for(self, node: InteractionNode) -> List[int]:
        """Guild IDs ``node`` deploys to; an empty list means global."""
        if node.guild_ids:
            return list(node.guild_ids)
        return list(self.default_guild_ids or [])

    def partition(self) -> Tuple[List[InteractionNode], Dict[int, List[InteractionNode]]]:
        """Split registered nodes into ``(global_nodes, {guild_id: nodes})``."""
        global_nodes: List[InteractionNode] = []
        by_guild: Dict[int, List[InteractionNode]] = {}

        for node in self._commands.values():
            scopes = self.scopes_for(node)
            if not scopes:
                global_nodes.append(node)
                continue
            for guild_id in scopes:
                by_guild.setdefault(guild_id, []).append(node)

        return global_nodes, by_guild

    def build_payload(self, node: InteractionNode) -> Dict[str, Any]:
        """Node payload with registry defaults filled in where the node is silent."""
        payload = node.to_payload()
        if "contexts" not in payload and self.default_contexts is not None:
            payload["contexts"] = list(self.default_contexts)
        if "integration_types" not in payload and self.default_integration_types is not None:
            payload["integration_types"] = list(self.default_integration_types)
        return payload

    # --------------------------------------------------------------- #
    # Remote synchronization
    # --------------------------------------------------------------- #

    async def synchronize(self, sink: CommandSink) -> int:
        """
        Overwrite the remote command set of every scope.

        Returns:
            Total number of commands Discord reports as registered.

        Raises:
            CommandRegistrationError: if any remote call fails (chained to the cause)
        """
        logger.info("Registering commands...")
        total, took_ms = await measure_time(lambda: self._synchronize(sink))
        logger.info(
            f"Registered {total} commands in total [took {took_ms:.2f}ms]",
            extra={"command_count": total, "duration_ms": round(took_ms, 2)},
        )
        return total

    async def _synchronize(self, sink: CommandSink) -> int:
        global_nodes, by_guild = self.partition()
        total = 0

        total += await self._push(sink, None, global_nodes)
        for guild_id, nodes in by_guild.items():
            total += await self._push(sink, guild_id, nodes)

        return total

    async def _push(
        self,
        sink: CommandSink,
        guild_id: Optional[int],
        nodes: List[InteractionNode],
    ) -> int:
        payload = [self.build_payload(node) for node in nodes]
        try:
            result = await sink.set_commands(payload, guild_id=guild_id)
        except Exception as exc:
            raise CommandRegistrationError(guild_id, len(payload)) from exc

        count = len(result)
        if guild_id is None:
            logger.info(f"Registered {count} global commands.", extra={"command_count": count})
        else:
            logger.info(
                f"Registered {count} commands for guild {guild_id}.",
                extra={"command_count": count, "scope": guild_id},
            )
        return count


__all__ = ["CommandRegistry", "CommandSink"]
