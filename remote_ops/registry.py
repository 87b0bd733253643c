"""Name-keyed node registries.

Collections refer to their members by name, so a node can be shared by
several collections without being copied. Each namespace (remotes, exec
commands, file commands) has its own registry and names are unique inside
it.
"""

import logging
from collections.abc import Iterator
from typing import Generic, TypeVar

from remote_ops.errors import ConfigurationError
from remote_ops.flatten import flatten
from remote_ops.models import (
    DownloadFile,
    ExecCommand,
    ExecCommandCollection,
    ExecTask,
    FileCommandCollection,
    RemoteAddress,
    RemoteCollection,
    Task,
    TransferTask,
    UploadFile,
    UploadText,
)

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


class Registry(Generic[NodeT]):
    """Flat mapping from name to node for one namespace."""

    def __init__(
        self,
        namespace: str,
        leaf_types: tuple[type, ...],
        collection_type: type,
    ) -> None:
        """Initialize an empty registry.

        Args:
            namespace: Human readable namespace, used in error messages
            leaf_types: Node classes accepted as leaves
            collection_type: Node class accepted as collection
        """
        self.namespace = namespace
        self.leaf_types = leaf_types
        self.collection_type = collection_type
        self._nodes: dict[str, NodeT] = {}

    def add(self, node: NodeT) -> NodeT:
        """Register a node and any node values its collection was built from.

        Returns:
            The registered node

        Nothing is registered unless every name checks out.

        Raises:
            ConfigurationError: If a name is taken by a different node
        """
        pending: dict[str, NodeT] = {}
        self._stage(node, pending)

        for name, staged in pending.items():
            self._nodes[name] = staged
            logger.debug(
                "Registered %s '%s' (%s)", self.namespace, name, type(staged).__name__
            )
        return node

    def _stage(self, node: NodeT, pending: dict[str, NodeT]) -> None:
        """Collect ``node`` and its inline members into ``pending``, checking names."""
        if not isinstance(node, (*self.leaf_types, self.collection_type)):
            raise ConfigurationError(
                f"Cannot register {type(node).__name__} in {self.namespace}"
            )

        name = node.name  # type: ignore[attr-defined]
        existing = self._nodes.get(name, pending.get(name))
        if existing is node:
            return
        if existing is not None:
            raise ConfigurationError(f"Duplicate name in {self.namespace}: '{name}'")

        pending[name] = node
        if self.is_collection(node):
            for member in node.inline:  # type: ignore[attr-defined]
                self._stage(member, pending)

    def is_collection(self, node: object) -> bool:
        """Check if node is this namespace's collection type."""
        return isinstance(node, self.collection_type)

    def get(self, name: str) -> NodeT:
        """Look up a node by name.

        Raises:
            ConfigurationError: If no node has that name
        """
        try:
            return self._nodes[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown name in {self.namespace}: '{name}'"
            ) from None

    def names(self) -> list[str]:
        """Return registered names in lexical order."""
        return sorted(self._nodes)

    def collections(self) -> list[NodeT]:
        """Return registered collections in name order."""
        return [n for n in self if self.is_collection(n)]

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[NodeT]:
        return (self._nodes[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._nodes)


def remote_registry() -> "Registry[RemoteAddress | RemoteCollection]":
    """Create an empty remote registry."""
    return Registry("remotes", (RemoteAddress,), RemoteCollection)


def command_registry() -> "Registry[ExecCommand | ExecCommandCollection]":
    """Create an empty exec command registry."""
    return Registry("commands", (ExecCommand,), ExecCommandCollection)


def file_registry() -> "Registry[UploadFile | UploadText | DownloadFile | FileCommandCollection]":
    """Create an empty file command registry."""
    return Registry("files", (UploadFile, UploadText, DownloadFile), FileCommandCollection)


class Inventory:
    """All declared remotes, commands, file commands and tasks."""

    def __init__(self) -> None:
        self.remotes = remote_registry()
        self.commands = command_registry()
        self.files = file_registry()
        self._tasks: dict[str, Task] = {}

    def add_task(self, task: Task) -> Task:
        """Register a task.

        Raises:
            ConfigurationError: If the task name is already taken
        """
        if task.name in self._tasks:
            raise ConfigurationError(f"Duplicate name in tasks: '{task.name}'")
        self._tasks[task.name] = task
        return task

    def get_task(self, name: str) -> Task:
        """Look up a task by name.

        Raises:
            ConfigurationError: If no task has that name
        """
        try:
            return self._tasks[name]
        except KeyError:
            raise ConfigurationError(f"Unknown task: '{name}'") from None

    @property
    def tasks(self) -> list[Task]:
        """Tasks in name order."""
        return [self._tasks[name] for name in sorted(self._tasks)]

    def validate(self) -> None:
        """Resolve every collection and task reference.

        Surfaces dangling references and cycles before any connection is
        opened.

        Raises:
            ConfigurationError: On the first problem found
        """
        for registry in (self.remotes, self.commands, self.files):
            for collection in registry.collections():
                flatten(registry, collection)

        for task in self.tasks:
            self.remotes.get(task.remote)
            if isinstance(task, ExecTask):
                self.commands.get(task.command)
            elif isinstance(task, TransferTask):
                self.files.get(task.files)
            else:
                raise TypeError(f"Unsupported task type: {type(task).__name__}")

        logger.info(
            "Inventory valid (remotes=%d, commands=%d, files=%d, tasks=%d)",
            len(self.remotes),
            len(self.commands),
            len(self.files),
            len(self._tasks),
        )
