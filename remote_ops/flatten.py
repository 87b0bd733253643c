"""Resolve a node tree to its leaves.

One algorithm serves remotes, exec commands and file commands: the
registry passed in decides which type counts as a collection.

Result order is the lexical order of leaf names, never declaration order,
so repeated runs visit remotes and operations identically.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from remote_ops.errors import ConfigurationError

if TYPE_CHECKING:
    from remote_ops.registry import Registry

logger = logging.getLogger(__name__)


def flatten(registry: "Registry[Any]", node: Any) -> tuple[Any, ...]:
    """Resolve a node, or a node name, to its deduplicated leaves.

    Args:
        registry: Registry the node's members are resolved against
        node: Node value or name registered in ``registry``

    Returns:
        Leaves sorted by name, each node appearing once

    Raises:
        ConfigurationError: On unknown member names or cyclic collections
    """
    if isinstance(node, str):
        node = registry.get(node)

    found: dict[int, Any] = {}
    _collect(registry, node, found, [])
    leaves = tuple(sorted(found.values(), key=lambda leaf: leaf.name))
    logger.debug(
        "Flattened %s '%s' to %d leaf/leaves", registry.namespace, node.name, len(leaves)
    )
    return leaves


def flatten_all(registry: "Registry[Any]", nodes: Iterable[Any]) -> tuple[Any, ...]:
    """Union of ``flatten`` over several roots, ordered by name."""
    found: dict[int, Any] = {}
    for node in nodes:
        for leaf in flatten(registry, node):
            found[id(leaf)] = leaf
    return tuple(sorted(found.values(), key=lambda leaf: leaf.name))


def _collect(
    registry: "Registry[Any]",
    node: Any,
    found: dict[int, Any],
    path: list[str],
) -> None:
    """Depth-first walk adding leaves to ``found``.

    ``path`` holds the collection names currently being expanded.
    """
    if not registry.is_collection(node):
        if not isinstance(node, registry.leaf_types):
            raise ConfigurationError(
                f"{type(node).__name__} does not belong in {registry.namespace}"
            )
        found[id(node)] = node
        return

    if node.name in path:
        cycle = " -> ".join([*path[path.index(node.name):], node.name])
        raise ConfigurationError(
            f"Cyclic reference in {registry.namespace}: {cycle}"
        )

    # Node values the collection was built from take precedence over the registry
    inline = {member.name: member for member in node.inline}
    path.append(node.name)
    try:
        for member_name in node.members:
            if member_name in inline:
                member = inline[member_name]
            else:
                member = registry.get(member_name)
            _collect(registry, member, found, path)
    finally:
        path.pop()
