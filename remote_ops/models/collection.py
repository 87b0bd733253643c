"""Shared membership handling for collection nodes."""

from typing import Any

from remote_ops.errors import ConfigurationError


def split_members(
    owner: str,
    members: Any,
    node_types: tuple[type, ...],
) -> tuple[tuple[str, ...], tuple[Any, ...]]:
    """Split collection members into name references and direct node values.

    Args:
        owner: Name of the collection being built
        members: Iterable of member names or node values
        node_types: Node classes allowed as direct values

    Returns:
        Tuple of (member names ordered by name, direct node values)

    Raises:
        ConfigurationError: On an empty name or a member of the wrong type
    """
    if isinstance(members, (str, *node_types)):
        members = (members,)

    names: set[str] = set()
    inline: list[Any] = []
    for member in members:
        if isinstance(member, str):
            if not member.strip():
                raise ConfigurationError(f"'{owner}': empty member reference")
            names.add(member)
        elif isinstance(member, node_types):
            names.add(member.name)
            inline.append(member)
        else:
            raise ConfigurationError(
                f"'{owner}': cannot hold member of type {type(member).__name__}"
            )
    return tuple(sorted(names)), tuple(inline)
