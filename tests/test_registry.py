"""Tests for registries and the inventory."""

import pytest

from remote_ops.errors import ConfigurationError
from remote_ops.models import (
    ExecCommand,
    ExecCommandCollection,
    ExecTask,
    RemoteAddress,
    RemoteCollection,
    TransferTask,
    UploadText,
)
from remote_ops.registry import Inventory, command_registry, remote_registry


class TestRegistry:
    """Tests for a single namespace."""

    def test_add_and_get(self) -> None:
        """Registered nodes are found by name."""
        registry = remote_registry()
        web = registry.add(RemoteAddress(name="web", host="h", user="u"))

        assert registry.get("web") is web
        assert "web" in registry
        assert len(registry) == 1

    def test_duplicate_name_rejected(self) -> None:
        """Names are unique within a namespace."""
        registry = remote_registry()
        registry.add(RemoteAddress(name="web", host="h1", user="u"))

        with pytest.raises(ConfigurationError, match="Duplicate name in remotes: 'web'"):
            registry.add(RemoteAddress(name="web", host="h2", user="u"))

    def test_collection_and_leaf_share_namespace(self) -> None:
        """A collection cannot reuse a leaf's name."""
        registry = remote_registry()
        registry.add(RemoteAddress(name="web", host="h", user="u"))

        with pytest.raises(ConfigurationError, match="Duplicate"):
            registry.add(RemoteCollection("web", []))

    def test_re_adding_same_node_is_noop(self) -> None:
        """Registering the identical node twice is allowed."""
        registry = remote_registry()
        web = RemoteAddress(name="web", host="h", user="u")
        registry.add(web)
        registry.add(web)

        assert len(registry) == 1

    def test_unknown_name(self) -> None:
        """Lookups of missing names name the namespace."""
        with pytest.raises(ConfigurationError, match="Unknown name in commands: 'nope'"):
            command_registry().get("nope")

    def test_wrong_type_rejected(self) -> None:
        """Commands cannot be registered as remotes."""
        with pytest.raises(ConfigurationError, match="Cannot register ExecCommand"):
            remote_registry().add(ExecCommand("up", "uptime"))  # type: ignore[arg-type]

    def test_inline_members_registered(self) -> None:
        """Node values given to a collection are registered with it."""
        registry = remote_registry()
        web = RemoteAddress(name="web", host="h", user="u")
        registry.add(RemoteCollection("all", [web, "db"]))

        assert registry.get("web") is web
        assert registry.names() == ["all", "web"]

    def test_failed_add_registers_nothing(self) -> None:
        """A duplicate inline member leaves the namespace untouched."""
        registry = remote_registry()
        registry.add(RemoteAddress(name="db", host="h1", user="u"))
        web = RemoteAddress(name="web", host="h2", user="u")
        clash = RemoteAddress(name="db", host="h3", user="u")

        with pytest.raises(ConfigurationError, match="Duplicate name in remotes: 'db'"):
            registry.add(RemoteCollection("all", [web, clash]))

        assert registry.names() == ["db"]
        assert registry.get("db").host == "h1"

    def test_nested_inline_members_registered(self) -> None:
        """Node values inside nested collection values are registered too."""
        registry = remote_registry()
        web = RemoteAddress(name="web", host="h", user="u")
        registry.add(RemoteCollection("all", [RemoteCollection("front", [web])]))

        assert registry.names() == ["all", "front", "web"]

    def test_iteration_in_name_order(self) -> None:
        """Iteration and collections() follow name order."""
        registry = remote_registry()
        registry.add(RemoteAddress(name="zeta", host="h", user="u"))
        registry.add(RemoteCollection("beta", ["zeta"]))
        registry.add(RemoteCollection("alpha", ["zeta"]))

        assert [n.name for n in registry] == ["alpha", "beta", "zeta"]
        assert [c.name for c in registry.collections()] == ["alpha", "beta"]


class TestInventory:
    """Tests for the full declaration set."""

    def test_duplicate_task(self, inventory: Inventory) -> None:
        """Task names are unique."""
        inventory.add_task(ExecTask("t", remote="all", command="check"))

        with pytest.raises(ConfigurationError, match="Duplicate name in tasks"):
            inventory.add_task(ExecTask("t", remote="all", command="deploy"))

    def test_unknown_task(self, inventory: Inventory) -> None:
        """Missing tasks raise a configuration error."""
        with pytest.raises(ConfigurationError, match="Unknown task: 'missing'"):
            inventory.get_task("missing")

    def test_tasks_sorted(self, inventory: Inventory) -> None:
        """Tasks are listed by name."""
        inventory.add_task(ExecTask("zz", remote="all", command="check"))
        inventory.add_task(ExecTask("aa", remote="all", command="check"))

        assert [t.name for t in inventory.tasks] == ["aa", "zz"]

    def test_validate_ok(self, inventory: Inventory) -> None:
        """A consistent inventory validates."""
        inventory.files.add(UploadText("motd", "hi", "motd", "/etc"))
        inventory.add_task(ExecTask("check", remote="all", command="both"))
        inventory.add_task(TransferTask("push", remote="r1", files="motd"))

        inventory.validate()

    def test_validate_dangling_member(self, inventory: Inventory) -> None:
        """Collections referencing unknown names fail validation."""
        inventory.remotes.add(RemoteCollection("broken", ["ghost"]))

        with pytest.raises(ConfigurationError, match="ghost"):
            inventory.validate()

    def test_validate_cycle(self, inventory: Inventory) -> None:
        """Cycles are found during validation."""
        inventory.commands.add(ExecCommandCollection("x", ["y"]))
        inventory.commands.add(ExecCommandCollection("y", ["x"]))

        with pytest.raises(ConfigurationError, match="Cyclic reference in commands"):
            inventory.validate()

    def test_validate_task_references(self, inventory: Inventory) -> None:
        """Tasks pointing at unknown commands fail validation."""
        inventory.add_task(ExecTask("bad", remote="all", command="missing"))

        with pytest.raises(ConfigurationError, match="missing"):
            inventory.validate()

    def test_validate_transfer_task_references(self, inventory: Inventory) -> None:
        """Tasks pointing at unknown file commands fail validation."""
        inventory.add_task(TransferTask("bad", remote="all", files="nothing"))

        with pytest.raises(ConfigurationError, match="Unknown name in files"):
            inventory.validate()

