"""Entry point for remote_ops.

    remote-ops -c inventory.yaml list
    remote-ops -c inventory.yaml plan deploy
    remote-ops -c inventory.yaml run deploy [--prefix-lines]
"""

import argparse
import asyncio
import dataclasses
import logging
import sys

from remote_ops.config import Config
from remote_ops.errors import RemoteOpsError
from remote_ops.models import ExecTask
from remote_ops.services import Orchestrator
from remote_ops.utils.console import ColorfulFormatter

logger = logging.getLogger("remote_ops")


def configure_logging(level: str, use_colors: bool) -> None:
    """Configure colorful stderr logging for the remote_ops package."""
    if not sys.stderr.isatty():
        use_colors = False

    package_logger = logging.getLogger("remote_ops")
    package_logger.setLevel(getattr(logging, level, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)
    logging.getLogger("asyncssh.sftp").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="remote-ops",
        description="Run declared commands and file transfers on SSH remotes",
    )
    parser.add_argument(
        "-c",
        "--inventory",
        help="YAML inventory file (default: $REMOTE_OPS_INVENTORY)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="action", required=True)
    subparsers.add_parser("list", help="List declared remotes, commands, files and tasks")

    plan = subparsers.add_parser("plan", help="Show what a task would run, without connecting")
    plan.add_argument("task")

    run = subparsers.add_parser("run", help="Run a task")
    run.add_argument("task")
    run.add_argument(
        "--prefix-lines",
        action="store_true",
        help="Prefix output lines with user@host:port (exec tasks)",
    )
    return parser


def _list(orchestrator: Orchestrator) -> None:
    inventory = orchestrator.inventory
    for title, names in (
        ("remotes", inventory.remotes.names()),
        ("commands", inventory.commands.names()),
        ("files", inventory.files.names()),
        ("tasks", [task.name for task in inventory.tasks]),
    ):
        print(f"{title}:")
        for name in names:
            print(f"  {name}")


def _plan(orchestrator: Orchestrator, task_name: str) -> None:
    plan = orchestrator.resolve(task_name)
    print("remotes:")
    for remote in plan.remotes:
        print(f"  {remote.name} ({remote.address})")
    print("operations:")
    for operation in plan.operations:
        print(f"  {operation.name}")
        for command in getattr(operation, "commands", ()):
            print(f"    $ {command}")


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface.

    Returns:
        Process exit status: 0 on success, 1 on any failure
    """
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env(inventory_path=args.inventory)
    except FileNotFoundError as e:
        configure_logging("INFO", use_colors=True)
        logger.error("%s", e)
        return 1

    level = "DEBUG" if args.verbose else config.settings.log_level
    configure_logging(level, config.settings.log_colors)

    try:
        orchestrator = Orchestrator(
            config.get_inventory(),
            config.host_keys,
            separator=config.separator,
        )
        if args.action == "list":
            _list(orchestrator)
        elif args.action == "plan":
            _plan(orchestrator, args.task)
        else:
            task = orchestrator.inventory.get_task(args.task)
            if args.prefix_lines and isinstance(task, ExecTask):
                task = dataclasses.replace(task, prefix_lines=True)
            asyncio.run(orchestrator.run_task(task))
    except (RemoteOpsError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
