"""Power and removal commands: start, stop, restart, kill, rm."""

from __future__ import annotations

import argparse
import sys

from ..core import colors
from ._common import load_driver, open_store

POWER_VERBS = (
    ("start", "Start a machine", "start", "Started"),
    ("stop", "Stop a machine", "stop", "Stopped"),
    ("restart", "Restart a machine", "restart", "Restarted"),
    ("kill", "Kill a machine", "kill", "Killed"),
)


def register(subparsers: argparse._SubParsersAction, _config, parent: argparse.ArgumentParser) -> None:
    for command, help_text, method, past in POWER_VERBS:
        parser = subparsers.add_parser(command, parents=[parent], help=help_text)
        parser.add_argument("name", help="Machine name")
        parser.set_defaults(func=_power(method, past))

    rm_parser = subparsers.add_parser("rm", parents=[parent], help="Remove a machine")
    rm_parser.add_argument("name", help="Machine name")
    rm_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Drop the local record even if the machine has no Linode",
    )
    rm_parser.set_defaults(func=_cmd_rm)


def _power(method: str, past: str):
    def handler(args) -> None:
        driver = load_driver(args)
        getattr(driver, method)()
        print(colors.success(f"✓ {past} {args.name}"))

    return handler


def _cmd_rm(args) -> None:
    store = open_store(args)
    driver = load_driver(args)
    if driver.config.instance_id is not None:
        driver.remove()
    elif not args.force:
        print(colors.warning(f"Machine {args.name} has no Linode; use --force to drop the record"), file=sys.stderr)
        return
    store.remove(args.name)
    print(colors.success(f"✓ Removed {args.name}"))
