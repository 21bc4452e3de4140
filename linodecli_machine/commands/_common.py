"""Helpers shared by the machine subcommands."""

from __future__ import annotations

import argparse
import os

from ..core.driver import LinodeDriver
from ..core.store import MachineStore


def common_parser() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--storage-path",
        "-s",
        default=os.environ.get("MACHINE_STORAGE_PATH"),
        help="Machine store directory [$MACHINE_STORAGE_PATH]",
    )
    parser.add_argument("--debug", "-D", action="store_true", help="Enable debug logging")
    return parser


def open_store(args) -> MachineStore:
    return MachineStore(getattr(args, "storage_path", None))


def load_driver(args) -> LinodeDriver:
    """Rebuild the driver for an existing machine from its stored record."""
    store = open_store(args)
    return LinodeDriver(store.load(args.name))
